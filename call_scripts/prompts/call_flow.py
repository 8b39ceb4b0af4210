"""
Call flow content for the energy-brokerage cold-call script.

Wording, stages and response edges are configuration, not logic. Tokens
like ``{{contact.first_name}}`` are filled in by the renderer; responses
pointing at ``OPENER_TARGET`` follow the operator's selected opener.
"""

from call_scripts.conversation.graph import DialogGraph, Phase
from call_scripts.conversation.navigator import Opener
from call_scripts.schemas.call_schema import ResolvedContext
from call_scripts.schemas.dialog_schema import (
    OPENER_TARGET,
    AmountPrompt,
    ComputedText,
    DialogNode,
    NodeText,
    Response,
    StaticText,
)

PAUSE = '<span class="pause-indicator"></span>'


def _tone(label: str, mood: str = "confident") -> str:
    return f'<span class="tone-marker {mood}">{label}</span>'


def _node(node_id: str, stage: str, text: "str | NodeText", *responses: tuple[str, str],
          amount_prompt: "AmountPrompt | None" = None) -> DialogNode:
    body = StaticText(text) if isinstance(text, str) else text
    return DialogNode(
        id=node_id,
        stage=stage,
        text=body,
        responses=tuple(Response(label, nxt) for label, nxt in responses),
        amount_prompt=amount_prompt,
    )


def sized_gatekeeper_line(employees: int) -> str:
    """Word the bill the way a business of this size talks about it."""
    if employees < 20:
        return "Yeah, your power bills."
    if employees < 200:
        return "Yeah, your electricity bills."
    return "Yeah, your electric service."


def _gatekeeper_clarify_bills(resolved: ResolvedContext) -> str:
    return sized_gatekeeper_line(resolved.account.employees) + " Who handles those there?"


FLOW_NODES: tuple[DialogNode, ...] = (
    _node(
        "start", "Ready",
        "Click 'Dial' to begin the call.",
        ("Dial", "pre_call_qualification"),
    ),
    _node(
        "pre_call_qualification", "Pre-Call Prep",
        "<strong>Before we dial... qualify this prospect.</strong><br><br>"
        "<em>Think through these questions:</em><br><br>"
        "• Who are you calling? (Decision maker / Gatekeeper / Unknown)<br>"
        "• What's {{account.name}}'s industry and size?<br>"
        "• What do you know about their supplier and renewal date?<br><br>"
        "<strong>Remember:</strong> position as a second opinion, not a replacement. "
        "We run competitive events across 100+ suppliers.",
        ("Ready - I have answers", "dialing"),
        ("I need more time", "start"),
    ),
    _node(
        "dialing", "Connecting",
        "Dialing {{contact.phone}}... Ringing...",
        ("Call connected", "hook"),
        ("Voicemail", "voicemail"),
        ("No answer", "no_answer"),
    ),
    _node(
        "hook", "Opening",
        "Hi, is this {{contact.first_name}}?",
        ("Yes, speaking", OPENER_TARGET),
        ("Who's calling?", OPENER_TARGET),
        ("Gatekeeper", "gatekeeper_intro"),
        ("Voicemail", "voicemail"),
    ),
    # ===== Openers =====
    _node(
        "pattern_interrupt_opening", "Opening - Quick Intro & Permission",
        f"Hey {{{{contact.first_name}}}}! This is {{{{agent.first_name}}}}.<br><br>{PAUSE} "
        "<em>[PAUSE 1 second]</em><br><br>"
        "Real quick... did I catch you at a bad time... or do you have about 30 seconds?",
        ("Yeah, go ahead", "opening_industry_context"),
        ("I got 30 seconds", "opening_industry_context"),
        ("Actually, not a good time", "reschedule_callback"),
        ("What is this about?", "opening_industry_context"),
    ),
    _node(
        "opener_direct_question", "Opening",
        f"{_tone('Direct Question (Second Opinion)')}<br><br>"
        f"Hi {{{{contact.first_name}}}}, this is (your name). {PAUSE} Real quick... most "
        "{{account.industry}} companies your size are either overpaying on electricity or "
        "don't see what the full market is quoting. Has anyone run a second opinion on your rates?",
        ("No, we haven't", "broker_audit_reframe"),
        ("We use a broker", "broker_audit_intro"),
        ("Not sure what we spend", "situation_discovery"),
        ("Not interested", "objection_not_interested"),
    ),
    _node(
        "opener_social_proof", "Opening",
        f"{_tone('Market Data Opener')}<br><br>"
        f"Hey {{{{contact.first_name}}}}, this is (your name). {PAUSE} We just ran analysis on "
        "{{account.industry}} companies around {{account.city}}, and most are paying 15-20% "
        "more than market rates. Have costs been creeping up on your side?",
        ("Yes, costs have been going up", "situation_discovery"),
        ("We use a broker", "broker_audit_intro"),
        ("Tell me more", "broker_audit_reframe"),
        ("Not interested", "objection_not_interested"),
    ),
    _node(
        "opener_quick_check", "Opening",
        f"{_tone('Audit Positioning Opener')}<br><br>"
        f"Hi {{{{contact.first_name}}}}, this is (your name). {PAUSE} What we do is run broker "
        "audits, basically a market check on your current energy rates. "
        "Have you ever had one done for (company name)?",
        ("No, never heard of that", "broker_audit_reframe"),
        ("What exactly is that?", "broker_audit_reframe"),
        ("We use a broker already", "broker_audit_intro"),
        ("Not interested", "objection_not_interested"),
    ),
    _node(
        "opener_transparent", "Opening",
        f"{_tone('Transparent Opener', 'friendly')}<br><br>"
        f"Hi {{{{contact.first_name}}}}, this is (your name). {PAUSE} I know this is random, "
        "but I'm calling about electricity costs. Full transparency, this is a sales call. "
        "Is now a terrible time?",
        ("Now is fine / I've got a minute", "opening_industry_context"),
        ("Actually, now is bad", "reschedule_callback"),
        ("Not interested", "objection_not_interested"),
    ),
    _node(
        "opening_industry_context", "Opening - Industry Context & Responsibility",
        "Perfect. So {{contact.first_name}}, I work with {{account.industry}} companies on "
        f"electricity procurement.<br><br>{PAUSE} <em>[PAUSE 1 second]</em><br><br>"
        "Are you responsible for electricity agreements and contract renewals?",
        ("Yeah, that's me", "situation_discovery"),
        ("That's someone else", "gatekeeper_intro"),
        ("We use a broker", "broker_audit_intro"),
    ),
    # ===== Gatekeeper =====
    _node(
        "gatekeeper_intro", "Gatekeeper",
        "{{day.part}}, this is {{agent.first_name}}. I'm calling about {{account.name}}'s "
        "power bills. Who handles those there?",
        ("That's [name]", "gatekeeper_request_transfer"),
        ("Power bills?", "gatekeeper_electricity_confusion"),
        ("What is this about?", "gatekeeper_clarify_purpose"),
    ),
    _node(
        "gatekeeper_electricity_confusion", "Gatekeeper - Clarify Bills",
        ComputedText(_gatekeeper_clarify_bills),
        ("That's [name]", "gatekeeper_request_transfer"),
        ("What about the bills?", "gatekeeper_clarify_purpose"),
    ),
    _node(
        "gatekeeper_clarify_purpose", "Gatekeeper - Clarify Purpose",
        "Someone who looks at the electricity bills and decides on suppliers or contracts. "
        "Who handles that there?",
        ("That's [name]", "gatekeeper_request_transfer"),
        ("They're not available", "gatekeeper_busy"),
    ),
    _node(
        "gatekeeper_request_transfer", "Gatekeeper - Request Transfer",
        "Perfect. Can you connect me with them please?",
        ("They transfer you", "gatekeeper_transferred"),
        ("They're busy", "gatekeeper_busy"),
    ),
    _node(
        "gatekeeper_transferred", "Gatekeeper - Transfer Complete",
        "<strong>HOLD FOR TRANSFER</strong> - You're being connected to the decision maker.",
        ("Connected to decision maker", OPENER_TARGET),
        ("Wrong person / gatekeeper again", "gatekeeper_intro"),
        ("Transfer failed", "no_answer"),
    ),
    _node(
        "gatekeeper_busy", "Gatekeeper",
        "I understand. When's usually a good time to reach them?",
        ("They give a time", "reschedule_callback"),
        ("They prefer voicemail", "voicemail"),
        ("They decline", "call_success"),
    ),
    # ===== No connect =====
    _node(
        "voicemail", "Voicemail",
        f"{_tone('Voicemail Script (30 seconds)', 'professional')}<br><br>"
        "\"Hi {{contact.first_name}}, this is (your name). I'm calling because most "
        "{{account.industry}} companies are paying 15-20% more on electricity than they should. "
        "Give me a call back when you get a chance.\"",
        ("Left voicemail - start new call", "start"),
    ),
    _node(
        "no_answer", "No Answer",
        f"{_tone('No one answered. What is your next move?', 'professional')}",
        ("Leave voicemail", "voicemail"),
        ("Hang up & try later", "start"),
        ("Try different number", "dialing"),
    ),
    _node(
        "reschedule_callback", "Reschedule - Callback",
        "No problem at all. When's a better time this week... or next week?",
        ("Tomorrow afternoon", "close_invite_sent"),
        ("Next week", "close_invite_sent"),
    ),
    # ===== Broker audit =====
    _node(
        "broker_audit_intro", "Broker Audit",
        f"{_tone('Acknowledge (validate their relationship)', 'understanding')}<br><br>"
        f"That's actually really smart. {PAUSE} A lot of companies use brokers because they "
        "don't have the bandwidth to manage this. When they last shopped for you, how many "
        "quotes did they bring back?",
        ("5-10 competitive quotes", "broker_audit_reframe"),
        ("Just 2-3 options", "broker_audit_reframe"),
        ("Not sure", "situation_discovery"),
    ),
    _node(
        "broker_audit_reframe", "Broker Audit - Second Opinion",
        "Makes sense. We're not here to replace anyone. Think of it as a second opinion: we "
        "check what 100+ suppliers would quote {{account.name}} and you compare.",
        ("That sounds fair", "situation_discovery"),
        ("Not interested", "objection_not_interested"),
    ),
    # ===== Discovery =====
    _node(
        "situation_discovery", "Discovery - Situation",
        f"{_tone('curious tone', 'curious')} {PAUSE} Got it. {PAUSE} So help me understand - "
        "roughly how much are you spending monthly on electricity?",
        ("$1K - $5K", "situation_monthly_spend"),
        ("$5K - $20K", "situation_monthly_spend"),
        ("$20K+", "situation_monthly_spend"),
        amount_prompt=AmountPrompt(next="situation_monthly_spend"),
    ),
    _node(
        "situation_monthly_spend", "Discovery - Situation",
        f"{_tone('curious tone', 'curious')} {PAUSE} Okay, that helps. {PAUSE} So if you're "
        "spending roughly {{monthly_spend}} monthly, that's about {{annual_spend}} annually. "
        f"{PAUSE} With most companies overpaying by 20-30% on renewal, we could be talking "
        "{{potential_savings}} annually in potential savings.<br><br>"
        "Does that kind of impact matter to you?",
        ("Yes, that matters", "situation_rate_check"),
        ("Not really a priority", "objection_not_priority"),
    ),
    _node(
        "situation_rate_check", "Discovery - Situation",
        f"Fair. {PAUSE} And you're with {{{{account.supplier}}}} right now? "
        "Do you know roughly what rate you're paying per kWh?",
        ("Know the rate", "problem_discovery"),
        ("Don't know it", "problem_discovery"),
    ),
    _node(
        "problem_discovery", "Discovery - Problem",
        f"{_tone('Curious, empathetic tone', 'curious')} {PAUSE} So when it comes to "
        "electricity, what's been causing you the most stress? Or is it even on your radar?",
        ("Costs are too high", "consequence_discovery"),
        ("Budget uncertainty", "consequence_discovery"),
        ("We're happy / no problems", "confidence_challenge"),
    ),
    _node(
        "consequence_discovery", "Discovery - Consequence",
        f"{_tone('pause, then real tone', 'serious')} {PAUSE} Most companies wait until 90 days "
        "before renewal to shop, and suppliers know it. Your contract is up {{account.contract_end}}. "
        "If that renewal lands at today's rates, that's roughly {{potential_savings}} a year "
        "left on the table.",
        ("That would be significant", "solution_discovery"),
        ("We always shop the market", "solution_discovery"),
        ("Seems complicated", "objection_not_priority"),
    ),
    _node(
        "solution_discovery", "Discovery - Solution",
        f"{_tone('hopeful tone', 'hopeful')} {PAUSE} So if we could solve this, what would "
        "matter most to you? Competitive rates, budget certainty, or someone handling the "
        "complexity for you?",
        ("Access to competitive rates", "audit_presentation_gap"),
        ("Budget certainty", "audit_presentation_gap"),
        ("All of the above", "audit_presentation_gap"),
    ),
    _node(
        "audit_presentation_gap", "Audit Presentation",
        f"{_tone('presenting the gap')} {PAUSE} For {{{{account.name}}}} spending "
        "{{monthly_spend}} monthly, the gap between your rate and the competitive market is "
        "about {{potential_savings}} per year. Over 3 years, that's triple that amount.",
        ("Makes sense, what's next?", "close_meeting"),
        ("I need to check with my team", "objection_need_to_check"),
    ),
    # ===== Closing =====
    _node(
        "close_meeting", "Closing",
        f"{_tone('STEP 1: Recap (15 seconds)')}<br><br>\"Okay, so just to recap: {PAUSE} "
        f"you're spending about {{{{monthly_spend}}}} monthly, {PAUSE} your contract expires "
        f"{{{{account.contract_end}}}}, {PAUSE} and you're using {{{{account.supplier}}}} right "
        "now. That about right?\"",
        ("Yes, that's right", "close_confirm_time"),
        ("I need to think about this", "objection_need_to_check"),
    ),
    _node(
        "close_confirm_time", "Closing",
        "Let's grab 15 minutes to walk through the audit. I'll send the invite to "
        "{{contact.email}}. Does later this week work?",
        ("Booked a time", "meeting_scheduled"),
        ("Needs a different week", "reschedule_callback"),
    ),
    _node(
        "close_invite_sent", "Closing",
        "Perfect, I'll send a calendar invite to {{contact.email}} so it's on your radar.",
        ("End Call", "call_success"),
    ),
    _node(
        "close_respect_decision", "Closing",
        f"{_tone('professional, authentic tone', 'professional')} {PAUSE} Fair enough, I "
        "appreciate the time. If anything changes, you know how to reach me. Have a great day!",
        ("End Call", "call_success"),
    ),
    # ===== Objections =====
    _node(
        "objection_not_interested", "Objection Handling - Not Interested",
        "Fair enough. Can I ask why? Is it because you're happy with what you're paying right "
        "now... or more just not a priority at the moment?",
        ("Happy with rates", "confidence_challenge"),
        ("Just not a priority", "objection_not_priority"),
        ("Still not interested", "close_respect_decision"),
    ),
    _node(
        "objection_not_priority", "Objection Handling",
        f"{_tone('Acknowledge', 'understanding')} {PAUSE} Makes sense, you've got a ton on "
        "your plate. While it's not a priority, rates keep moving in the background. What if we "
        "just put a quick check on the calendar before {{account.contract_end}}?",
        ("Sure, schedule it", "reschedule_callback"),
        ("Not interested", "close_respect_decision"),
    ),
    _node(
        "objection_need_to_check", "Objection Handling",
        "Totally makes sense. Who else would want to see this? I can send a one-page summary "
        "to (contact name) to share with the team.",
        ("Send the summary", "close_invite_sent"),
        ("Not right now", "close_respect_decision"),
    ),
    _node(
        "confidence_challenge", "Objection Handling",
        "And is that because you've compared your rates to what the rest of the market is "
        "quoting... or more because you've been with {{account.supplier}} for a while and trust them?",
        ("We haven't really compared", "consequence_discovery"),
        ("We're confident", "close_respect_decision"),
    ),
    # ===== Wrap-up =====
    _node(
        "meeting_scheduled", "Success",
        "<strong>AUDIT SCHEDULED!</strong><br><br>Send the invite to {{contact.full_name}} "
        "at {{account.name}} and log the call.",
        ("Start New Call", "start"),
    ),
    _node(
        "call_success", "Complete",
        "<strong>Call Ended</strong><br><br>Not every call closes, but professional respect "
        "opens doors for future opportunities.<br><br>Ready for the next prospect?",
        ("Start New Call", "start"),
    ),
)

PHASES: tuple[Phase, ...] = (
    Phase("Pre-Call", "Pre-Call Prep", "pre_call_qualification"),
    Phase("Opening", "Opening", "hook"),
    Phase("Broker Audit", "Broker Audit", "broker_audit_intro"),
    Phase("Situation", "Discovery - Situation", "situation_discovery"),
    Phase("Problem", "Discovery - Problem", "problem_discovery"),
    Phase("Consequence", "Discovery - Consequence", "consequence_discovery"),
    Phase("Solution", "Discovery - Solution", "solution_discovery"),
    Phase("Audit Results", "Audit Presentation", "audit_presentation_gap"),
    Phase("Closing", "Closing", "close_meeting"),
    Phase("Objections", "Objection Handling", "objection_not_interested"),
    Phase("Success", "Success", "meeting_scheduled"),
)

OPENERS: tuple[Opener, ...] = (
    Opener(
        key="pattern_interrupt_opening",
        label="Permission + Empathy (Primary)",
        state="pattern_interrupt_opening",
        description="Permission-based; reduces early hang-ups with busy decision makers.",
    ),
    Opener(
        key="opener_direct_question",
        label="Second Opinion",
        state="opener_direct_question",
        description="For prospects skeptical of their current broker.",
    ),
    Opener(
        key="opener_social_proof",
        label="Market Data",
        state="opener_social_proof",
        description="Builds credibility with third-party market data.",
    ),
    Opener(
        key="opener_quick_check",
        label="Audit Positioning",
        state="opener_quick_check",
        description="Explains the audit offer up front.",
    ),
    Opener(
        key="opener_transparent",
        label="Transparent",
        state="opener_transparent",
        description="Disarms skeptical prospects with full transparency.",
    ),
)


def build_call_flow(start: str = "start") -> DialogGraph:
    """The immutable graph, built once at startup."""
    return DialogGraph(FLOW_NODES, start=start, phases=PHASES)
