"""
Centralized configuration with environment variable overrides.

Script wiring, greeting buckets, and the savings heuristics are
configurable here. Nothing is hardcoded in the renderer or navigator.
"""

import logging
import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)


def _safe_int(env_var: str, default: str) -> int:
    """Parse an integer from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return int(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid integer for {env_var}: {raw!r}"
        ) from None


def _safe_float(env_var: str, default: str) -> float:
    """Parse a float from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return float(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid float for {env_var}: {raw!r}"
        ) from None


@dataclass(frozen=True)
class ScriptConfig:
    """Node ids the engine treats specially, and display fallbacks."""

    start_node: str = os.getenv("START_NODE", "start")
    discovery_node: str = os.getenv("DISCOVERY_NODE", "situation_discovery")
    default_city: str = os.getenv("DEFAULT_CITY", "Texas")
    default_opener: str = os.getenv("DEFAULT_OPENER", "pattern_interrupt_opening")


@dataclass(frozen=True)
class SavingsConfig:
    """Presentation heuristics for the derived financial tokens."""

    savings_rate: float = _safe_float("SAVINGS_RATE", "0.25")
    unknown_amount_text: str = os.getenv("UNKNOWN_AMOUNT_TEXT", "an estimated amount")
    # Categorical answers to the monthly-spend question and their midpoints.
    spend_ranges: tuple[tuple[str, float], ...] = (
        ("$1K - $5K", 3000.0),
        ("$5K - $20K", 12500.0),
        ("$20K+", 30000.0),
    )


@dataclass(frozen=True)
class GreetingConfig:
    """Local-hour buckets for the {{day.part}} greeting."""

    morning_start_hour: int = _safe_int("MORNING_START_HOUR", "5")
    afternoon_start_hour: int = _safe_int("AFTERNOON_START_HOUR", "12")
    evening_start_hour: int = _safe_int("EVENING_START_HOUR", "17")
    evening_end_hour: int = _safe_int("EVENING_END_HOUR", "20")
    morning: str = "Good morning"
    afternoon: str = "Good afternoon"
    evening: str = "Good evening"
    fallback: str = "Hello"


@dataclass(frozen=True)
class AppConfig:
    """Root configuration aggregating all sub-configs."""

    script: ScriptConfig = field(default_factory=ScriptConfig)
    savings: SavingsConfig = field(default_factory=SavingsConfig)
    greeting: GreetingConfig = field(default_factory=GreetingConfig)
    agent_first_name: str = os.getenv("AGENT_FIRST_NAME", "")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")


def _validate_config(config: AppConfig) -> None:
    """Validate configuration values are within acceptable ranges."""
    if not 0.0 < config.savings.savings_rate <= 1.0:
        raise ValueError(
            f"SAVINGS_RATE must be in (0.0, 1.0], got {config.savings.savings_rate}"
        )

    greeting = config.greeting
    for hour_name, hour_value in [
        ("MORNING_START_HOUR", greeting.morning_start_hour),
        ("AFTERNOON_START_HOUR", greeting.afternoon_start_hour),
        ("EVENING_START_HOUR", greeting.evening_start_hour),
        ("EVENING_END_HOUR", greeting.evening_end_hour),
    ]:
        if not 0 <= hour_value <= 23:
            raise ValueError(f"{hour_name} must be between 0 and 23, got {hour_value}")

    if not (
        greeting.morning_start_hour
        < greeting.afternoon_start_hour
        < greeting.evening_start_hour
        <= greeting.evening_end_hour
    ):
        raise ValueError(
            "Greeting hours must be ordered MORNING_START_HOUR < AFTERNOON_START_HOUR "
            "< EVENING_START_HOUR <= EVENING_END_HOUR"
        )

    if not config.script.start_node:
        raise ValueError("START_NODE must not be empty")

    for label, midpoint in config.savings.spend_ranges:
        if midpoint <= 0:
            raise ValueError(f"Spend range '{label}' must map to a positive amount")


def load_config() -> AppConfig:
    """Load and validate application configuration."""
    config = AppConfig()
    _validate_config(config)
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logger.info("Configuration loaded (start node '%s')", config.script.start_node)
    return config


# Singleton instance
settings = load_config()
