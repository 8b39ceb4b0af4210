"""
In-memory CRM cache.

In production, the people/accounts snapshots come from the CRM's
background loaders (Supabase/Firestore). This store keeps raw records
exactly as those loaders deliver them, aliases and all, and hands out
fresh snapshots on every call.
"""

import logging
from collections.abc import Iterable
from typing import Any, Optional

logger = logging.getLogger(__name__)

RawRecord = dict[str, Any]

SAMPLE_PEOPLE: list[RawRecord] = [
    {
        "id": "c-100",
        "firstName": "Jane",
        "lastName": "Doe",
        "workDirectPhone": "(972) 555-1234",
        "email": "jane.doe@acme.com",
        "jobTitle": "Facilities Manager",
        "company": "Acme LLC",
        "current_supplier": "Reliant",
        "renewal_date": "2026-03-05",
    },
    {
        "id": "c-200",
        "name": "Marcus Hill",
        "mobile_phone": "+1 214 555 0199",
        "work_email": "mhill@brightpath.io",
        "companyName": "BrightPath Logistics, Inc.",
        "accountId": "a-200",
    },
    {
        "_id": "c-300",
        "first_name": "Priya",
        "last_name": "Natarajan",
        "otherPhone": "817.555.0142",
        "email": "priya@lonestarcold.com",
        "account_name": "Lone Star Cold Storage",
    },
]

SAMPLE_ACCOUNTS: list[RawRecord] = [
    {
        "id": "a-100",
        "name": "Acme Industries",
        "industry": "Manufacturing",
        "billingCity": "Dallas",
        "region": "TX",
        "website": "acme.com",
        "employees": 140,
    },
    {
        "accountId": "a-200",
        "accountName": "BrightPath Logistics",
        "industry": "Logistics",
        "city": "Fort Worth",
        "state": "TX",
        "domain": "https://www.brightpath.io/about",
        "energySupplier": "TXU Energy",
        "contractEndDate": "11/30/2026",
        "employeeCount": "45",
    },
    {
        "_id": "a-300",
        "companyName": "Lone Star Cold Storage Co.",
        "industry": "Cold Storage",
        "locationCity": "Arlington",
        "billingState": "TX",
        "website": "lonestarcold.com",
        "numberOfEmployees": 12,
    },
]


class InMemoryCrmCache:
    """Raw people/accounts collections handed out as fresh snapshots."""

    def __init__(
        self,
        people: Optional[Iterable[RawRecord]] = None,
        accounts: Optional[Iterable[RawRecord]] = None,
    ) -> None:
        self._people: list[RawRecord] = list(people or [])
        self._accounts: list[RawRecord] = list(accounts or [])

    @classmethod
    def with_sample_data(cls) -> "InMemoryCrmCache":
        """Cache seeded with the demo records above."""
        return cls(
            people=[dict(p) for p in SAMPLE_PEOPLE],
            accounts=[dict(a) for a in SAMPLE_ACCOUNTS],
        )

    def get_people(self) -> list[RawRecord]:
        return list(self._people)

    def get_accounts(self) -> list[RawRecord]:
        return list(self._accounts)

    def add_person(self, record: RawRecord) -> None:
        self._people.append(record)
        logger.debug("Person added to cache (%d total)", len(self._people))

    def add_account(self, record: RawRecord) -> None:
        self._accounts.append(record)
        logger.debug("Account added to cache (%d total)", len(self._accounts))

    def replace(self, people: Iterable[RawRecord], accounts: Iterable[RawRecord]) -> None:
        """Swap in a new snapshot, as a background reload would."""
        self._people = list(people)
        self._accounts = list(accounts)
        logger.info(
            "CRM cache reloaded: %d people, %d accounts",
            len(self._people), len(self._accounts),
        )
