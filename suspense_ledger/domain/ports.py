"""Interfaces the matcher consumes from the surrounding application"""

from typing import List, Protocol, Sequence

from suspense_ledger.domain.models import (
    IdentifierMatch,
    PartyRecord,
    TransactionRecord,
    TransactionStats,
)


class PartyStore(Protocol):
    """
    Read-only party lookups.

    Implementations raise PartyLookupError when a query cannot be served.
    """

    def find_parties_by_identifier_values(self, values: Sequence[str]) -> List[IdentifierMatch]:
        ...

    def find_parties_by_narration_substring(self, pattern: str) -> List[PartyRecord]:
        ...

    def get_party_transaction_stats(self, party_id: int) -> TransactionStats:
        ...

    def get_recent_transactions(self, party_id: int, limit: int) -> List[TransactionRecord]:
        ...
