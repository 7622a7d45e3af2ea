"""Data access layer for parties, their identifiers and imported history"""

from datetime import date
from decimal import Decimal
from typing import List, Optional, Sequence

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from suspense_ledger.config import settings
from suspense_ledger.domain.exceptions import PartyLookupError
from suspense_ledger.domain.models import (
    IdentifierMatch,
    PartyRecord,
    SaleBill,
    TransactionRecord,
    TransactionStats,
)
from suspense_ledger.infrastructure.database.models import LedgerTransaction, Party, PartyIdentifier, SaleBillRow
from suspense_ledger.infrastructure.observability.metrics import store_lookup_failures_counter

SALE_BILL_SEARCH_LIMIT = 100


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _to_party_record(party: Party) -> PartyRecord:
    return PartyRecord(id=party.id, name=party.name, location=party.location, created_at=party.created_at)


def _to_transaction_record(tx: LedgerTransaction) -> TransactionRecord:
    return TransactionRecord(
        id=tx.id,
        party_id=tx.party_id,
        amount=Decimal(tx.amount),
        transaction_date=tx.transaction_date,
        payment_mode=tx.payment_mode,
        narration=tx.narration,
    )


class PartyRepository:
    """Read-only party store backed by SQLAlchemy; query failures raise PartyLookupError"""

    def __init__(self, db: Session, narration_search_limit: Optional[int] = None):
        self.db = db
        self.narration_search_limit = narration_search_limit or settings.narration_search_limit

    def find_parties_by_identifier_values(self, values: Sequence[str]) -> List[IdentifierMatch]:
        """Every (party, identifier) pair whose stored identifier value is one of values"""
        if not values:
            return []
        try:
            rows = (
                self.db.query(Party, PartyIdentifier.type, PartyIdentifier.value)
                .join(PartyIdentifier, PartyIdentifier.party_id == Party.id)
                .filter(PartyIdentifier.value.in_(list(values)))
                .order_by(Party.id, PartyIdentifier.id)
                .all()
            )
        except SQLAlchemyError as e:
            store_lookup_failures_counter.labels(lookup="identifier").inc()
            raise PartyLookupError(f"Identifier lookup failed: {e}") from e

        return [
            IdentifierMatch(party=_to_party_record(party), match_type=match_type, match_value=match_value)
            for party, match_type, match_value in rows
        ]

    def find_parties_by_narration_substring(self, pattern: str) -> List[PartyRecord]:
        """Parties with an imported transaction whose narration contains pattern"""
        try:
            parties = (
                self.db.query(Party)
                .join(LedgerTransaction, LedgerTransaction.party_id == Party.id)
                .filter(LedgerTransaction.narration.like(f"%{_escape_like(pattern)}%", escape="\\"))
                .distinct()
                .order_by(Party.id)
                .limit(self.narration_search_limit)
                .all()
            )
        except SQLAlchemyError as e:
            store_lookup_failures_counter.labels(lookup="narration").inc()
            raise PartyLookupError(f"Narration search failed: {e}") from e

        return [_to_party_record(party) for party in parties]

    def get_party_transaction_stats(self, party_id: int) -> TransactionStats:
        """Count and total amount of a party's imported transactions"""
        try:
            count, total = (
                self.db.query(
                    func.count(LedgerTransaction.id),
                    func.coalesce(func.sum(LedgerTransaction.amount), 0),
                )
                .filter(LedgerTransaction.party_id == party_id)
                .one()
            )
        except SQLAlchemyError as e:
            store_lookup_failures_counter.labels(lookup="stats").inc()
            raise PartyLookupError(f"Transaction stats failed for party {party_id}: {e}") from e

        return TransactionStats(count=count, total_amount=Decimal(str(total)))

    def get_recent_transactions(self, party_id: int, limit: int) -> List[TransactionRecord]:
        """Latest transactions of a party, newest first"""
        try:
            transactions = (
                self.db.query(LedgerTransaction)
                .filter(LedgerTransaction.party_id == party_id)
                .order_by(LedgerTransaction.transaction_date.desc(), LedgerTransaction.id.desc())
                .limit(limit)
                .all()
            )
        except SQLAlchemyError as e:
            store_lookup_failures_counter.labels(lookup="recent").inc()
            raise PartyLookupError(f"Recent transactions failed for party {party_id}: {e}") from e

        return [_to_transaction_record(tx) for tx in transactions]

    def search_sale_bills_by_amount(
        self,
        amount: Decimal,
        variation: Decimal,
        from_date: date,
        till_date: date,
    ) -> List[SaleBill]:
        """Sale bills within amount +/- variation between two dates, newest and largest first"""
        try:
            rows = (
                self.db.query(SaleBillRow)
                .filter(
                    SaleBillRow.amount >= amount - variation,
                    SaleBillRow.amount <= amount + variation,
                    SaleBillRow.bill_date >= from_date,
                    SaleBillRow.bill_date <= till_date,
                )
                .order_by(SaleBillRow.bill_date.desc(), SaleBillRow.amount.desc())
                .limit(SALE_BILL_SEARCH_LIMIT)
                .all()
            )
        except SQLAlchemyError as e:
            store_lookup_failures_counter.labels(lookup="sale_bills").inc()
            raise PartyLookupError(f"Sale bill search failed: {e}") from e

        return [
            SaleBill(
                bill_number=row.bill_number,
                date=row.bill_date,
                party_name=row.party_name,
                amount=Decimal(row.amount),
                is_cash_sale=row.is_cash_sale,
            )
            for row in rows
        ]
