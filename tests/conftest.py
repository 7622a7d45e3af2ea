"""Pytest fixtures for testing"""

import pytest
from datetime import date, timedelta
from decimal import Decimal
from typing import Dict, Generator, List, Optional, Sequence, Set
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from suspense_ledger.domain.exceptions import PartyLookupError
from suspense_ledger.domain.models import IdentifierMatch, PartyRecord, TransactionRecord, TransactionStats
from suspense_ledger.infrastructure.database.models import (
    Base,
    LedgerTransaction,
    Party,
    PartyIdentifier,
    SaleBillRow,
)


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class FakePartyStore:
    """In-memory PartyStore with switchable failures"""

    def __init__(self):
        self.parties: Dict[int, PartyRecord] = {}
        self.identifiers: List[IdentifierMatch] = []
        self.transactions: List[TransactionRecord] = []
        self.failing_party_ids: Set[int] = set()
        self.failing_patterns: Set[str] = set()
        self.fail_identifier_lookup = False
        self.identifier_lookups: List[List[str]] = []
        self.narration_lookups: List[str] = []

    def add_party(self, party_id: int, name: str, location: Optional[str] = None) -> PartyRecord:
        party = PartyRecord(id=party_id, name=name, location=location)
        self.parties[party_id] = party
        return party

    def add_identifier(self, party: PartyRecord, match_type: str, value: str) -> None:
        self.identifiers.append(IdentifierMatch(party=party, match_type=match_type, match_value=value))

    def add_transaction(
        self,
        party: PartyRecord,
        amount: str,
        transaction_date: date,
        narration: str = "",
    ) -> TransactionRecord:
        tx = TransactionRecord(
            id=len(self.transactions) + 1,
            party_id=party.id,
            amount=Decimal(amount),
            transaction_date=transaction_date,
            narration=narration,
        )
        self.transactions.append(tx)
        return tx

    def find_parties_by_identifier_values(self, values: Sequence[str]) -> List[IdentifierMatch]:
        self.identifier_lookups.append(list(values))
        if self.fail_identifier_lookup:
            raise PartyLookupError("party store offline")
        return [m for m in self.identifiers if m.match_value in values]

    def find_parties_by_narration_substring(self, pattern: str) -> List[PartyRecord]:
        self.narration_lookups.append(pattern)
        if pattern in self.failing_patterns:
            raise PartyLookupError(f"narration search failed for {pattern}")
        found: List[PartyRecord] = []
        for tx in self.transactions:
            party = self.parties[tx.party_id]
            if tx.narration and pattern in tx.narration and party not in found:
                found.append(party)
        return found

    def get_party_transaction_stats(self, party_id: int) -> TransactionStats:
        if party_id in self.failing_party_ids:
            raise PartyLookupError(f"stats unavailable for {party_id}")
        txs = [t for t in self.transactions if t.party_id == party_id]
        return TransactionStats(count=len(txs), total_amount=sum((t.amount for t in txs), Decimal("0")))

    def get_recent_transactions(self, party_id: int, limit: int) -> List[TransactionRecord]:
        if party_id in self.failing_party_ids:
            raise PartyLookupError(f"history unavailable for {party_id}")
        txs = [t for t in self.transactions if t.party_id == party_id]
        return sorted(txs, key=lambda t: t.transaction_date, reverse=True)[:limit]


@pytest.fixture
def party_store() -> FakePartyStore:
    """Empty in-memory party store"""
    return FakePartyStore()


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def seeded_db(db: Session) -> Session:
    """
    Party store with:
    - SANDHYA MEDICAL STORE under two rows (UPI handle on one, phone on the other)
    - GUPTA MEDICOS known only by bank name, with a long history
    - VISHNOI MEDICAL STORE with no identifiers, found through past narrations
    """
    sandhya = Party(name="SANDHYA MEDICAL STORE", location="LUCKNOW")
    sandhya_dup = Party(name="SANDHYA MEDICAL STORE", location="LUCKNOW")
    gupta = Party(name="GUPTA MEDICOS", location="ORAI")
    vishnoi = Party(name="VISHNOI MEDICAL STORE", location="KANPUR")
    db.add_all([sandhya, sandhya_dup, gupta, vishnoi])
    db.flush()

    db.add_all(
        [
            PartyIdentifier(party_id=sandhya.id, type="upi_vpa", value="9450852076@YBL"),
            PartyIdentifier(party_id=sandhya_dup.id, type="phone", value="9450852076"),
            PartyIdentifier(party_id=gupta.id, type="bank_name", value="UCO BANK"),
        ]
    )

    base_date = date(2025, 4, 1)
    for i in range(3):
        db.add(
            LedgerTransaction(
                party_id=sandhya.id,
                amount=Decimal("5000.00"),
                transaction_date=base_date + timedelta(days=i),
                payment_mode="UPI",
                narration="UPI/SANDHYA ME/9450852076@YBL/PAYMENT",
            )
        )
    for i in range(4):
        db.add(
            LedgerTransaction(
                party_id=sandhya_dup.id,
                amount=Decimal("1000.00"),
                transaction_date=base_date + timedelta(days=10 + i),
                payment_mode="UPI",
                narration="UPI/SANDHYA ME/9450852076@YBL/PAYMENT",
            )
        )
    for i in range(100):
        db.add(
            LedgerTransaction(
                party_id=gupta.id,
                amount=Decimal("250.00"),
                transaction_date=base_date + timedelta(days=i),
                payment_mode="IMPS",
                narration="MMT/IMPS/528764057172/IMPS P2A DURGA /GUPTA MEDI/UCO BANK",
            )
        )
    db.add(
        LedgerTransaction(
            party_id=vishnoi.id,
            amount=Decimal("7500.00"),
            transaction_date=base_date,
            payment_mode="NEFT",
            narration="NEFT-CBINH25360482077-M S VISHNOI MEDICAL STORE-0000000364324",
        )
    )

    db.add_all(
        [
            SaleBillRow(
                bill_number="A240100001",
                bill_date=date(2025, 4, 1),
                party_name="SHARMA MEDICAL STORE",
                amount=Decimal("1234.56"),
                is_cash_sale=False,
            ),
            SaleBillRow(
                bill_number="A240100002",
                bill_date=date(2025, 4, 3),
                party_name="RAMESH KUMAR",
                amount=Decimal("1240.00"),
                is_cash_sale=True,
            ),
            SaleBillRow(
                bill_number="A240100003",
                bill_date=date(2025, 5, 1),
                party_name="SHARMA MEDICAL STORE",
                amount=Decimal("1234.56"),
                is_cash_sale=False,
            ),
        ]
    )
    db.commit()
    return db


@pytest.fixture
def receipt_book_text() -> str:
    """Receipt book export with a header, a suspense entry and a multi-party entry"""
    return """DURGA DAWA GHAR
RECEIPT BOOK
01-04-2025 - 30-06-2025
DATE PARTICULARS DEBIT CREDIT
Apr 1 UPMANYU TRADERS BIRHANA ROAD 11145.00
ICICI 192105002017 11145.00
UPI/509187215227/UPI/UPMANYU9@OKHDFCBANK/HDFCBANK LTD/ICI4B1D2E7A Ag. *DDG028429,*DDG028437
Apr 2 SUSPENSE A/C 1000.00
HDFC 123456789 1000.00
Apr 3 RAM MEDICAL STORE KANPUR 1000.00
SHYAM PHARMA AGENCY UNNAO 2000.00
GUPTA MEDICOS ORAI 3000.00
ICICI 192105002017 6000.00
MMT/IMPS/527412932576/DURGA/AGNIHOTRIM/UNION BANKOF I
SUB TOTAL 6000.00
Apr 4 KUMAR MEDICAL TIRWA 2500.00
BY CASH -733300 TIRWA (UP) Ag. DDG000201
...Continued
"""
