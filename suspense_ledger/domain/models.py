"""Domain models - pure Python dataclasses representing ledger entities"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import List, Optional


class PaymentMode(str, Enum):
    """Payment rail derived from a transaction narration"""

    UPI = "UPI"
    IMPS = "IMPS"
    NEFT = "NEFT"
    RTGS = "RTGS"
    CLG = "CLG"
    INF = "INF"
    TRF = "TRF"
    CHEQUE = "CHEQUE"
    POS = "POS"
    CASH = "CASH"
    OTHER = "OTHER"


class IdentifierType(str, Enum):
    """Kinds of payment identifiers recoverable from a narration"""

    UPI_VPA = "upi_vpa"
    PHONE = "phone"
    ACCOUNT_NUMBER = "account_number"
    IFSC = "ifsc"
    IMPS_NAME = "imps_name"
    NEFT_NAME = "neft_name"
    BANK_NAME = "bank_name"
    CASH_BANK_CODE = "cash_bank_code"
    CASH_LOCATION = "cash_location"
    CASH_AGENT_CODE = "cash_agent_code"
    FROM_ACCOUNT = "from_account"  # Masked account, e.g. XXXX8723
    FROM_NAME = "from_name"


@dataclass
class ParsedTransaction:
    """Single receipt book entry recovered from ledger text"""

    date: date
    party_name: str
    location: str
    amount: Decimal
    narration: str = ""
    payment_mode: PaymentMode = PaymentMode.OTHER
    cash_bank_code: Optional[str] = None
    cash_bank_location: Optional[str] = None


@dataclass(frozen=True)
class Identifier:
    """Typed identifier value extracted from a narration"""

    type: IdentifierType
    value: str


@dataclass(frozen=True)
class MatchedIdentifier:
    """Evidence that linked a narration to a party.

    ``type`` is an identifier type value, or ``"narration"`` for substring
    fallback matches.
    """

    type: str
    value: str


@dataclass
class PartyRecord:
    """Party row as returned by the party store"""

    id: int
    name: str
    location: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass
class IdentifierMatch:
    """Party row joined with the stored identifier that matched"""

    party: PartyRecord
    match_type: str
    match_value: str


@dataclass
class TransactionStats:
    """Aggregate transaction history for one party row"""

    count: int
    total_amount: Decimal


@dataclass
class TransactionRecord:
    """Previously imported transaction"""

    id: int
    party_id: int
    amount: Decimal
    transaction_date: date
    payment_mode: Optional[str] = None
    narration: Optional[str] = None


@dataclass
class MatchCandidate:
    """Output of party matching"""

    party: PartyRecord
    party_ids: List[int]
    confidence: float
    matched_on: List[MatchedIdentifier]
    transaction_count: int = 0
    total_amount: Decimal = Decimal("0")
    recent_transactions: List[TransactionRecord] = field(default_factory=list)


@dataclass
class SaleBill:
    """Sale bill entry from a sales register"""

    bill_number: str
    date: date
    party_name: str
    amount: Decimal
    is_cash_sale: bool


@dataclass
class ImportRecord:
    """Parsed transaction with the identifiers derived from its narration"""

    transaction: ParsedTransaction
    identifiers: List[Identifier]


@dataclass
class ImportBatch:
    """Receipt book ready for the import collaborator"""

    year: int
    year_detected: bool
    records: List[ImportRecord]


@dataclass
class SearchResult:
    """Ranked candidates for a free-typed narration"""

    narration: str
    identifiers: List[Identifier]
    candidates: List[MatchCandidate]
