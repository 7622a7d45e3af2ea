"""
Receipt book parser - recovers transactions from copy-pasted ledger text.

The ledger has no fixed grammar. Each line is classified on its own
(classify_line) and a single forward scan assembles transactions:

    Dec 26 BABA MEDICAL AND GENERAL STOR SHAMBHUA 11744.00   <- transaction start
    ICICI 192105002017 11744.00                              <- bank account line
    Chq.704339 Dt. 26-12-2025 Ag. DDG024782                  <- narration

Several parties can share one bank line. Their party lines follow the dated
line without a date of their own, and the shared bank/narration lines come
after the last party line, so only the last party receives them.
"""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import List, Optional, Tuple

from suspense_ledger.config import settings
from suspense_ledger.domain import patterns
from suspense_ledger.domain.exceptions import InvalidReferenceYearError
from suspense_ledger.domain.extractor import extract_cash_deposit
from suspense_ledger.domain.gazetteer import Gazetteer, default_gazetteer
from suspense_ledger.domain.models import ParsedTransaction, PaymentMode
from suspense_ledger.utils.date_utils import MONTHS, month_day_to_date, parse_dd_mm_yyyy


class LineKind(str, Enum):
    """What a single trimmed ledger line represents"""

    TRANSACTION_START = "transaction_start"
    BANK_ACCOUNT = "bank_account"
    PARTY_CONTINUATION = "party_continuation"
    NARRATION = "narration"
    NOISE = "noise"


def is_noise_line(line: str) -> bool:
    """Blank lines, separators, totals and document header boilerplate"""
    if not line:
        return True
    return any(pattern.search(line) for pattern in patterns.NOISE_LINES)


def is_party_line(line: str) -> bool:
    """
    Undated "<party> <location> <amount>" line of a multi-party entry.

    Needs a trailing amount, at least two words before it, a leading letter,
    and must not be a bank account line or start like a bank narration.
    """
    if not patterns.AMOUNT_AT_END.search(line):
        return False

    upper = line.upper()
    if upper.startswith(patterns.NARRATION_PREFIXES):
        return False

    if patterns.BANK_ACCOUNT_LINE.search(line):
        return False

    words = patterns.AMOUNT_AT_END.sub("", line).split()
    if len(words) < 2:
        return False

    first = words[0][0]
    return first.isascii() and first.isalpha()


def classify_line(line: str) -> LineKind:
    """Classify one trimmed line; checks run in priority order"""
    if is_noise_line(line):
        return LineKind.NOISE
    if patterns.DATE_LINE.search(line):
        return LineKind.TRANSACTION_START
    if patterns.BANK_ACCOUNT_LINE.search(line):
        return LineKind.BANK_ACCOUNT
    if is_party_line(line):
        return LineKind.PARTY_CONTINUATION
    return LineKind.NARRATION


def strip_invoice_ref(line: str) -> str:
    """Drop the "Ag. <invoice refs>" suffix"""
    return patterns.INVOICE_REF.sub("", line).strip()


def detect_payment_mode(narration: str) -> PaymentMode:
    """First matching rule wins: RTGS, NEFT, IMPS, UPI, CLG, INF, CHEQUE, POS, CASH"""
    for mode, pattern in patterns.PAYMENT_MODE_RULES:
        if pattern.search(narration):
            return mode
    return PaymentMode.OTHER


def split_amount(text: str) -> Tuple[str, Decimal]:
    """
    Separate the trailing amount from "<party and location> <amount>".

    Returns: (remaining_text, amount) with amount 0 when the line has none
    """
    match = patterns.AMOUNT_AT_END.search(text)
    if match is None:
        return text.strip(), Decimal("0")
    return text[: match.start()].strip(), Decimal(match.group(1))


def extract_year_from_header(text: str) -> Optional[int]:
    """Year of the later date in a "DD-MM-YYYY - DD-MM-YYYY" banner"""
    for match in patterns.HEADER_DATE_RANGE.finditer(text):
        start = parse_dd_mm_yyyy(match.group(1))
        end = parse_dd_mm_yyyy(match.group(2))
        dates = [d for d in (start, end) if d is not None]
        if dates:
            return max(dates).year
    return None


def _is_suspense(party_name: str) -> bool:
    return patterns.SUSPENSE_MARKER in party_name.upper()


def _build_date(year: int, month: int, day: int) -> date:
    try:
        return month_day_to_date(year, month, day)
    except OverflowError:
        return date(year, month, 1)


class _ReceiptBookScan:
    """Mutable state of one parse call"""

    def __init__(self, year: int, gazetteer: Gazetteer):
        self.year = year
        self.gazetteer = gazetteer
        self.transactions: List[ParsedTransaction] = []
        self.current: Optional[ParsedTransaction] = None
        self.narration_lines: List[str] = []
        self.last_date: Optional[date] = None
        self.discarded = 0

    def flush(self) -> None:
        if self.current is None:
            return
        tx = self.current
        tx.narration = " ".join(self.narration_lines)
        tx.payment_mode = detect_payment_mode(tx.narration)
        if tx.payment_mode == PaymentMode.CASH:
            tx.cash_bank_code, tx.cash_bank_location = extract_cash_deposit(tx.narration)
        self.transactions.append(tx)
        self.current = None
        self.narration_lines = []

    def open(self, tx_date: date, text: str) -> None:
        remaining, amount = split_amount(text)
        party_name, location = self.gazetteer.split_party_location(remaining)
        self.narration_lines = []
        if _is_suspense(party_name):
            self.current = None
            self.discarded += 1
            return
        self.current = ParsedTransaction(
            date=tx_date,
            party_name=party_name,
            location=location,
            amount=amount,
        )

    def add_narration(self, line: str) -> None:
        cleaned = strip_invoice_ref(line)
        if cleaned:
            self.narration_lines.append(cleaned)

    def feed(self, line: str) -> None:
        kind = classify_line(line)

        if kind == LineKind.NOISE:
            return

        if kind == LineKind.TRANSACTION_START:
            self.flush()
            match = patterns.DATE_LINE.search(line)
            self.last_date = _build_date(self.year, MONTHS[match.group(1)], int(match.group(2)))
            self.open(self.last_date, line[match.end():])
            return

        if self.current is None:
            return

        if kind == LineKind.PARTY_CONTINUATION:
            self.flush()
            self.open(self.last_date, line)
            return

        # Bank account lines and narration both feed the narration buffer
        self.add_narration(line)


def parse_receipt_book(
    text: str,
    reference_year: int,
    gazetteer: Optional[Gazetteer] = None,
) -> Tuple[List[ParsedTransaction], int]:
    """
    Parse receipt book text and count the SUSPENSE A/C entries left out.

    Returns: (transactions, discarded_suspense_entries)

    Raises:
        InvalidReferenceYearError: reference_year is outside 1..9999
    """
    if not 1 <= reference_year <= 9999:
        raise InvalidReferenceYearError(f"Reference year out of range: {reference_year}")

    scan = _ReceiptBookScan(reference_year, gazetteer or default_gazetteer())
    for raw_line in text.splitlines():
        scan.feed(raw_line.strip())
    scan.flush()
    return scan.transactions, scan.discarded


def parse(text: str, reference_year: int, gazetteer: Optional[Gazetteer] = None) -> List[ParsedTransaction]:
    """
    Parse receipt book text into transactions, in ledger order.

    Args:
        text: Raw copy-pasted ledger text
        reference_year: Year for the month/day dates on transaction lines
        gazetteer: Place names for the party/location split (default: built-in + configured)

    Returns:
        List of ParsedTransaction; SUSPENSE A/C entries are never included

    Raises:
        InvalidReferenceYearError: reference_year is outside 1..9999
    """
    transactions, _ = parse_receipt_book(text, reference_year, gazetteer)
    return transactions


def resolve_reference_year(text: str, default_year: Optional[int] = None) -> Tuple[int, bool]:
    """
    Pick the year for a receipt book.

    Header banner year first, then default_year, then the configured
    default, then the current year.

    Returns: (year, detected_from_header)
    """
    detected = extract_year_from_header(text)
    if detected is not None:
        return detected, True
    if default_year is not None:
        return default_year, False
    if settings.default_reference_year is not None:
        return settings.default_reference_year, False
    return date.today().year, False


def parse_with_auto_year(text: str, default_year: Optional[int] = None) -> List[ParsedTransaction]:
    """Parse using the year from the document header when it has one"""
    year, _ = resolve_reference_year(text, default_year)
    return parse(text, year)
