"""Sales register parser - bill lines from a copy-pasted "SALE FROM ... TO ..." report"""

from datetime import date
from decimal import Decimal, InvalidOperation
from typing import List, Optional

from suspense_ledger.domain import patterns
from suspense_ledger.domain.models import SaleBill
from suspense_ledger.utils.date_utils import month_day_to_date

_SKIP_CONTAINS = ("SALE FROM", "BILL NO", "BILLNO", "PARTY NAME", "PARTYNAME", "CONTINUED")
_SKIP_PREFIXES = ("PAGE", "TOTAL", "GRAND TOTAL")
_SEPARATOR_PREFIXES = ("---", "===")


def extract_sale_year(text: str) -> Optional[int]:
    """The TO year of the first "SALE FROM DD-MM-YYYY TO DD-MM-YYYY" header"""
    match = patterns.SALE_HEADER.search(text)
    return int(match.group(2)) if match else None


def should_skip_line(line: str) -> bool:
    """Headers, page markers, totals, separators and bare page numbers"""
    upper = line.upper()
    if any(marker in upper for marker in _SKIP_CONTAINS):
        return True
    if upper.startswith(_SKIP_PREFIXES) or line.startswith(_SEPARATOR_PREFIXES):
        return True
    return line.isdigit()


def parse_bill_line(line: str, year: int) -> Optional[SaleBill]:
    """Parse "<BILLNO> <DD-MM> <PARTY> <1,234.56>"; None when the line is not a bill"""
    match = patterns.SALE_BILL_LINE.match(line)
    if match is None:
        return None

    bill_number, day_month, party_name, amount_text = match.groups()
    day, month = (int(part) for part in day_month.split("-"))
    if not 1 <= month <= 12:
        return None

    try:
        bill_date: date = month_day_to_date(year, month, day)
        amount = Decimal(amount_text.replace(",", ""))
    except (ValueError, OverflowError, InvalidOperation):
        return None

    party_name = party_name.strip()
    is_cash_sale = False
    cash_match = patterns.CASH_SALE_PARTY.match(party_name)
    if cash_match:
        is_cash_sale = True
        party_name = cash_match.group(1).strip()
    elif party_name.upper() == "CASH":
        is_cash_sale = True

    return SaleBill(
        bill_number=bill_number,
        date=bill_date,
        party_name=party_name,
        amount=amount,
        is_cash_sale=is_cash_sale,
    )


def parse_sale_bills(text: str, default_year: int) -> List[SaleBill]:
    """
    Parse a sales register into bills, in register order.

    The year comes from the report header when present, else default_year.
    Lines that are not bills are ignored; never raises.
    """
    year = extract_sale_year(text) or default_year

    bills = []
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or should_skip_line(line):
            continue
        bill = parse_bill_line(line, year)
        if bill is not None:
            bills.append(bill)
    return bills
