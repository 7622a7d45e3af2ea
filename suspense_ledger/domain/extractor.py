"""Identifier extraction - pulls payment identifiers out of bank narrations"""

from typing import Iterable, List, Optional, Set, Tuple

from suspense_ledger.domain.models import Identifier, IdentifierType
from suspense_ledger.domain import patterns


class _Collector:
    """Ordered identifier list deduplicated by (type, value)"""

    def __init__(self) -> None:
        self.identifiers: List[Identifier] = []
        self._seen: Set[Tuple[IdentifierType, str]] = set()

    def add(self, id_type: IdentifierType, value: str) -> None:
        value = value.strip()
        if not value or (id_type, value) in self._seen:
            return
        self._seen.add((id_type, value))
        self.identifiers.append(Identifier(type=id_type, value=value))

    def add_all(self, id_type: IdentifierType, values: Iterable[str]) -> None:
        for value in values:
            self.add(id_type, value)


def normalize_bank(raw: str) -> str:
    """
    Map a truncated bank name to its full name.

    Exact table hit first, then the first table entry (in table order) that is
    a prefix of the raw name or that the raw name is a prefix of. Unknown
    names come back trimmed but otherwise unchanged.
    """
    raw = raw.strip()
    if not raw:
        return ""
    if raw in patterns.BANK_NORMALIZATION:
        return patterns.BANK_NORMALIZATION[raw]
    for truncated, full in patterns.BANK_NORMALIZATION.items():
        if truncated.startswith(raw) or raw.startswith(truncated):
            return full
    return raw


def is_valid_extracted_name(name: str) -> bool:
    """Reject status codes (OK, NA, ...) and descriptions such as MASTODINPAYMENT"""
    name = name.strip()
    if len(name) < 2:
        return False
    if name in patterns.STATUS_TOKENS:
        return False
    if name.upper().endswith("PAYMENT"):
        return False
    return any(c.isascii() and c.isalpha() for c in name)


def extract_imps_data(narration: str) -> Tuple[List[str], str]:
    """
    Extract person/entity names and the bank from an MMT/IMPS narration.

    Layouts are tried in priority order and the first that matches decides
    the result, even when none of its names survive validation.

    Returns: (names, normalized_bank) - ([], "") for non-IMPS narrations
    """
    upper = narration.upper()
    for layout in patterns.IMPS_LAYOUTS:
        match = layout.pattern.search(upper)
        if match is None:
            continue
        names = []
        for group in layout.name_groups:
            name = match.group(group).strip()
            if is_valid_extracted_name(name):
                names.append(name)
        return names, normalize_bank(match.group(layout.bank_group))
    return [], ""


def extract_neft_name(narration: str) -> Optional[str]:
    """Party name from NEFT / INFT / BIL-INFT / NEFT_IN narrations; first valid name wins"""
    upper = narration.upper()
    for pattern in patterns.NEFT_NAME_LAYOUTS:
        match = pattern.search(upper)
        if match is None:
            continue
        name = match.group(1).strip()
        if is_valid_extracted_name(name):
            return name
    return None


def extract_cash_deposit(narration: str) -> Tuple[Optional[str], Optional[str]]:
    """
    Bank code and location from "BY CASH -<code> <location>" narrations.

    Example: "BY CASH -733300 TIRWA (UP)" -> ("733300", "TIRWA (UP)")
    """
    upper = narration.upper()
    code_match = patterns.CASH_BANK_CODE.search(upper)
    location_match = patterns.CASH_LOCATION.search(upper)
    code = code_match.group(1) if code_match else None
    location = location_match.group(1).strip() if location_match else None
    return code, location or None


def _extract_from_field(upper: str) -> Tuple[Optional[str], Optional[str]]:
    match = patterns.FROM_FIELD.search(upper)
    if match is None:
        return None, None
    # A greedy name runs into the agent marker: "ASHWANI KUMAR AG. *DDG029160"
    sender = match.group(2).strip()
    if sender.endswith(" AG"):
        sender = sender[: -len(" AG")].strip()
    return match.group(1), sender if is_valid_extracted_name(sender) else None


def extract(narration: str) -> List[Identifier]:
    """
    Extract every identifier from a narration.

    Rules run in a fixed order (UPI, phone, account, IFSC, IMPS names and bank,
    NEFT name, cash deposit fields, masked source) and every value is kept
    once per type, in discovery order. Never raises.
    """
    collected = _Collector()
    upper = narration.upper()

    # UPI handles keep their own casing in the narration; stored upper-cased
    collected.add_all(IdentifierType.UPI_VPA, (m.upper() for m in patterns.UPI_HANDLE.findall(narration)))
    for layout in patterns.UPI_NARRATION_LAYOUTS:
        collected.add_all(IdentifierType.UPI_VPA, layout.findall(upper))

    collected.add_all(IdentifierType.PHONE, patterns.PHONE.findall(upper))
    collected.add_all(IdentifierType.ACCOUNT_NUMBER, patterns.ACCOUNT_IN_REFERENCE.findall(upper))
    collected.add_all(IdentifierType.ACCOUNT_NUMBER, patterns.ACCOUNT_LABELLED.findall(upper))
    collected.add_all(IdentifierType.IFSC, patterns.IFSC.findall(upper))

    names, bank = extract_imps_data(narration)
    collected.add_all(IdentifierType.IMPS_NAME, names)
    if bank:
        collected.add(IdentifierType.BANK_NAME, bank)

    neft_name = extract_neft_name(narration)
    if neft_name:
        collected.add(IdentifierType.NEFT_NAME, neft_name)

    cash_code, cash_location = extract_cash_deposit(narration)
    if cash_code:
        collected.add(IdentifierType.CASH_BANK_CODE, cash_code)
    if cash_location:
        collected.add(IdentifierType.CASH_LOCATION, cash_location)

    agent_match = patterns.CASH_AGENT_CODE.search(upper)
    if agent_match:
        collected.add(IdentifierType.CASH_AGENT_CODE, agent_match.group(1))

    masked_account, sender = _extract_from_field(upper)
    if masked_account:
        collected.add(IdentifierType.FROM_ACCOUNT, masked_account)
    if sender:
        collected.add(IdentifierType.FROM_NAME, sender)

    return collected.identifiers


def extract_values(narration: str) -> List[str]:
    """Flat list of identifier values, as used for party store lookups"""
    return [identifier.value for identifier in extract(narration)]


def extract_by_type(narration: str, id_type: IdentifierType) -> List[str]:
    """Values of one identifier type, in discovery order"""
    return [identifier.value for identifier in extract(narration) if identifier.type == id_type]
