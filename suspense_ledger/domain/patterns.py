"""
Pattern library shared by the receipt parser and the identifier extractor.

Everything here is compiled once at import and never mutated. Rule tables that
carry a priority (payment modes, IMPS layouts, NEFT layouts) are tuples so the
evaluation order is part of the data.
"""

import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Tuple

from suspense_ledger.domain.models import PaymentMode

# ---------------------------------------------------------------------------
# Receipt book structure
# ---------------------------------------------------------------------------

# "Dec 26 <rest>"
DATE_LINE = re.compile(r"^(Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec)\s+(\d{1,2})\s+")

AMOUNT_AT_END = re.compile(r"(\d+(?:\.\d{2})?)\s*$")

# "ICICI 192105002017 11145.00"
BANK_ACCOUNT_LINE = re.compile(
    r"^(ICICI|HDFC|SBI|PNB|AXIS|KOTAK|YES|IDBI|CANARA|BOI|BOB|IDFC|UNION|INDIAN|UCO|CENTRAL"
    r"|PUNJAB|BARODA|ALLAHABAD|ANDHRA|BANK|STATE)\s+\d+\s+[\d,.]+",
    re.IGNORECASE,
)

NOISE_LINES: Tuple[re.Pattern, ...] = (
    re.compile(r"^SUB\s+TOTAL", re.IGNORECASE),
    re.compile(r"\.\.\.Continued", re.IGNORECASE),
    re.compile(r"^SUSPENSE\s+A/C", re.IGNORECASE),
    re.compile(r"^-+$"),
    re.compile(r"^TOTAL\s+[\d,.]+\s+[\d,.]+$", re.IGNORECASE),
    re.compile(r"^\*\*\*.*\*\*\*$"),
    re.compile(r"^DATE\s+PARTICULARS\s+DEBIT\s+CREDIT", re.IGNORECASE),
    re.compile(r"^RECEIPT\s+BOOK", re.IGNORECASE),
    re.compile(r"^DURGA\s+DAWA\s+GHAR", re.IGNORECASE),
    re.compile(r"^\d{2}-\d{2}-\d{4}\s+-\s+\d{2}-\d{2}-\d{4}$"),
    re.compile(r"^E-Mail\s*:", re.IGNORECASE),
    re.compile(r"^D\.?L\.?\s*No\.?\s*:", re.IGNORECASE),
    re.compile(r"^GSTIN\s*:", re.IGNORECASE),
    re.compile(r"^\d+/\d+,"),
    re.compile(r"^PAGE\s+\d+(\s+OF\s+\d+)?$", re.IGNORECASE),
)

# Lines opening with one of these are narration even when they end in digits
NARRATION_PREFIXES: Tuple[str, ...] = (
    "UPI/",
    "NEFT-",
    "NEFT_IN:",
    "RTGS-",
    "IMPS/",
    "MMT/",
    "CLG/",
    "INF/",
    "INFT/",
    "CHQ.",
    "CHEQUE",
    "BY CASH",
    "FT-MESPOS",
    "BIL/",
    "FROM:",
)

# Everything from "Ag." on is invoice reference data: "Ag. *DDG028429,*DDG028437,..."
INVOICE_REF = re.compile(r"\s*Ag\.\s*.*$")

SUSPENSE_MARKER = "SUSPENSE A/C"

# "01-04-2025 - 30-06-2025"
HEADER_DATE_RANGE = re.compile(r"(\d{2}-\d{2}-\d{4})\s+-\s+(\d{2}-\d{2}-\d{4})")

# Markers can appear anywhere: the bank account line usually precedes the rail narration
PAYMENT_MODE_RULES: Tuple[Tuple[PaymentMode, re.Pattern], ...] = (
    (PaymentMode.RTGS, re.compile(r"\sRTGS-|^RTGS-", re.IGNORECASE)),
    (PaymentMode.NEFT, re.compile(r"\sNEFT-|^NEFT-", re.IGNORECASE)),
    (PaymentMode.IMPS, re.compile(r"IMPS/|/IMPS/|MMT/IMPS", re.IGNORECASE)),
    (PaymentMode.UPI, re.compile(r"^UPI/|/UPI/|/UPI$|\sUPI/", re.IGNORECASE)),
    (PaymentMode.CLG, re.compile(r"\sCLG/|^CLG/", re.IGNORECASE)),
    (PaymentMode.INF, re.compile(r"\sINF/|^INF/|^INFT/|/INFT/|\sINFT/", re.IGNORECASE)),
    (PaymentMode.CHEQUE, re.compile(r"Chq\.|Cheque|CHQ", re.IGNORECASE)),
    (PaymentMode.POS, re.compile(r"FT-MESPOS|MESPOS\s+SET|POS\s+MACHINE", re.IGNORECASE)),
    (PaymentMode.CASH, re.compile(r"^BY\s+CASH|\sBY\s+CASH|CASH\s+DEP|CAM/", re.IGNORECASE)),
)

# ---------------------------------------------------------------------------
# Identifiers
# ---------------------------------------------------------------------------

# Matched against the original-case narration: 9450852076@YBL, ATKRISHAN12-2@O
UPI_HANDLE = re.compile(r"([a-zA-Z0-9][a-zA-Z0-9._-]{1,255}@[a-zA-Z]{1,64})")

# Narration layouts that carry a handle without "@"; matched against upper-cased text
UPI_NARRATION_LAYOUTS: Tuple[re.Pattern, ...] = (
    # UPI/564031341768/UPI/ANUJ19SENGARR-3/KOTAK MAHINDRA
    re.compile(r"UPI/\d+/UPI/([A-Za-z0-9._@-]+)/"),
    # UPI/MR MAHESH/SHRIVASMAHESH2/PAYMENT FR/BANK OF BA/464278460653/YBLE6E8037FC
    re.compile(r"UPI/[^/]+/([A-Za-z0-9._-]+)/PAYMENT FR/"),
    # UPI/112177057693/TULSHI MEDICAL/RKROHITKUMAR459/UTTAR PRADESH G/HDF0C8DB9785
    re.compile(r"UPI/\d+/[^/]+/([A-Za-z0-9._@-]+)/"),
    # UPI/JAYANT SIN/JAYANTSINGH246/DURGA/KOTAK MAHI/564648156111/ICI7B61D9D2074F4
    re.compile(r"UPI/[^/]+/([A-Za-z0-9._@-]+)/[^/]+/[^/]+/\d+/"),
    # UPI/ASHISHKUMARPAND/SHRI RADHEY KRI/BANK OF BARODA/102557916140/HDFA655BF2F2
    re.compile(r"UPI/([A-Za-z0-9._@-]+)/[^/]+/[^/]+/\d+/[A-Za-z0-9]+$"),
)

PHONE = re.compile(r"(?<!\d)([6-9]\d{9})(?!\d)")

# NEFT/RTGS reference fields: -0000000364324 or -123456789012-
ACCOUNT_IN_REFERENCE = re.compile(r"-(\d{9,18})(?=-|$)")
ACCOUNT_LABELLED = re.compile(r"(?:A/C|ACCT?|ACCOUNT)\s*(?:NO\.?|#)?\s*(\d{9,18})", re.IGNORECASE)

IFSC = re.compile(r"[A-Z]{4}0[A-Z0-9]{6}")


@dataclass(frozen=True)
class ImpsLayout:
    """One MMT/IMPS narration shape and the groups holding names and bank"""

    name: str
    pattern: re.Pattern
    name_groups: Tuple[int, ...]
    bank_group: int


IMPS_LAYOUTS: Tuple[ImpsLayout, ...] = (
    # MMT/IMPS/518211116991/OK/ANURAG SHA/HDFC BANK
    ImpsLayout("ok_status", re.compile(r"MMT/IMPS/\d{12}/OK/([^/]+)/(.+)"), (1,), 2),
    # MMT/IMPS/527412932576/DURGA/AGNIHOTRIM/UNION BANKOF I
    ImpsLayout(
        "two_names",
        re.compile(r"MMT/IMPS/\d{12}/([A-Z][A-Z\s]*)/([A-Z][A-Z\s]*)/(.+)"),
        (1, 2),
        3,
    ),
    # MMT/IMPS/528819823026/50000078106642 /RAPIPAY FI/YES BANK LTD
    ImpsLayout("secondary_ref", re.compile(r"MMT/IMPS/\d{12}/\d+\s*/([^/]+)/(.+)"), (1,), 2),
    # MMT/IMPS/528764057172/IMPS P2A DURGA /GUPTA MEDI/UCO BANK
    ImpsLayout(
        "p2a",
        re.compile(r"MMT/IMPS/\d{12}/IMPS P2A\s+([^/]+?)\s*/([^/]+)/(.+)"),
        (1, 2),
        3,
    ),
    # MMT/IMPS/510615959587/REQPAY/NEWVI9936 /STATE BANK OF I
    ImpsLayout("reqpay", re.compile(r"MMT/IMPS/\d{12}/REQPAY/([^/]+?)\s*/(.+)"), (1,), 2),
    # MMT/IMPS/<ref>/<name>/<bank>
    ImpsLayout("simple", re.compile(r"MMT/IMPS/\d{12}/([A-Z][A-Z\s]*)/([A-Z][A-Z\s]+)$"), (1,), 2),
)

NEFT_NAME_LAYOUTS: Tuple[re.Pattern, ...] = (
    # NEFT-UCBAN52025040104667985-SHRI SHYAM AGENCY-/FAST///
    re.compile(r"NEFT-[A-Z]{4,5}[A-Z0-9]*\d+-([^-]+)-"),
    # INF/INFT/039939724801/DURGAKNP /S S PHARMA
    re.compile(r"INF/INFT/\d+/[^/]+\s*/([^/]+)"),
    # INF/INFT/041141036691/GAYATRI PHARMA
    re.compile(r"INF/INFT/\d+/([A-Z][A-Z\s]+)$"),
    # BIL/INFT/EDC0857581/ SANJIT KUMAR
    re.compile(r"BIL/INFT/[A-Z0-9]+/\s*([A-Z][A-Z\s]+)"),
    # NEFT_IN:null//SBINN52025042334823235/VIJAY MEDICAL STORE Ag. DDG000516
    re.compile(r"NEFT_IN:[^/]*//[A-Z0-9]+/([A-Z][A-Z\s]+?)(?:\s+AG\.|\s*$)"),
)

# BY CASH -733300 TIRWA (UP) Ag. DDG000201
CASH_BANK_CODE = re.compile(r"BY\s+CASH\s+-(\d{5,8})")
CASH_LOCATION = re.compile(r"BY\s+CASH\s+-\d{5,8}\s+([A-Z][A-Za-z]*(?:\s+\([A-Z]{2}\))?)")
CASH_AGENT_CODE = re.compile(r"(?:AG\.?|AGT\.?|AGENCY)\s*\*?([A-Z]{2,4}\d{6,10})")

# FROM:XXXX8723:ASHWANI KUMAR
FROM_FIELD = re.compile(r"FROM:(X{4}\d{4}):([A-Z][A-Z\s]+)")

STATUS_TOKENS = frozenset({"OK", "NA", "NULL", "FAIL", "ERROR", "PENDING", "SUCCESS"})

# Upstream systems cut bank names to a fixed column width
BANK_NORMALIZATION: Mapping[str, str] = MappingProxyType(
    {
        "UNION BANKOF I": "UNION BANK OF INDIA",
        "STATE BANK O": "STATE BANK OF INDIA",
        "STATE BANK OF I": "STATE BANK OF INDIA",
        "BANK OF BARO": "BANK OF BARODA",
        "PUNJAB NATIO": "PUNJAB NATIONAL BANK",
        "CANARA BANK": "CANARA BANK",
        "HDFC BANK": "HDFC BANK",
        "ICICI BANK": "ICICI BANK",
        "AXIS BANK": "AXIS BANK",
        "KOTAK MAHIND": "KOTAK MAHINDRA BANK",
        "INDUSIND BAN": "INDUSIND BANK",
        "YES BANK": "YES BANK",
        "IDBI BANK": "IDBI BANK",
        "CENTRAL BANK": "CENTRAL BANK OF INDIA",
        "INDIAN BANK": "INDIAN BANK",
        "INDIAN OVERS": "INDIAN OVERSEAS BANK",
        "UCO BANK": "UCO BANK",
        "BANK OF INDI": "BANK OF INDIA",
        "SYNDICATE BA": "SYNDICATE BANK",
        "ALLAHABAD BA": "ALLAHABAD BANK",
        "CORPORATION": "CORPORATION BANK",
        "ORIENTAL BAN": "ORIENTAL BANK OF COMMERCE",
        "UNITED BANK": "UNITED BANK OF INDIA",
        "DENA BANK": "DENA BANK",
        "VIJAYA BANK": "VIJAYA BANK",
        "FEDERAL BANK": "FEDERAL BANK",
        "SOUTH INDIAN": "SOUTH INDIAN BANK",
        "KARNATAKA BA": "KARNATAKA BANK",
        "BANDHAN BANK": "BANDHAN BANK",
        "RBL BANK": "RBL BANK",
        "IDFC FIRST B": "IDFC FIRST BANK",
        "AU SMALL FIN": "AU SMALL FINANCE BANK",
        "EQUITAS SMAL": "EQUITAS SMALL FINANCE BANK",
        "UJJIVAN SMAL": "UJJIVAN SMALL FINANCE BANK",
        "PAYTM PAYMEN": "PAYTM PAYMENTS BANK",
        "AIRTEL PAYME": "AIRTEL PAYMENTS BANK",
        "FINO PAYMENT": "FINO PAYMENTS BANK",
        "JIOPAYMENTSB": "JIO PAYMENTS BANK",
        "PUNJAB AND SIND": "PUNJAB AND SIND BANK",
        "PUNJAB AND S": "PUNJAB AND SIND BANK",
    }
)

# ---------------------------------------------------------------------------
# Sales register
# ---------------------------------------------------------------------------

# SALE FROM 01-04-2024 TO 31-03-2025
SALE_HEADER = re.compile(r"SALE\s+FROM\s+\d{2}-\d{2}-(\d{4})\s+TO\s+\d{2}-\d{2}-(\d{4})", re.IGNORECASE)

# A240100001 01-04 PARTY NAME HERE 1,234.56
SALE_BILL_LINE = re.compile(r"^([A-Z0-9]+)\s+(\d{2}-\d{2})\s+(.+?)\s+([\d,]+\.\d{2})$")

CASH_SALE_PARTY = re.compile(r"^CASH\s*\(([^)]+)\)", re.IGNORECASE)
