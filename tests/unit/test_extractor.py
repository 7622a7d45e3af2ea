"""Unit tests for narration identifier extraction"""

import pytest
from suspense_ledger.domain.extractor import (
    extract,
    extract_by_type,
    extract_values,
    is_valid_extracted_name,
    normalize_bank,
)
from suspense_ledger.domain.models import Identifier, IdentifierType


@pytest.mark.parametrize(
    "narration,expected",
    [
        ("UPI/SANDHYA ME/9450852076@YBL/PAYMENT FR/STATE BANK/450854353978", ["9450852076@YBL"]),
        ("UPI/SUNEELBHADEVANA@HDFC/PAYMENT", ["SUNEELBHADEVANA@HDFC"]),
        ("Transfer from test@paytm to user@upi", ["TEST@PAYTM", "USER@UPI"]),
        ("NEFT transfer 12345", []),
        ("UPI/564031341768/UPI/ANUJ19SENGARR-3/KOTAK MAHINDRA /AXI0E9F3406C3D74904A45A", ["ANUJ19SENGARR-3"]),
        ("UPI/MR MAHESH/SHRIVASMAHESH2/PAYMENT FR/BANK OF BA/464278460653/YBLE6E8037FC", ["SHRIVASMAHESH2"]),
        ("UPI/ASHISHKUMARPAND/SHRI RADHEY KRI/BANK OF BARODA/102557916140/HDFA655BF2F2", ["ASHISHKUMARPAND"]),
    ],
)
def test_extract_upi_vpa(narration, expected):
    """Test UPI handles from generic and layout-specific positions"""
    assert extract_by_type(narration, IdentifierType.UPI_VPA) == expected


@pytest.mark.parametrize(
    "narration,expected",
    [
        ("UPI/SANDHYA ME/9450852076@YBL/PAYMENT", ["9450852076"]),
        ("IMPS/450912345678/9876543210/Payment", ["9876543210"]),
        ("IMPS/5234567890/Payment", []),
        ("NEFT transfer from account", []),
        ("REF 98765432101234", []),
    ],
)
def test_extract_phone(narration, expected):
    """Test 10-digit mobile numbers not embedded in longer digit runs"""
    assert extract_by_type(narration, IdentifierType.PHONE) == expected


@pytest.mark.parametrize(
    "narration,expected",
    [
        ("NEFT-CBINH25360482077-M S VISHNOI MEDICAL STORE-0000000364324", ["0000000364324"]),
        ("NEFT-CBINH25360482077-M S VISHNOI MEDICAL STORE-0000000364324-REF", ["0000000364324"]),
        ("RTGS-HDFC0001234-COMPANY NAME-123456789012-REF", ["123456789012"]),
        ("DEPOSIT TO A/C NO 123456789012", ["123456789012"]),
        ("UPI payment to user@bank", []),
    ],
)
def test_extract_account_number(narration, expected):
    """Test account numbers from reference fields and labels"""
    assert extract_by_type(narration, IdentifierType.ACCOUNT_NUMBER) == expected


@pytest.mark.parametrize(
    "narration,expected",
    [
        ("RTGS-HDFC0001234-COMPANY NAME-123456789012", ["HDFC0001234"]),
        ("NEFT-SBIN0012345-STORE NAME-0000000364324", ["SBIN0012345"]),
        ("Transfer from SBIN0001234 to ICIC0002345", ["SBIN0001234", "ICIC0002345"]),
        ("UPI/user@ybl/PAYMENT", []),
        ("ABCD1234567 is not valid", []),
    ],
)
def test_extract_ifsc(narration, expected):
    """Test IFSC codes need a literal zero in fifth position"""
    assert extract_by_type(narration, IdentifierType.IFSC) == expected


@pytest.mark.parametrize(
    "narration,names,bank",
    [
        ("MMT/IMPS/518211116991/OK/ANURAG SHA/HDFC BANK", ["ANURAG SHA"], ["HDFC BANK"]),
        ("MMT/IMPS/527412932576/DURGA/AGNIHOTRIM/UNION BANKOF I", ["DURGA", "AGNIHOTRIM"], ["UNION BANK OF INDIA"]),
        ("MMT/IMPS/528819823026/50000078106642 /RAPIPAY FI/YES BANK LTD", ["RAPIPAY FI"], ["YES BANK"]),
        ("MMT/IMPS/528764057172/IMPS P2A DURGA /GUPTA MEDI/UCO BANK", ["DURGA", "GUPTA MEDI"], ["UCO BANK"]),
        (
            "MMT/IMPS/529811848407/MASTODINPAYMENT/AMANPHARMA/BANK OF BARODA",
            ["AMANPHARMA"],
            ["BANK OF BARODA"],
        ),
        ("MMT/IMPS/510615959587/REQPAY/NEWVI9936 /STATE BANK OF I", ["NEWVI9936"], ["STATE BANK OF INDIA"]),
        ("IMPS/450912345678/9876543210/Payment", [], []),
        ("UPI/SANDHYA ME/9450852076@YBL/PAYMENT", [], []),
        ("NEFT-CBINH25360482077-M S VISHNOI MEDICAL STORE-0000000364324", [], []),
    ],
)
def test_extract_imps_names_and_bank(narration, names, bank):
    """Test each MMT/IMPS layout yields its names and normalized bank"""
    assert extract_by_type(narration, IdentifierType.IMPS_NAME) == names
    assert extract_by_type(narration, IdentifierType.BANK_NAME) == bank


@pytest.mark.parametrize(
    "narration,expected",
    [
        ("NEFT-UCBAN52025040104667985-SHRI SHYAM AGENCY-/FAST/// NEFT-25170210002308-U", ["SHRI SHYAM AGENCY"]),
        (
            "NEFT-BARBN52025040226217799-VAIBHAV LAXMI MEDICALSTORE--37100200000337-BARB0",
            ["VAIBHAV LAXMI MEDICALSTORE"],
        ),
        ("NEFT-CNRBN52025040237124747-VINAY MEDICAL STORE-NA NA-86551400000375-CNRB000", ["VINAY MEDICAL STORE"]),
        (
            "NEFT-CBINN62025040275800299-NEW PALIWAL MEDICAL STORE-//ATTN//-0000000558691",
            ["NEW PALIWAL MEDICAL STORE"],
        ),
        ("NEFT-PUNBN62025040557735331-CHEAP PHARMA-PNB-0229002100067241-PUNB0022900", ["CHEAP PHARMA"]),
        ("NEFT-HDFCN52025041579938340-NARAIN MEDICAL STORE-0001-50200039309108-HDFC000", ["NARAIN MEDICAL STORE"]),
        (
            "NEFT-YESBN12025040203209954-ONE 97 COMMUNICATIONSLIMITED SETTL--001425000000",
            ["ONE 97 COMMUNICATIONSLIMITED SETTL"],
        ),
        (
            "NEFT-SBINN52025040812556593-AMAR MEDICINE AND COSMETICS-/ATTN//INB//PAYMENT",
            ["AMAR MEDICINE AND COSMETICS"],
        ),
        ("INF/INFT/039939724801/DURGAKNP /S S PHARMA", ["S S PHARMA"]),
        ("INF/INFT/041141036691/GAYATRI PHARMA", ["GAYATRI PHARMA"]),
        ("BIL/INFT/EDC0857581/ SANJIT KUMAR", ["SANJIT KUMAR"]),
        ("UPI/SANDHYA ME/9450852076@YBL/PAYMENT", []),
        ("MMT/IMPS/518211116991/OK/ANURAG SHA/HDFC BANK", []),
    ],
)
def test_extract_neft_name(narration, expected):
    """Test NEFT and INFT layouts"""
    assert extract_by_type(narration, IdentifierType.NEFT_NAME) == expected


def test_extract_upi_narration_finds_handle_and_phone():
    """Test a phone embedded in a handle is reported alongside the handle"""
    identifiers = extract("UPI/SANDHYA ME/9450852076@YBL/PAYMENT FR/STATE BANK/450854353978")

    assert Identifier(IdentifierType.UPI_VPA, "9450852076@YBL") in identifiers
    assert Identifier(IdentifierType.PHONE, "9450852076") in identifiers


def test_extract_cash_deposit():
    """Test bank code, location and agent code from a cash deposit"""
    identifiers = extract("BY CASH -733300 TIRWA (UP) Ag. DDG000201")

    assert identifiers == [
        Identifier(IdentifierType.CASH_BANK_CODE, "733300"),
        Identifier(IdentifierType.CASH_LOCATION, "TIRWA (UP)"),
        Identifier(IdentifierType.CASH_AGENT_CODE, "DDG000201"),
    ]


def test_extract_imps_two_names():
    """Test the complete identifier list for a two-name IMPS narration"""
    identifiers = extract("MMT/IMPS/527412932576/DURGA/AGNIHOTRIM/UNION BANKOF I")

    assert identifiers == [
        Identifier(IdentifierType.IMPS_NAME, "DURGA"),
        Identifier(IdentifierType.IMPS_NAME, "AGNIHOTRIM"),
        Identifier(IdentifierType.BANK_NAME, "UNION BANK OF INDIA"),
    ]


def test_extract_masked_source():
    """Test From: narrations yield masked account and sender without the agent fragment"""
    identifiers = extract("From:XXXX8723:ASHWANI KUMAR Ag. *DDG029160")

    assert extract_by_type("From:XXXX8723:ASHWANI KUMAR Ag. *DDG029160", IdentifierType.FROM_ACCOUNT) == ["XXXX8723"]
    assert Identifier(IdentifierType.FROM_NAME, "ASHWANI KUMAR") in identifiers
    assert Identifier(IdentifierType.CASH_AGENT_CODE, "DDG029160") in identifiers


def test_extract_deduplicates_repeated_values():
    """Test a value seen twice is reported once"""
    identifiers = extract("9450852076 PAID BY 9450852076")

    assert identifiers == [Identifier(IdentifierType.PHONE, "9450852076")]


def test_extract_is_deterministic():
    """Test repeated extraction gives identical ordered output"""
    narration = "NEFT-SBIN0012345-VINAY MEDICAL STORE-0000000364324 9876543210 vinay@okaxis"

    first = extract(narration)

    assert extract(narration) == first
    assert len(set(first)) == len(first)


def test_extract_never_raises_on_odd_input():
    """Test extraction is total"""
    for narration in ["", "   ", "////", "MMT/IMPS/", "BY CASH -", "From:"]:
        assert isinstance(extract(narration), list)


def test_extract_values_flattens():
    """Test values come back in discovery order"""
    assert extract_values("UPI/SANDHYA ME/9450852076@YBL/PAYMENT") == ["9450852076@YBL", "9450852076"]


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("UNION BANKOF I", "UNION BANK OF INDIA"),
        ("STATE BANK O", "STATE BANK OF INDIA"),
        ("KOTAK MAHIND", "KOTAK MAHINDRA BANK"),
        ("KOTAK MAHINDRA BANK LTD", "KOTAK MAHINDRA BANK"),
        ("YES BANK LTD", "YES BANK"),
        ("  HDFC BANK  ", "HDFC BANK"),
        ("SARASWAT COOP", "SARASWAT COOP"),
        ("", ""),
    ],
)
def test_normalize_bank(raw, expected):
    """Test exact then prefix lookup of truncated bank names"""
    assert normalize_bank(raw) == expected


@pytest.mark.parametrize(
    "name,expected",
    [
        ("DURGA", True),
        ("NEWVI9936", True),
        ("OK", False),
        ("NA", False),
        ("MASTODINPAYMENT", False),
        ("A", False),
        ("12345", False),
    ],
)
def test_is_valid_extracted_name(name, expected):
    """Test status codes and payment descriptions are rejected"""
    assert is_valid_extracted_name(name) is expected
