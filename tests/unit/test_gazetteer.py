"""Unit tests for party / location splitting"""

import pytest
from suspense_ledger.domain.gazetteer import (
    KNOWN_LOCATIONS,
    Gazetteer,
    default_gazetteer,
    read_gazetteer_file,
)


@pytest.fixture
def gazetteer() -> Gazetteer:
    return Gazetteer(locations=KNOWN_LOCATIONS)


@pytest.mark.parametrize(
    "text,expected",
    [
        ("BABA MEDICAL STORE DELHI", ("BABA MEDICAL STORE", "DELHI")),
        ("SANDHYA MEDICAL LUCKNOW", ("SANDHYA MEDICAL", "LUCKNOW")),
        ("STORE MUMBAI", ("STORE", "MUMBAI")),
        ("GUPTA DRUG PUKHRAYAN", ("GUPTA DRUG", "PUKHRAYAN")),
        ("UPMANYU TRADERS BIRHANA ROAD", ("UPMANYU TRADERS BIRHANA", "ROAD")),
        ("RAM TRADERS Kanpur", ("RAM TRADERS", "Kanpur")),
    ],
)
def test_split_party_location(gazetteer, text, expected):
    """Test trailing place names are split off"""
    assert gazetteer.split_party_location(text) == expected


@pytest.mark.parametrize(
    "text",
    [
        "SIMPLE STORE",
        "SHARMA MEDICAL AGENCY",
        "KRISHNA PHARMA",
        "DELHI",
        "RAM TRADERS X12",
        "RAM TRADERS ABCDEFGHIJKLMNOP",
        "RAM TRADERS Zorba",
        "RAM TRADERS NO",
    ],
)
def test_split_party_location_keeps_whole_name(gazetteer, text):
    """Test business suffixes, single words and non-place trailing words stay in the name"""
    assert gazetteer.split_party_location(text) == (text, "")


def test_is_known_location_accepts_spelling_extensions(gazetteer):
    """Test prefix matching against the gazetteer"""
    assert gazetteer.is_known_location("pukhrayan")
    assert gazetteer.is_known_location("DELHI")
    assert not gazetteer.is_known_location("ROAD")


def test_with_locations_extends_gazetteer(gazetteer):
    """Test configured places join the built-in list"""
    extended = gazetteer.with_locations([" zorba ", "", "DELHI"])

    assert extended.locations[-1] == "ZORBA"
    assert extended.locations.count("DELHI") == 1
    assert extended.split_party_location("RAM TRADERS Zorba") == ("RAM TRADERS", "Zorba")
    # Original is untouched
    assert "ZORBA" not in gazetteer.locations


def test_read_gazetteer_file(tmp_path):
    """Test one place per line with comments"""
    path = tmp_path / "places.txt"
    path.write_text("# extra towns\nzorba\n\nKALPI  # on the Yamuna\n", encoding="utf-8")

    assert read_gazetteer_file(path) == ["ZORBA", "KALPI"]


def test_default_gazetteer_is_cached():
    """Test the default gazetteer is built once"""
    assert default_gazetteer() is default_gazetteer()
    assert "TIRWA" in default_gazetteer().locations
