"""Place-name data for splitting a party field into name and location"""

import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import FrozenSet, Iterable, List, Optional, Tuple

from suspense_ledger.config import settings

# Trailing words that look like place names but belong to the business name
NON_LOCATION_WORDS: FrozenSet[str] = frozenset(
    {
        "BUSINESS",
        "MACHINE",
        "STORE",
        "AGENCY",
        "TRADERS",
        "PHARMA",
        "CHEMIST",
        "MEDICOS",
        "MEDICAL",
        "DRUG",
        "HOUSE",
        "HALL",
        "CENTRE",
        "CENTER",
    }
)

KNOWN_LOCATIONS: Tuple[str, ...] = (
    # Major cities
    "DELHI", "MUMBAI", "KOLKATA", "CHENNAI", "BANGALORE", "HYDERABAD",
    "AHMEDABAD", "PUNE", "SURAT", "JAIPUR", "LUCKNOW", "KANPUR",
    "NAGPUR", "INDORE", "THANE", "BHOPAL", "PATNA", "VADODARA",
    "GHAZIABAD", "LUDHIANA", "AGRA", "NASHIK", "FARIDABAD", "MEERUT",
    "RAJKOT", "VARANASI", "SRINAGAR", "AURANGABAD", "DHANBAD", "AMRITSAR",
    "JODHPUR", "RAIPUR", "RANCHI", "GWALIOR", "CHANDIGARH", "VIJAYAWADA",
    "MADURAI", "COIMBATORE", "KOCHI", "GUWAHATI", "BHUBANESWAR", "DEHRADUN",
    "NOIDA", "GURUGRAM", "GURGAON", "NCR", "GWALIOUR",
    # Towns and areas seen in receipt books
    "SEKHREJ", "SHAMBHUA", "MUSKRA", "BILLHAUR", "RASULABAD", "MUNGISAPUR",
    "JUNIHA", "MAHARAMAU", "AKBARPUR", "AKABARPUR", "CHIBRAMAU", "DHAURA",
    "CHAMIYANI", "CHAUDAGRA", "BARAUR", "INDERGAR", "GHATAMPUR", "BITHOOR",
    "BIGHAPUR", "BAIRAGIHAR", "SIKANDRA", "ACHALGANJ", "PUKHRAYA", "PUKHRAYAN",
    "DIBIAPUR", "DIBIYAPUR", "MIYAGANJ", "AURAIYA", "LALITPUR", "MAKANPUR",
    "RAATH", "KHAKHRERU", "SAHAYAL", "CHANI", "SAJETI", "BASIRAT", "JALLAUN",
    "BANGARMAU", "ALIYAPUR", "TIRWA", "BAKEWAR", "BHAUTY", "KANNOUJ", "KONCH",
    "NAWABGANJ", "FATEHPUR", "ORAI", "HARDOI", "UNNAO", "SITAPUR", "ETAWAH",
    "BANDA", "JHANSI", "HAMEERPUR", "BHEWAN", "NABIPUR", "TISTI", "UMARDA",
    "TALEGRAM", "KENJARI", "KENJARY", "JHIJHAK", "HASEERAN", "SHIVRAJPUR",
    "BAHOSI", "KUDANY", "VISHDHAN", "KAKVAN", "MAUDAHA", "JAHANABAD",
    "MURADIPUR", "PARSAULI", "AJGAIN", "RAMAIPUR", "DHANI", "BARUA", "SAHAR",
    "KHAJUA", "FARRUKHABAD", "LAKHIMPUR", "GONDA", "SHIVLI",
    "MANIMAU", "ROORA", "ROOMA", "RANIA", "NOONARI", "NARWAL", "TIKRA",
    "BHARUA", "CHHIBRAMAU", "FAZALGANJ", "KALYANPUR", "KALYAN", "KAKADEV",
    "BIRHANA", "MANISHA", "SUMER", "BEEGAHPUR", "HASWA", "SIRATHU",
    "VIJAIPUR", "ATARDHANI", "MAURANIPUR", "SACHENDI", "BITHHOR", "BARAIGHAR",
    "HAPUR", "GEHLO", "DEHAT",
    "NAUBASTA", "PANKI", "BHAGHPUR", "NARAMAU", "THATHIA", "REWARI",
    "BAIRAMPUR", "GALUAPUR", "SAROSI", "AGAUS", "PATARA", "BANIPARA",
    "MAQSUDABAD", "TIGAI", "HAIDRABAD", "KHEDA", "ALLIPUR", "ASHOTHAR",
    "THARIYAOAN", "SIMRI", "CHAURA", "CHOWKI", "CHHILLA", "SAHLI",
    "SAKURABAD", "SUMRAHA", "MURADAB", "GURSHAYAN",
    "BARADEVI", "BARRA", "PATARSA", "KHAGA", "KORIYAN",
    "BHOGNIPUR", "RAJPUR", "SAHJHANPUR",
)  # fmt: skip


@dataclass(frozen=True)
class Gazetteer:
    """Known place names plus the words that are never places"""

    locations: Tuple[str, ...]
    non_locations: FrozenSet[str] = NON_LOCATION_WORDS

    def with_locations(self, extra: Iterable[str]) -> "Gazetteer":
        """Return a copy extended with more place names (kept in order, deduplicated)"""
        merged = list(self.locations)
        seen = set(merged)
        for name in extra:
            name = name.strip().upper()
            if name and name not in seen:
                seen.add(name)
                merged.append(name)
        return Gazetteer(locations=tuple(merged), non_locations=self.non_locations)

    def is_known_location(self, word: str) -> bool:
        """Exact or prefix match against known places (PUKHRAYAN matches PUKHRAYA)"""
        word = word.upper()
        return any(word.startswith(loc) for loc in self.locations)

    def split_party_location(self, text: str) -> Tuple[str, str]:
        """
        Split "<party name> <location>" on its last word.

        The last word is a location when it is a known place, or when it is an
        upper-case alphabetic word of 3 to 14 letters. Business suffixes such
        as STORE or AGENCY are never locations and single words never split.

        Returns: (party_name, location) with location "" when nothing split off
        """
        text = text.strip()
        words = text.split()
        if len(words) < 2:
            return text, ""

        last = words[-1]
        upper_last = last.upper()
        if upper_last in self.non_locations:
            return text, ""

        if self.is_known_location(upper_last):
            return " ".join(words[:-1]), last

        if last == upper_last and 2 < len(last) < 15 and last.isascii() and last.isalpha():
            return " ".join(words[:-1]), last

        return text, ""


def read_gazetteer_file(path: Path) -> List[str]:
    """Read one place name per line, ignoring blanks and # comments"""
    names = []
    for line in path.read_text(encoding="utf-8").splitlines():
        line = line.split("#", 1)[0].strip()
        if line:
            names.append(line.upper())
    return names


@lru_cache(maxsize=1)
def default_gazetteer() -> Gazetteer:
    """Built-in gazetteer extended with configured place names (built once)"""
    gazetteer = Gazetteer(locations=KNOWN_LOCATIONS).with_locations(settings.extra_locations)

    gazetteer_file: Optional[Path] = settings.gazetteer_file
    if gazetteer_file is not None:
        try:
            gazetteer = gazetteer.with_locations(read_gazetteer_file(gazetteer_file))
        except OSError as e:
            logging.warning(f"Gazetteer file unreadable, using built-in places: {e}")

    return gazetteer
