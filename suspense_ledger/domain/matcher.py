"""Party matching engine - ranks known parties against a bank narration"""

import logging
import math
from decimal import Decimal
from typing import Dict, List, Optional

from suspense_ledger.config import settings
from suspense_ledger.domain.exceptions import PartyLookupError
from suspense_ledger.domain.extractor import extract
from suspense_ledger.domain.models import (
    Identifier,
    IdentifierType,
    MatchCandidate,
    MatchedIdentifier,
    PartyRecord,
    TransactionRecord,
)
from suspense_ledger.domain.ports import PartyStore

logger = logging.getLogger(__name__)

# Confidence weights per identifier type
UPI_VPA_WEIGHT = 0.95
PHONE_WEIGHT = 0.85
ACCOUNT_NUMBER_WEIGHT = 0.80
IMPS_NAME_WEIGHT = 0.50  # Names can be truncated or shared
NEFT_NAME_WEIGHT = 0.50
BANK_NAME_WEIGHT = 0.20  # Many parties bank with the same bank
DEFAULT_WEIGHT = 0.50

IDENTIFIER_WEIGHTS: Dict[str, float] = {
    IdentifierType.UPI_VPA.value: UPI_VPA_WEIGHT,
    IdentifierType.PHONE.value: PHONE_WEIGHT,
    IdentifierType.ACCOUNT_NUMBER.value: ACCOUNT_NUMBER_WEIGHT,
    IdentifierType.IMPS_NAME.value: IMPS_NAME_WEIGHT,
    IdentifierType.NEFT_NAME.value: NEFT_NAME_WEIGHT,
    IdentifierType.BANK_NAME.value: BANK_NAME_WEIGHT,
}

NARRATION_MATCH_TYPE = "narration"
IMPS_REFERENCE_MARKER = "MMT/IMPS/"
IMPS_REFERENCE_LENGTH = 12


def calculate_confidence(matched_on: List[MatchedIdentifier]) -> float:
    """
    Combine matched identifiers into a 0-100 confidence.

    Each identifier type counts once. Types are applied strongest first: the
    strongest sets the confidence to its weight, each weaker one closes half
    its weight's share of the remaining gap: c += (100 - c) * w * 0.5

    Example: UPI and bank name -> 95 + 5 * 0.20 * 0.5 = 95.5, whatever the row order
    """
    weights = sorted(
        (IDENTIFIER_WEIGHTS.get(t, DEFAULT_WEIGHT) * 100 for t in {m.type for m in matched_on}),
        reverse=True,
    )

    confidence = 0.0
    for weight in weights:
        if not confidence:
            confidence = weight
        else:
            confidence += (100 - confidence) * (weight / 100) * 0.5

    return min(confidence, 100.0)


def apply_history_boost(confidence: float, transaction_count: int) -> float:
    """Scale confidence by 1 + log10(count) * 0.1, capped at 100"""
    if transaction_count <= 0:
        return confidence
    boost = 1.0 + math.log10(transaction_count) * 0.1
    return min(confidence * boost, 100.0)


def narration_search_patterns(narration: str, identifiers: List[Identifier]) -> List[str]:
    """
    Substrings to look for in previously imported narrations.

    IMPS and NEFT names when the narration has them, otherwise the 12-digit
    IMPS reference numbers of an MMT/IMPS narration.
    """
    names = [
        identifier.value
        for identifier in identifiers
        if identifier.type in (IdentifierType.IMPS_NAME, IdentifierType.NEFT_NAME)
    ]
    if names:
        return names

    if IMPS_REFERENCE_MARKER not in narration.upper():
        return []

    references = []
    for part in narration.split("/"):
        part = part.strip()
        if len(part) == IMPS_REFERENCE_LENGTH and part.isascii() and part.isdigit():
            references.append(part)
    return references


class _CandidateGroup:
    """Party rows sharing one name, merged into a single candidate"""

    def __init__(self, party: PartyRecord):
        self.party = party
        self.party_ids: List[int] = [party.id]
        self.matched_on: List[MatchedIdentifier] = []

    def add_party(self, party: PartyRecord) -> None:
        if party.id not in self.party_ids:
            self.party_ids.append(party.id)

    def add_identifier(self, matched: MatchedIdentifier) -> None:
        if matched not in self.matched_on:
            self.matched_on.append(matched)


class Matcher:
    """
    Ranks parties against a narration using a PartyStore.

    Identifier matches are scored by type weight; when no stored identifier
    matches, previously imported narrations are searched instead at a fixed
    lower confidence. Both paths are boosted by the party's import history.
    """

    def __init__(
        self,
        store: PartyStore,
        recent_limit: Optional[int] = None,
        fallback_confidence: Optional[float] = None,
    ):
        self.store = store
        self.recent_limit = recent_limit if recent_limit is not None else settings.recent_transactions_limit
        self.fallback_confidence = (
            fallback_confidence if fallback_confidence is not None else settings.narration_fallback_confidence
        )

    def match(self, narration: str) -> List[MatchCandidate]:
        """
        Candidates for a narration, highest confidence first (ties keep discovery order).

        Raises:
            PartyLookupError: the identifier lookup itself failed
        """
        identifiers = extract(narration)

        candidates: List[MatchCandidate] = []
        if identifiers:
            candidates = self._match_by_identifiers(identifiers)
        if not candidates:
            candidates = self._match_by_narration(narration, identifiers)

        candidates.sort(key=lambda c: c.confidence, reverse=True)
        return candidates

    def match_single(self, narration: str) -> Optional[MatchCandidate]:
        """Best candidate for a narration, or None"""
        candidates = self.match(narration)
        return candidates[0] if candidates else None

    def _match_by_identifiers(self, identifiers: List[Identifier]) -> List[MatchCandidate]:
        rows = self.store.find_parties_by_identifier_values([identifier.value for identifier in identifiers])

        # Group by party name, not id: one party can be imported under several rows
        groups: Dict[str, _CandidateGroup] = {}
        for row in rows:
            group = groups.get(row.party.name)
            if group is None:
                group = groups[row.party.name] = _CandidateGroup(row.party)
            else:
                group.add_party(row.party)
            group.add_identifier(MatchedIdentifier(type=row.match_type, value=row.match_value))

        return [self._build_candidate(group, calculate_confidence(group.matched_on)) for group in groups.values()]

    def _match_by_narration(self, narration: str, identifiers: List[Identifier]) -> List[MatchCandidate]:
        groups: Dict[str, _CandidateGroup] = {}

        for pattern in narration_search_patterns(narration, identifiers):
            try:
                parties = self.store.find_parties_by_narration_substring(pattern)
            except PartyLookupError as e:
                logger.warning(f"Narration search failed for pattern {pattern!r}: {e}")
                continue

            for party in parties:
                group = groups.get(party.name)
                if group is None:
                    group = groups[party.name] = _CandidateGroup(party)
                    group.add_identifier(MatchedIdentifier(type=NARRATION_MATCH_TYPE, value=pattern))
                else:
                    group.add_party(party)

        return [self._build_candidate(group, self.fallback_confidence) for group in groups.values()]

    def _build_candidate(self, group: _CandidateGroup, confidence: float) -> MatchCandidate:
        """Aggregate history across the group's party ids and apply the history boost"""
        transaction_count = 0
        total_amount = Decimal("0")
        recent: List[TransactionRecord] = []

        for party_id in group.party_ids:
            try:
                stats = self.store.get_party_transaction_stats(party_id)
                transaction_count += stats.count
                total_amount += stats.total_amount
            except PartyLookupError as e:
                logger.warning(f"Transaction stats unavailable for party {party_id}: {e}")

            try:
                recent.extend(self.store.get_recent_transactions(party_id, self.recent_limit))
            except PartyLookupError as e:
                logger.warning(f"Recent transactions unavailable for party {party_id}: {e}")

        recent.sort(key=lambda t: t.transaction_date, reverse=True)

        return MatchCandidate(
            party=group.party,
            party_ids=list(group.party_ids),
            confidence=apply_history_boost(confidence, transaction_count),
            matched_on=list(group.matched_on),
            transaction_count=transaction_count,
            total_amount=total_amount,
            recent_transactions=recent[: self.recent_limit],
        )
