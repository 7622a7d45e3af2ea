"""Import and search entry points used by the surrounding application"""

import time
from typing import List, Optional

from suspense_ledger.domain.extractor import extract
from suspense_ledger.domain.matcher import NARRATION_MATCH_TYPE, Matcher
from suspense_ledger.domain.models import ImportBatch, ImportRecord, MatchCandidate, SearchResult
from suspense_ledger.domain.parser import parse_receipt_book, resolve_reference_year
from suspense_ledger.infrastructure.observability.logging import log_match, log_parse
from suspense_ledger.infrastructure.observability.metrics import (
    match_latency_histogram,
    record_identifiers,
    record_match,
    record_parse,
)


def prepare_import(text: str, reference_year: Optional[int] = None) -> ImportBatch:
    """
    Parse a receipt book and pair each transaction with its narration identifiers.

    Args:
        text: Raw copy-pasted ledger text
        reference_year: Fallback year when the text has no date-range header

    Raises:
        InvalidReferenceYearError: the resolved year is outside 1..9999
    """
    year, detected = resolve_reference_year(text, reference_year)
    transactions, discarded = parse_receipt_book(text, year)

    records = []
    for tx in transactions:
        identifiers = extract(tx.narration)
        record_identifiers(identifiers)
        records.append(ImportRecord(transaction=tx, identifiers=identifiers))

    record_parse(transactions, discarded)
    log_parse(
        year=year,
        year_detected=detected,
        transaction_count=len(records),
        discarded=discarded,
        identifier_count=sum(len(r.identifiers) for r in records),
    )
    return ImportBatch(year=year, year_detected=detected, records=records)


def match_strategy(candidates: List[MatchCandidate]) -> str:
    """Which matcher path produced the candidates: identifier, narration or none"""
    if not candidates:
        return "none"
    if candidates[0].matched_on and candidates[0].matched_on[0].type == NARRATION_MATCH_TYPE:
        return NARRATION_MATCH_TYPE
    return "identifier"


def search(matcher: Matcher, narration: str) -> SearchResult:
    """
    Ranked candidates for a narration, plus the identifiers it contains.

    Raises:
        PartyLookupError: the identifier lookup itself failed
    """
    started = time.perf_counter()
    candidates = matcher.match(narration)
    elapsed = time.perf_counter() - started

    # Record metrics and logs
    strategy = match_strategy(candidates)
    match_latency_histogram.observe(elapsed)
    record_match(strategy, len(candidates))
    log_match(narration, candidates, strategy, round(elapsed * 1000, 2))

    return SearchResult(
        narration=narration,
        identifiers=extract(narration),
        candidates=candidates,
    )
