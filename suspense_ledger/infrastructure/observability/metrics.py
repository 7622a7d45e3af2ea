"""Prometheus metrics for monitoring receipt book imports and party matching"""

from typing import Iterable

from prometheus_client import Counter, Histogram

from suspense_ledger.domain.models import Identifier, ParsedTransaction

# Parsing metrics
parsed_transactions_counter = Counter(
    "suspense_parsed_transactions_total",
    "Transactions recovered from receipt books",
    ["payment_mode"],
)

suspense_discarded_counter = Counter(
    "suspense_entries_discarded_total",
    "SUSPENSE A/C entries left out of parse results",
)

identifiers_extracted_counter = Counter(
    "suspense_identifiers_extracted_total",
    "Identifiers extracted from narrations",
    ["type"],
)

# Matching metrics
match_counter = Counter(
    "suspense_match_total",
    "Party match requests by the strategy that produced candidates",
    ["strategy"],  # identifier | narration | none
)

match_candidates_histogram = Histogram(
    "suspense_match_candidates",
    "Candidates returned per match request",
    buckets=[0, 1, 2, 3, 5, 10, 25],
)

store_lookup_failures_counter = Counter(
    "suspense_store_lookup_failures_total",
    "Party store queries that failed",
    ["lookup"],  # identifier | narration | stats | recent | sale_bills
)

match_latency_histogram = Histogram(
    "suspense_match_latency_seconds",
    "Party match latency including store lookups",
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5],
)


def record_match(strategy: str, candidate_count: int) -> None:
    """Record which strategy answered a match request and how many candidates it found"""
    if candidate_count == 0:
        strategy = "none"
    match_counter.labels(strategy=strategy).inc()
    match_candidates_histogram.observe(candidate_count)


def record_parse(transactions: Iterable[ParsedTransaction], discarded: int) -> None:
    """Record parse output by payment mode, plus discarded suspense entries"""
    for tx in transactions:
        parsed_transactions_counter.labels(payment_mode=tx.payment_mode.value).inc()
    if discarded:
        suspense_discarded_counter.inc(discarded)


def record_identifiers(identifiers: Iterable[Identifier]) -> None:
    for identifier in identifiers:
        identifiers_extracted_counter.labels(type=identifier.type.value).inc()
