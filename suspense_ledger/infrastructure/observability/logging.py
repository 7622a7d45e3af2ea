"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pythonjsonlogger import jsonlogger

from suspense_ledger.config import settings
from suspense_ledger.domain.models import MatchCandidate


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: Optional[str] = None) -> None:
    """Configure structured JSON logging (level defaults to settings.log_level)"""
    logger = logging.getLogger()
    logger.setLevel(level or settings.log_level)

    # Remove existing handlers
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_match(narration: str, candidates: List[MatchCandidate], strategy: str, duration_ms: float) -> None:
    """Log structured match outcome for analysis"""
    top = candidates[0] if candidates else None
    logging.info(
        "Match completed",
        extra={
            "step": "match_complete",
            "narration": narration,
            "strategy": strategy,
            "candidate_count": len(candidates),
            "top_party": top.party.name if top else None,
            "top_confidence": round(top.confidence, 2) if top else None,
            "duration_ms": duration_ms,
        },
    )


def log_parse(year: int, year_detected: bool, transaction_count: int, discarded: int, identifier_count: int) -> None:
    """Log structured receipt book parse summary"""
    logging.info(
        "Receipt book parsed",
        extra={
            "step": "parse_complete",
            "reference_year": year,
            "year_detected": year_detected,
            "transaction_count": transaction_count,
            "suspense_discarded": discarded,
            "identifier_count": identifier_count,
        },
    )
