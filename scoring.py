# Filename: scoring.py

from typing import Iterable, Optional

from loguru import logger

from models import CreationEvent, ScoreBreakdown, settle
from reputation import ReputationChecker

DEFAULT_THRESHOLD = 70
DEFAULT_DENYLIST = ("scam",)


def display_length(text: str) -> int:
    """Length in UTF-16 code units: an emoji outside the BMP counts as 2."""
    return len(text.encode("utf-16-le")) // 2


def name_filter(name: str, denylist: Iterable[str] = DEFAULT_DENYLIST) -> bool:
    if display_length(name) <= 3:
        return False
    # case-sensitive: "Scam" passes
    return not any(word in name for word in denylist)


def symbol_filter(symbol: str) -> bool:
    return display_length(symbol) > 1


def uri_filter(uri: str) -> bool:
    return uri.startswith("https://") and uri.endswith(".json")


def breakdown(name: str, symbol: str, uri: str, reputable: bool,
              denylist: Iterable[str] = DEFAULT_DENYLIST,
              reputation_error: Optional[Exception] = None) -> ScoreBreakdown:
    return ScoreBreakdown(
        name_ok=name_filter(name, denylist),
        symbol_ok=symbol_filter(symbol),
        uri_ok=uri_filter(uri),
        reputable=reputable,
        reputation_error=reputation_error,
    )


def compute_score(name: str, symbol: str, uri: str, reputable: bool,
                  denylist: Iterable[str] = DEFAULT_DENYLIST) -> int:
    return breakdown(name, symbol, uri, reputable, denylist).total


def passes_threshold(score: int, threshold: int = DEFAULT_THRESHOLD) -> bool:
    return score >= threshold


class ConfidenceScorer:
    """
    Metadata quality (name, symbol, URI) plus creator reputation, 0-100.
    A failed reputation lookup scores as non-reputable.
    """

    def __init__(self, reputation_checker: ReputationChecker, denylist: Iterable[str] = DEFAULT_DENYLIST):
        self.reputation_checker = reputation_checker
        self.denylist = tuple(denylist)

    async def score(self, event: CreationEvent) -> ScoreBreakdown:
        outcome = await settle(self.reputation_checker.is_reputable(event.creator))
        if not outcome.ok:
            logger.warning(f"[SCORE] {event.name}: reputation lookup failed, scoring as non-reputable: {outcome.error}")

        result = breakdown(
            event.name, event.symbol, event.uri,
            reputable=bool(outcome.value) if outcome.ok else False,
            denylist=self.denylist,
            reputation_error=outcome.error,
        )
        logger.info(
            f"[SCORE] {event.name} ({event.symbol}): {result.total}/100 "
            f"name={result.name_ok} symbol={result.symbol_ok} uri={result.uri_ok} reputable={result.reputable}"
        )
        return result
