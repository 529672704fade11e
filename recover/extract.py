"""Extraction pipeline: try each strategy in order, return the first recovered text."""

from .outcome import NotRecovered, RawBlob, Reason, Recovered
from .strategies import STRATEGIES


def run_strategies(blob, strategies=None, stop_on_success=True):
    """Yield (strategy name, outcome) for each strategy until one recovers text.

    A strategy that raises is reported as NOT_APPLICABLE so callers never see
    the exception.
    """
    blob = RawBlob.of(blob)
    for strategy in strategies or STRATEGIES:
        try:
            outcome = strategy.extract(blob)
        except Exception:
            outcome = NotRecovered(Reason.NOT_APPLICABLE)
        yield strategy.name, outcome
        if stop_on_success and isinstance(outcome, Recovered):
            return


def extract(blob, strategies=None) -> str | None:
    """Recover message text from an attributedBody blob. Returns None on failure."""
    if blob is None:
        return None
    blob = RawBlob.of(blob)
    if not blob.data:
        return None
    for _, outcome in run_strategies(blob, strategies):
        if isinstance(outcome, Recovered):
            return outcome.text
    return None
