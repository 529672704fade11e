"""Recover Messages text stored only in the attributedBody column."""

from .extract import extract, run_strategies
from .outcome import NotRecovered, RawBlob, Reason, Recovered

__all__ = ["extract", "run_strategies", "RawBlob", "Reason", "Recovered", "NotRecovered"]
