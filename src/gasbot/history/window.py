"""Window evaluation over gas price samples.

Pure functions: no I/O, no clock. Callers pass the cutoff explicitly so the
same sample set can be viewed through the 7-day and 24-hour windows.
"""

from collections.abc import Iterable, Sequence
from datetime import datetime

from gasbot.models import Sample, WindowStats


def filter_since(samples: Iterable[Sample], since: datetime) -> list[Sample]:
    """Return samples with timestamp >= since, preserving insertion order.

    Does not assume the input is sorted; out-of-order samples are kept or
    dropped individually.
    """
    return [s for s in samples if s.timestamp >= since]


def evaluate_window(samples: Sequence[Sample]) -> WindowStats:
    """Compute min/max price over a non-empty sequence of samples.

    Raises:
        ValueError: If samples is empty. Callers must guarantee at least
            one sample before evaluating.
    """
    if not samples:
        raise ValueError("cannot evaluate an empty sample window")
    prices = [s.price for s in samples]
    return WindowStats(low=min(prices), high=max(prices), count=len(prices))
