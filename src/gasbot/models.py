"""Shared data models for the gas price tracker bot.

Gas prices are Decimal gwei quantized to 3 decimals. Never use float for
prices; floats only appear at the JSON boundary of the history record.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum

GWEI_QUANTUM = Decimal("0.001")
WEI_PER_GWEI = Decimal("1000000000")


def quantize_gwei(value: Decimal) -> Decimal:
    """Round a gwei amount to 3 decimals (half-up)."""
    return value.quantize(GWEI_QUANTUM, rounding=ROUND_HALF_UP)


def utc_now() -> datetime:
    """Current UTC time truncated to millisecond precision.

    The history record stores milliseconds, so truncating here keeps an
    in-memory Sample equal to its persisted form.
    """
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp; naive values are taken as UTC."""
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def format_timestamp(value: datetime) -> str:
    """Format as UTC ISO-8601 with milliseconds and a Z suffix."""
    utc = value.astimezone(timezone.utc)
    return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass(frozen=True)
class Sample:
    """One gas price reading. Immutable once created."""

    timestamp: datetime
    price: Decimal  # gwei, 3 decimals

    def to_record(self) -> dict:
        """Serialize to the persisted {time, gwei} shape."""
        return {"time": format_timestamp(self.timestamp), "gwei": float(self.price)}

    @classmethod
    def from_record(cls, record: dict) -> "Sample":
        """Build a Sample from a persisted {time, gwei} entry.

        Raises:
            KeyError, TypeError, ValueError: If the entry is malformed.
        """
        gwei = record["gwei"]
        if isinstance(gwei, bool) or not isinstance(gwei, (int, float, Decimal)):
            raise TypeError(f"gwei must be a number, got {gwei!r}")
        price = Decimal(str(gwei))
        if not price.is_finite():
            raise ValueError(f"gwei must be finite, got {gwei!r}")
        return cls(
            timestamp=parse_timestamp(record["time"]),
            price=quantize_gwei(price),
        )


@dataclass(frozen=True)
class WindowStats:
    """Extrema of a set of samples."""

    low: Decimal
    high: Decimal
    count: int


class BreachKind(str, Enum):
    """Which recorded extremum a sample broke."""

    LOW = "low"
    HIGH = "high"


@dataclass(frozen=True)
class Breach:
    """A new sample strictly outside the previous window extrema."""

    kind: BreachKind
    sample: Sample
    previous_low: Decimal
    previous_high: Decimal


@dataclass(frozen=True)
class Network:
    """A network that can be queried on demand from chat."""

    key: str
    label: str
    rpc_url: str
    emoji: str
    image_url: str


@dataclass(frozen=True)
class GasTiers:
    """Static gas tiers in gwei for a typical transaction."""

    low: Decimal
    average: Decimal
    high: Decimal


# Mainnet tiers are a fixed table, not derived from live data
MAINNET_GAS_TIERS = GasTiers(
    low=Decimal("2.4"),
    average=Decimal("2.6"),
    high=Decimal("2.8"),
)
