"""JSON file store for the rolling gas price history.

The record is a single JSON document, {"history": [{"time", "gwei"}, ...]},
replaced atomically on every save (temp file in the same directory, fsync,
os.replace). A missing file is treated as an empty history; a file that
exists but cannot be parsed raises HistoryCorruptError instead of being
silently reset.

Every public method runs under one asyncio.Lock, so the tracker's
load -> append -> prune -> save sequence cannot interleave with another
tick or with a daily summary read. Blocking file I/O runs in a worker
thread via asyncio.to_thread.
"""

import asyncio
import json
import os
import tempfile
from datetime import datetime, timedelta
from decimal import Decimal
from pathlib import Path

from gasbot.exceptions import HistoryCorruptError, HistoryWriteError
from gasbot.history.window import filter_since
from gasbot.logging import get_logger
from gasbot.models import Sample, utc_now

logger = get_logger(__name__)


class HistoryStore:
    """Durable, insertion-ordered log of gas price samples.

    Args:
        path: Location of the JSON history record.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._lock = asyncio.Lock()

    @property
    def path(self) -> Path:
        return self._path

    # ──────────────────────────────────────────────
    # Public API (lock-guarded)
    # ──────────────────────────────────────────────

    async def initialize(self) -> int:
        """Create an empty record on first run, or validate the existing one.

        Returns:
            Number of samples currently persisted.

        Raises:
            HistoryCorruptError: If the existing record is malformed.
            HistoryWriteError: If the empty record could not be created.
        """
        async with self._lock:
            if not self._path.exists():
                await self._write_in_thread([])
                logger.info("history_record_created", path=str(self._path))
                return 0
            samples = await asyncio.to_thread(self._read)
            logger.info(
                "history_record_loaded",
                path=str(self._path),
                samples=len(samples),
            )
            return len(samples)

    async def load(self) -> list[Sample]:
        """Return the persisted samples, or an empty list if no record exists."""
        async with self._lock:
            return await asyncio.to_thread(self._read)

    async def save(self, samples: list[Sample]) -> None:
        """Atomically replace the persisted record with samples."""
        async with self._lock:
            await self._write_in_thread(samples)

    async def window(self, since: datetime) -> list[Sample]:
        """Return persisted samples with timestamp >= since."""
        async with self._lock:
            samples = await asyncio.to_thread(self._read)
        return filter_since(samples, since)

    async def append(
        self,
        sample: Sample,
        retention: timedelta,
        now: datetime | None = None,
    ) -> tuple[list[Sample], list[Sample]]:
        """Append a sample, prune to the retention window and persist.

        The whole read-modify-write runs under the store lock.

        Args:
            sample: The freshly fetched sample.
            retention: How far back samples are retained.
            now: Reference time for pruning (defaults to current UTC time).

        Returns:
            (previous, retained): samples retained before the append, and
            the pruned sequence that was persisted (includes sample).

        Raises:
            HistoryCorruptError: If the current record cannot be parsed.
            HistoryWriteError: If the new record could not be written. The
                previous record is left untouched.
        """
        if now is None:
            now = utc_now()
        cutoff = now - retention

        async with self._lock:
            existing = await asyncio.to_thread(self._read)
            previous = filter_since(existing, cutoff)
            retained = filter_since([*existing, sample], cutoff)
            await self._write_in_thread(retained)

        pruned = len(existing) + 1 - len(retained)
        if pruned:
            logger.debug("history_pruned", pruned=pruned, retained=len(retained))
        return previous, retained

    # ──────────────────────────────────────────────
    # File I/O (runs in a worker thread)
    # ──────────────────────────────────────────────

    async def _write_in_thread(self, samples: list[Sample]) -> None:
        """Run _write in a worker thread and see it through if the caller is cancelled.

        The thread cannot be interrupted, so the lock stays held until its
        os.replace has happened; a later write can never be overwritten by it.
        """
        write = asyncio.ensure_future(asyncio.to_thread(self._write, samples))
        try:
            await asyncio.shield(write)
        except asyncio.CancelledError:
            await asyncio.wait([write])
            if write.exception() is not None:
                logger.error(
                    "history_write_failed_after_cancel",
                    path=str(self._path),
                    error=str(write.exception()),
                )
            raise

    def _read(self) -> list[Sample]:
        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return []
        except OSError as e:
            raise HistoryCorruptError(f"Cannot read history record {self._path}: {e}") from e

        try:
            document = json.loads(raw, parse_float=Decimal)
            entries = document["history"]
            if not isinstance(entries, list):
                raise TypeError("'history' must be a list")
            return [Sample.from_record(entry) for entry in entries]
        except (ValueError, KeyError, TypeError, ArithmeticError) as e:
            raise HistoryCorruptError(
                f"Malformed history record {self._path}: {e}"
            ) from e

    def _write(self, samples: list[Sample]) -> None:
        document = {"history": [s.to_record() for s in samples]}
        payload = json.dumps(document, indent=2)

        directory = self._path.parent
        tmp_path: str | None = None
        try:
            directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                prefix=f".{self._path.name}.", suffix=".tmp", dir=directory
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self._path)
            tmp_path = None
        except OSError as e:
            raise HistoryWriteError(f"Cannot write history record {self._path}: {e}") from e
        finally:
            if tmp_path is not None:
                try:
                    os.unlink(tmp_path)
                except OSError:
                    logger.warning("history_tmp_cleanup_failed", tmp_path=tmp_path)
