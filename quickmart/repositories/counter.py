from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol, runtime_checkable

from quickmart.exceptions import PersistenceError

logger = logging.getLogger(__name__)


@runtime_checkable
class CounterStore(Protocol):
    """Durable storage for the next transaction number."""

    def read(self) -> int | None:
        """Return the stored number, or None when it is missing or unreadable."""
        ...

    def write(self, value: int) -> None:
        """Persist ``value`` as the next number to issue.

        Raises:
            PersistenceError: When the value cannot be stored.
        """
        ...


class FileCounterStore:
    """Counter kept as a single decimal line in a text file."""

    def __init__(self, path: str | Path) -> None:
        self.path: Path = Path(path)

    def read(self) -> int | None:
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError):
            logger.warning("Cannot read transaction counter %s", self.path, exc_info=True)
            return None

        lines = text.strip().splitlines()
        first_line = lines[0].strip() if lines else ""
        try:
            value = int(first_line)
        except ValueError:
            logger.warning("Transaction counter %s is corrupt: %r", self.path, first_line)
            return None
        if value < 1:
            logger.warning("Transaction counter %s holds non-positive %d", self.path, value)
            return None
        return value

    def write(self, value: int) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("w", encoding="utf-8") as handle:
                handle.write(f"{value}\n")
        except OSError as exc:
            logger.exception("Failed to write transaction counter to %s", self.path)
            raise PersistenceError(self.path, "write transaction counter") from exc


class InMemoryCounterStore:
    """Non-durable counter, for tests and dry runs."""

    def __init__(self, value: int | None = None) -> None:
        self.value = value
        self.writes: list[int] = []

    def read(self) -> int | None:
        return self.value

    def write(self, value: int) -> None:
        self.value = value
        self.writes.append(value)
