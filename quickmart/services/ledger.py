from __future__ import annotations

import logging
from typing import Final

from quickmart.exceptions import PersistenceError
from quickmart.repositories.counter import CounterStore

logger = logging.getLogger(__name__)

FIRST_TRANSACTION_NUMBER: Final[int] = 1


class TransactionLedger:
    """Issues sequential transaction numbers backed by a durable counter.

    The counter is read once at construction; a missing or unreadable counter
    restarts numbering at 1, which can reissue numbers after a lost counter
    file. One ledger per process; callers serialize access.
    """

    def __init__(self, store: CounterStore) -> None:
        self.store = store
        stored = store.read()
        if stored is None:
            logger.info("No usable transaction counter, starting at %d", FIRST_TRANSACTION_NUMBER)
            stored = FIRST_TRANSACTION_NUMBER
        self._next: int = stored

    @property
    def peek(self) -> int:
        """Number the next call to ``next`` will return."""
        return self._next

    def next(self) -> int:
        """Issue the current number and durably advance the counter.

        Raises:
            PersistenceError: When the advanced counter cannot be stored. The
                number is not issued and the counter does not move.
        """
        issued = self._next
        try:
            self.store.write(issued + 1)
        except PersistenceError:
            logger.error("Transaction number %d not issued: counter not persisted", issued)
            raise
        self._next = issued + 1
        logger.debug("Issued transaction number %d", issued)
        return issued
