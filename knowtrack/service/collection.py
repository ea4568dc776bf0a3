from __future__ import annotations

import enum
import logging
import threading
from typing import Callable, Generic, Iterable, Optional, Tuple, TypeVar

from knowtrack.errors import StoreError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class LoadState(enum.Enum):
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    ERROR = "error"


class CollectionCache(Generic[T]):
    """Holds the last full fetch of one table.

    The snapshot is only ever replaced whole by refresh(). Each refresh takes
    a generation ticket; a fetch that completes after a newer one has already
    been applied is dropped, so an older reload can never overwrite a newer one.
    """

    def __init__(self, name: str, fetch: Callable[[], Iterable[T]]):
        self.name = name
        self._fetch = fetch
        self._lock = threading.Lock()
        self._snapshot: Tuple[T, ...] = ()
        self._state = LoadState.IDLE
        self._error: Optional[str] = None
        self._issued = 0
        self._applied = 0
        self._in_flight = 0

    @property
    def snapshot(self) -> Tuple[T, ...]:
        return self._snapshot

    @property
    def state(self) -> LoadState:
        return self._state

    @property
    def error(self) -> Optional[str]:
        return self._error

    @property
    def generation(self) -> int:
        return self._applied

    def find(self, match: Callable[[T], bool]) -> Optional[T]:
        for item in self._snapshot:
            if match(item):
                return item
        return None

    def activate(self) -> Tuple[T, ...]:
        """One view activation: always reload from the store."""
        return self.refresh()

    def ensure_loaded(self) -> Tuple[T, ...]:
        if self._state is LoadState.IDLE:
            return self.refresh()
        return self._snapshot

    def refresh(self) -> Tuple[T, ...]:
        with self._lock:
            self._issued += 1
            ticket = self._issued
            self._in_flight += 1
            self._state = LoadState.LOADING

        items: Optional[Tuple[T, ...]] = None
        error: Optional[str] = None
        try:
            items = tuple(self._fetch())
        except StoreError as e:
            error = e.message
        except Exception as e:
            # malformed rows or a bug in the fetch; still settles the state below
            logger.exception("%s refresh #%d raised", self.name, ticket)
            error = f"Could not load {self.name}: {e}"
        finally:
            with self._lock:
                self._in_flight -= 1
                if ticket <= self._applied:
                    logger.info("%s refresh #%d is stale (applied #%d); discarded", self.name, ticket, self._applied)
                    self._settle()
                elif items is None:
                    self._applied = ticket
                    self._error = error
                    self._state = LoadState.ERROR
                    logger.warning("%s refresh #%d failed: %s", self.name, ticket, error)
                else:
                    self._applied = ticket
                    self._snapshot = items
                    self._error = None
                    self._state = LoadState.LOADED
                    logger.debug("%s refresh #%d loaded %d items", self.name, ticket, len(items))
        return self._snapshot

    def _settle(self) -> None:
        # a newer fetch was applied first; reflect its outcome once nothing is pending
        if self._in_flight == 0 and self._state is LoadState.LOADING:
            self._state = LoadState.ERROR if self._error else LoadState.LOADED
