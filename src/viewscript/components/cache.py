"""Read-through cache for loaded components."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable

from viewscript.components.spec import ComponentRecord

log = logging.getLogger(__name__)


class ComponentCache:
    """In-memory cache of component records keyed by locator.

    The host constructs one and hands it to a provider; its lifetime is the
    host's. There is no locking: two concurrent misses on the same locator
    both load, and the last one stored wins. Records are immutable, so
    either copy is as good as the other.
    """

    def __init__(self) -> None:
        self._records: dict[str, ComponentRecord] = {}

    def get(self, locator: str) -> ComponentRecord | None:
        record = self._records.get(locator)
        if record is None:
            log.debug("Component cache miss for %s", locator)
        else:
            log.debug("Component cache hit  for %s", locator)
        return record

    def set(self, locator: str, record: ComponentRecord) -> None:
        self._records[locator] = record

    async def get_or_load(
        self, locator: str, loader: Callable[[str], Awaitable[ComponentRecord]]
    ) -> ComponentRecord:
        """Return the cached record, or load it with loader and store it."""
        record = self.get(locator)
        if record is not None:
            return record

        record = await loader(locator)
        self.set(locator, record)
        return record

    def clear(self) -> None:
        self._records.clear()

    def __contains__(self, locator: object) -> bool:
        return locator in self._records

    def __len__(self) -> int:
        return len(self._records)
