"""Identifier-keyed cache of accumulating suite/spec records."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Generic, Protocol, TypeVar

from jsreporter.models import merge_fields

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

logger = logging.getLogger(__name__)


class _Identified(Protocol):
    @property
    def id(self) -> str: ...


_E = TypeVar("_E", bound=_Identified)
_S = TypeVar("_S")


class EntityCache(Generic[_E, _S]):
    """Map entity ids to their mutable record, with create-or-merge lookup.

    Uses a plain ``dict`` so iteration follows first-seen order.  Records
    are never evicted; the whole run stays cached until the report is
    built.

    Args:
        factory: Builds a new record from the first event seen for an id.
    """

    def __init__(self, factory: Callable[[_E], _S]) -> None:
        self._factory = factory
        self._store: dict[str, _S] = {}

    def has(self, entity_id: str) -> bool:
        """Return ``True`` if a record exists for *entity_id*."""
        return entity_id in self._store

    def get(self, entity_id: str) -> _S | None:
        """Return the record for *entity_id* or ``None``."""
        return self._store.get(entity_id)

    def get_or_create(self, event: _E) -> _S:
        """Return the record for ``event.id``, merging *event* into it.

        The first event for an id creates the record from all of its
        fields.  Later events overwrite field by field; fields they do
        not carry keep their earlier value.
        """
        existing = self._store.get(event.id)
        if existing is None:
            existing = self._store[event.id] = self._factory(event)
            logger.debug("Cached new record for %s", event.id)
        else:
            merge_fields(existing, event)
        return existing

    def __contains__(self, entity_id: object) -> bool:
        return entity_id in self._store

    def __iter__(self) -> Iterator[_S]:
        return iter(self._store.values())

    def __len__(self) -> int:
        return len(self._store)

    @property
    def size(self) -> int:
        """Number of records currently held."""
        return len(self._store)
