"""Process-wide entity cache shared by every view.

Fetched articles and profiles are merged here so a like or follow committed in
one view is seen by all others. A fetched row replaces the cached one only if
its ``updated_at`` is not older than what is cached. Counters adjusted after a
confirmed mutation are re-applied to re-read rows until the row shows a newer
``updated_at`` or a counter value different from the one the adjustment
started from.
"""
from __future__ import annotations

import threading
from dataclasses import replace
from datetime import datetime
from typing import Dict, Generic, Iterable, List, Optional, Protocol, Tuple, TypeVar


class _Entity(Protocol):
    id: str
    updated_at: Optional[str]


E = TypeVar("E", bound=_Entity)


def _ts(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


class EntityCache(Generic[E]):
    def __init__(self) -> None:
        self._items: Dict[str, E] = {}
        # entity id -> (updated_at of the base row, {field: (base value, delta)})
        self._deltas: Dict[str, Tuple[Optional[datetime], Dict[str, Tuple[int, int]]]] = {}
        self._lock = threading.Lock()

    def get(self, entity_id: str) -> Optional[E]:
        with self._lock:
            return self._items.get(entity_id)

    def merge(self, entity: E) -> E:
        """Store ``entity`` unless the cached copy is newer; return the winning copy."""
        with self._lock:
            cached = self._items.get(entity.id)
            incoming = _ts(entity.updated_at)
            if cached is not None:
                current = _ts(cached.updated_at)
                if incoming is not None and current is not None and incoming < current:
                    return cached
            entity = self._reapply(entity, incoming)
            self._items[entity.id] = entity
            return entity

    def _reapply(self, entity: E, incoming: Optional[datetime]) -> E:
        pending = self._deltas.get(entity.id)
        if pending is None:
            return entity
        base_ts, fields = pending
        if incoming is not None and base_ts is not None and incoming > base_ts:
            del self._deltas[entity.id]
            return entity
        changes = {}
        for name, (base, delta) in list(fields.items()):
            if int(getattr(entity, name)) == base:
                changes[name] = max(0, base + delta)
            else:
                del fields[name]
        if not fields:
            del self._deltas[entity.id]
        return replace(entity, **changes) if changes else entity

    def merge_all(self, entities: Iterable[E]) -> List[E]:
        return [self.merge(e) for e in entities]

    def adjust(self, entity_id: str, field_name: str, delta: int) -> Optional[E]:
        """Apply a confirmed counter change to the cached copy."""
        with self._lock:
            cached = self._items.get(entity_id)
            if cached is None:
                return None
            value = int(getattr(cached, field_name))
            base_ts, fields = self._deltas.setdefault(entity_id, (_ts(cached.updated_at), {}))
            base, pending = fields.get(field_name, (value, 0))
            fields[field_name] = (base, pending + delta)
            updated = replace(cached, **{field_name: max(0, value + delta)})
            self._items[entity_id] = updated
            return updated

    def evict(self, entity_id: str) -> None:
        with self._lock:
            self._items.pop(entity_id, None)
            self._deltas.pop(entity_id, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)
