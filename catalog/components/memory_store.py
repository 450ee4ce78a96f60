"""Transient in-process component store."""

import logging
import threading
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Dict, List, Optional, Set, Tuple

from .models import Component
from .scoring import normalize_term, rank
from .store import (
    MSG_CONFLICT,
    MSG_ID_MODIFIED,
    MSG_NO_CHANGE,
    ComponentStore,
    Discard,
    EditResult,
    Updater,
    resolve_decision,
)

logger = logging.getLogger(__name__)


@dataclass
class _Entry:
    component: Component
    version: int
    created: datetime
    updated: Optional[datetime] = None


class InMemoryComponentStore(ComponentStore):
    """
    All records in one dict behind a single lock.

    The lock is held for the snapshot read and for the final
    compare-and-commit, never while the updater runs. Each entry carries a
    content version; an edit commits only if the version it read is still
    current. Set membership lives in a side index ``equiv_set -> ids`` so
    expanding a set does not scan the catalog.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._entries: Dict[int, _Entry] = {}
        self._members: Dict[int, Set[int]] = {}

    def find_by_id(self, component_id: int) -> Optional[Component]:
        with self._lock:
            entry = self._entries.get(component_id)
            return entry.component.copy() if entry else None

    def timestamps(self, component_id: int) -> Optional[Tuple[datetime, Optional[datetime]]]:
        """(created, updated) of a record, ``None`` if it does not exist."""
        with self._lock:
            entry = self._entries.get(component_id)
            return (entry.created, entry.updated) if entry else None

    def edit_record(self, component_id: int, updater: Updater) -> EditResult:
        with self._lock:
            entry = self._entries.get(component_id)
            read_version = entry.version if entry else 0
            before = entry.component.copy() if entry else Component(component_id)

        edited = before.copy()
        outcome = resolve_decision(updater(edited), edited)
        if isinstance(outcome, Discard):
            return EditResult(True, outcome.reason)
        if outcome.id != component_id:
            logger.warning("Refusing edit of ID=%d: updater changed the ID to %r.",
                           component_id, outcome.id)
            return EditResult(False, MSG_ID_MODIFIED)

        candidate = replace(outcome, equiv_set=before.equiv_set)
        if candidate == before:
            logger.info("No need to store ID=%d: no change.", component_id)
            return EditResult(True, MSG_NO_CHANGE)

        with self._lock:
            current = self._entries.get(component_id)
            if (current.version if current else 0) != read_version:
                logger.info("Edit conflict on ID=%d, discarding edit.", component_id)
                return EditResult(False, MSG_CONFLICT)

            now = datetime.utcnow()
            if current is None:
                stored = replace(candidate, equiv_set=component_id)
                self._entries[component_id] = _Entry(stored, 1, created=now)
                self._members.setdefault(component_id, set()).add(component_id)
            else:
                # membership may have moved since the read; keep the current one
                stored = replace(candidate, equiv_set=current.component.equiv_set)
                self._entries[component_id] = _Entry(
                    stored, current.version + 1, created=current.created, updated=now)
        logger.debug("Stored ID=%d.", component_id)
        return EditResult(True, "")

    def join_set(self, component_id: int, equiv_set: int) -> None:
        with self._lock:
            self._assign_set(component_id, equiv_set)

    def leave_set(self, component_id: int) -> None:
        with self._lock:
            self._assign_set(component_id, component_id)

    def _assign_set(self, component_id: int, equiv_set: int) -> None:
        entry = self._entries.get(component_id)
        if entry is None:
            logger.warning("Cannot move unknown ID=%d to set %d.", component_id, equiv_set)
            return
        old_set = entry.component.equiv_set
        if old_set == equiv_set:
            return
        members = self._members[old_set]
        members.discard(component_id)
        if not members:
            del self._members[old_set]
        self._members.setdefault(equiv_set, set()).add(component_id)
        entry.component = replace(entry.component, equiv_set=equiv_set)
        entry.updated = datetime.utcnow()

    def matching_equiv_set_for_component(self, component_id: int) -> List[Component]:
        with self._lock:
            entry = self._entries.get(component_id)
            if entry is None:
                return []
            ids = sorted(self._members.get(entry.component.equiv_set, ()))
            return [self._entries[member].component.copy() for member in ids]

    def search(self, term: str) -> List[Component]:
        if not normalize_term(term):
            return []
        with self._lock:
            snapshot = [entry.component.copy() for entry in self._entries.values()]
        return rank(term, snapshot)
