"""
Contract shared by every component store backend.

Content edits go through ``edit_record`` and nothing else. The caller passes
an updater that receives a private copy of the record and decides what
happens to it:

    def set_value(component):
        component.value = "10k"
        return Commit()

    store.edit_record(42, set_value)

The updater may return ``Commit()`` (store the edited copy), ``Commit(other)``
(store ``other`` instead) or ``Discard(reason)``. Plain ``True`` and
``False`` are accepted as shorthands for the first and last.

Equivalence-set membership is never touched by ``edit_record``; use
``join_set`` / ``leave_set`` for that.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, List, NamedTuple, Optional, Union

from .models import Component

MSG_NO_CHANGE = "No change"
MSG_ID_MODIFIED = "ID was modified"
MSG_CONFLICT = "Editing conflict. Discarding this edit."


@dataclass(frozen=True)
class Commit:
    """Persist the edit. ``component`` replaces the edited copy when given."""

    component: Optional[Component] = None


@dataclass(frozen=True)
class Discard:
    """Leave the record as it is."""

    reason: str = ""


EditDecision = Union[Commit, Discard, bool, None]
Updater = Callable[[Component], EditDecision]


class EditResult(NamedTuple):
    committed: bool
    message: str = ""


def resolve_decision(decision: EditDecision, edited: Component) -> Union[Component, Discard]:
    """Turn an updater's return value into the candidate record or a ``Discard``."""
    if isinstance(decision, Discard):
        return decision
    if isinstance(decision, Commit):
        return decision.component if decision.component is not None else edited
    if decision is True:
        return edited
    if decision is False or decision is None:
        return Discard()
    raise TypeError(f"Updater returned {decision!r}; expected Commit, Discard or bool")


class ComponentStore(ABC):
    """Passive, synchronous store of components. Safe to share between threads."""

    @abstractmethod
    def find_by_id(self, component_id: int) -> Optional[Component]:
        """Return a copy of the component, or ``None`` if it does not exist."""

    @abstractmethod
    def edit_record(self, component_id: int, updater: Updater) -> EditResult:
        """
        Read-modify-write the record ``component_id``.

        An absent id is presented to ``updater`` as an empty record and
        inserted on commit. The store fails fast on a concurrent modification
        and never retries.
        """

    @abstractmethod
    def join_set(self, component_id: int, equiv_set: int) -> None:
        """Make ``component_id`` a member of equivalence set ``equiv_set``."""

    @abstractmethod
    def leave_set(self, component_id: int) -> None:
        """Return ``component_id`` to its own singleton set."""

    @abstractmethod
    def matching_equiv_set_for_component(self, component_id: int) -> List[Component]:
        """All members of the set ``component_id`` is in, ordered by (equiv_set, id)."""

    @abstractmethod
    def search(self, term: str) -> List[Component]:
        """Components matching ``term``, most relevant first."""
