"""Durable component store on top of Flask-SQLAlchemy.

Every method uses ``db.session`` and therefore needs an application context.
Content updates are compare-and-swap statements on the ``version`` column:
an update that matches no row lost the race against another edit.
"""

import logging
from dataclasses import replace
from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy import insert, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from extensions import db
from .models import TEXT_FIELDS, Component, ComponentRecord
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


def _null_if_empty(value):
    return value if value else None


def _columns(component: Component) -> dict:
    """Content columns of ``component``; empty fields are stored as NULL."""
    values = {name: _null_if_empty(getattr(component, name)) for name in TEXT_FIELDS}
    values["drawersize"] = component.drawersize
    return values


class SqlComponentStore(ComponentStore):

    def __init__(self, database=db) -> None:
        self.db = database

    @property
    def session(self):
        return self.db.session

    def _read(self, component_id: int) -> Optional[ComponentRecord]:
        stmt = (select(ComponentRecord)
                .where(ComponentRecord.id == component_id)
                .execution_options(populate_existing=True))
        return self.session.execute(stmt).scalar_one_or_none()

    def find_by_id(self, component_id: int) -> Optional[Component]:
        record = self._read(component_id)
        return record.to_component() if record else None

    def timestamps(self, component_id: int) -> Optional[Tuple[datetime, Optional[datetime]]]:
        """(created, updated) of a record, ``None`` if it does not exist."""
        row = self.session.execute(
            select(ComponentRecord.created, ComponentRecord.updated)
            .where(ComponentRecord.id == component_id)
        ).first()
        return (row.created, row.updated) if row else None

    def edit_record(self, component_id: int, updater: Updater) -> EditResult:
        try:
            record = self._read(component_id)
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.exception("Reading ID=%d failed.", component_id)
            return EditResult(False, str(exc))

        if record is None:
            before, read_version = Component(component_id), None
        else:
            before, read_version = record.to_component(), record.version

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

        now = datetime.utcnow()
        try:
            if read_version is None:
                self.session.execute(
                    insert(ComponentRecord).values(
                        id=component_id, equiv_set=component_id, version=1,
                        created=now, **_columns(candidate)))
            else:
                result = self.session.execute(
                    update(ComponentRecord)
                    .where(ComponentRecord.id == component_id,
                           ComponentRecord.version == read_version)
                    .values(version=read_version + 1, updated=now, **_columns(candidate))
                    .execution_options(synchronize_session=False))
                if result.rowcount != 1:
                    self.session.rollback()
                    logger.info("Edit conflict on ID=%d, discarding edit.", component_id)
                    return EditResult(False, MSG_CONFLICT)
            self.session.commit()
        except IntegrityError:
            # someone else inserted the same ID first
            self.session.rollback()
            logger.info("Edit conflict on new ID=%d, discarding edit.", component_id)
            return EditResult(False, MSG_CONFLICT)
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.exception("Storing ID=%d failed.", component_id)
            return EditResult(False, str(exc))

        logger.debug("Stored ID=%d.", component_id)
        return EditResult(True, "")

    def join_set(self, component_id: int, equiv_set: int) -> None:
        self._assign_set(component_id, equiv_set)

    def leave_set(self, component_id: int) -> None:
        self._assign_set(component_id, ComponentRecord.id)

    def _assign_set(self, component_id: int, equiv_set) -> None:
        try:
            result = self.session.execute(
                update(ComponentRecord)
                .where(ComponentRecord.id == component_id)
                .values(equiv_set=equiv_set, updated=datetime.utcnow())
                .execution_options(synchronize_session=False))
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            raise
        if result.rowcount == 0:
            logger.warning("Cannot move unknown ID=%d to another set.", component_id)

    def matching_equiv_set_for_component(self, component_id: int) -> List[Component]:
        target_set = (select(ComponentRecord.equiv_set)
                      .where(ComponentRecord.id == component_id)
                      .scalar_subquery())
        stmt = (select(ComponentRecord)
                .where(ComponentRecord.equiv_set == target_set)
                .order_by(ComponentRecord.equiv_set, ComponentRecord.id)
                .execution_options(populate_existing=True))
        return [record.to_component() for record in self.session.execute(stmt).scalars()]

    def search(self, term: str) -> List[Component]:
        if not normalize_term(term):
            return []
        # SQL lower() folds ASCII only, so every row goes through the scorer
        stmt = (select(ComponentRecord)
                .order_by(ComponentRecord.id)
                .execution_options(populate_existing=True))
        records = self.session.execute(stmt).scalars()
        return rank(term, [record.to_component() for record in records])
