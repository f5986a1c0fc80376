"""Read-only access to the persisted lineage graph."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import AbstractContextManager, contextmanager
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from sqlalchemy import Connection, create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import ArgumentError, SQLAlchemyError

logger = logging.getLogger(__name__)

_ITEM_DESCENDANTS_SQL = """
    select count(*)
    from item_lineage as il
    join report_file as rf on il.child_report_id = rf.report_id
    join action as a on a.action_id = rf.action_id
    where rf.receiving_org_svc = :receiver_name
    {organization_filter}
    and a.action_name = :stage
    and il.item_lineage_id in (select item_descendants(:submission_id))
"""

_REPORT_DESCENDANTS_SQL = """
    select sum(rf.item_count)
    from report_file as rf
    join action as a on a.action_id = rf.action_id
    where rf.receiving_org_svc = :receiver_name
    and a.action_name = :stage
    and rf.report_id in (select report_descendants(:submission_id))
"""

_UPLOADED_FILENAME_SQL = """
    select rf.external_name
    from report_file as rf
    join action as a on a.action_id = rf.action_id
    where rf.report_id in (select find_sent_reports(:submission_id))
    and rf.receiving_org_svc = :receiver_name
    order by a.action_id
"""

_MOST_RECENT_ACTION_SQL = """
    select action_id, action_name, created_at
    from action
    where action_id = (select max(action_id) from action)
"""


class LineageStoreError(Exception):
    """Raised when the lineage store cannot be reached or queried."""


@dataclass(frozen=True)
class ActionRecord:
    """One row of the pipeline's action log."""

    action_id: int
    action_name: str
    created_at: datetime | None


class LineageSnapshot(Protocol):
    """Queries evaluated against one consistent read of the lineage store."""

    def count_item_descendants(
        self,
        submission_id: str,
        receiver_name: str,
        stage: str,
        organization_name: str | None = None,
    ) -> int | None: ...

    def count_report_descendants(
        self, submission_id: str, receiver_name: str, stage: str
    ) -> int | None: ...

    def find_uploaded_filename(self, submission_id: str, receiver_name: str) -> str | None: ...

    def most_recent_action(self) -> ActionRecord | None: ...


class LineageStore(Protocol):  # pylint: disable=too-few-public-methods
    """Source of read transactions over the lineage graph."""

    def read_transaction(self) -> AbstractContextManager[LineageSnapshot]: ...


class SqlLineageSnapshot:
    """Lineage queries bound to one open SQLAlchemy connection and transaction."""

    def __init__(self, connection: Connection) -> None:
        self._connection = connection

    def count_item_descendants(
        self,
        submission_id: str,
        receiver_name: str,
        stage: str,
        organization_name: str | None = None,
    ) -> int | None:
        parameters: dict[str, object] = {
            "receiver_name": receiver_name,
            "stage": stage,
            "submission_id": submission_id,
        }
        organization_filter = ""
        if organization_name is not None:
            organization_filter = "and rf.receiving_org = :organization_name"
            parameters["organization_name"] = organization_name
        sql = _ITEM_DESCENDANTS_SQL.format(organization_filter=organization_filter)
        return self._scalar_int(sql, parameters)

    def count_report_descendants(
        self, submission_id: str, receiver_name: str, stage: str
    ) -> int | None:
        return self._scalar_int(
            _REPORT_DESCENDANTS_SQL,
            {"receiver_name": receiver_name, "stage": stage, "submission_id": submission_id},
        )

    def find_uploaded_filename(self, submission_id: str, receiver_name: str) -> str | None:
        row = self._connection.execute(
            text(_UPLOADED_FILENAME_SQL),
            {"submission_id": submission_id, "receiver_name": receiver_name},
        ).first()
        if row is None or row[0] is None:
            return None
        return str(row[0])

    def most_recent_action(self) -> ActionRecord | None:
        row = self._connection.execute(text(_MOST_RECENT_ACTION_SQL)).first()
        if row is None:
            return None
        return ActionRecord(action_id=int(row[0]), action_name=str(row[1]), created_at=row[2])

    def _scalar_int(self, sql: str, parameters: dict[str, object]) -> int | None:
        logger.debug("lineage query parameters: %s", parameters)
        value = self._connection.execute(text(sql), parameters).scalar()
        return None if value is None else int(value)


class SqlLineageStore:  # pylint: disable=too-few-public-methods
    """Lineage store backed by the pipeline's relational database."""

    def __init__(self, url: str, *, engine: Engine | None = None) -> None:
        try:
            self._engine = engine or create_engine(url, echo=False, pool_pre_ping=True)
        except (ArgumentError, ImportError) as exc:
            raise LineageStoreError(f"Invalid lineage store URL: {exc}") from exc

    @contextmanager
    def read_transaction(self) -> Iterator[LineageSnapshot]:
        """Yield a snapshot whose queries all run inside one transaction."""
        try:
            with self._engine.connect() as connection, connection.begin():
                yield SqlLineageSnapshot(connection)
        except SQLAlchemyError as exc:
            raise LineageStoreError(f"Lineage store query failed: {exc}") from exc
