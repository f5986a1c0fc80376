"""SQL lineage store tests against an in-memory SQLite database."""

from __future__ import annotations

import pytest
from pipeline_e2e_tester.configuration.runtime_settings import ReceiverTarget
from pipeline_e2e_tester.console_output import ScenarioConsole
from pipeline_e2e_tester.lineage_verification import (
    LineageStoreError,
    LineageVerifier,
    SqlLineageStore,
)
from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool

_SCHEMA = (
    "create table action (action_id integer primary key, action_name text, created_at text)",
    "create table report_file (report_id text, action_id integer, receiving_org text,"
    " receiving_org_svc text, item_count integer, external_name text)",
    "create table item_lineage (item_lineage_id text, child_report_id text)",
)


def _engine() -> Engine:
    engine = create_engine(
        "sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool
    )

    @event.listens_for(engine, "connect")
    def _register_lineage_functions(dbapi_connection, _connection_record) -> None:
        # The pipeline's recursive lineage functions, reduced to one marker per submission.
        dbapi_connection.create_function("item_descendants", 1, lambda s: f"item-of-{s}")
        dbapi_connection.create_function("report_descendants", 1, lambda s: f"report-of-{s}")
        dbapi_connection.create_function("find_sent_reports", 1, lambda s: f"report-of-{s}")

    return engine


def _seeded_engine() -> Engine:
    engine = _engine()
    with engine.begin() as connection:
        for statement in _SCHEMA:
            connection.execute(text(statement))
        connection.execute(
            text(
                "insert into action values"
                " (1, 'receive', '2026-01-01'), (2, 'batch', '2026-01-01'),"
                " (3, 'send', '2026-01-01')"
            )
        )
        connection.execute(
            text(
                "insert into report_file values"
                " ('child-1', 1, 'ignore', 'CSV', 3, null),"
                " ('child-2', 1, 'other', 'CSV', 2, null),"
                " ('report-of-sub-1', 2, 'ignore', 'CSV', 25, null),"
                " ('report-of-sub-1', 3, 'ignore', 'SFTP', 25, 'pdi-covid-19-北京.csv')"
            )
        )
        connection.execute(
            text(
                "insert into item_lineage values"
                " ('item-of-sub-1', 'child-1'), ('item-of-sub-1', 'child-1'),"
                " ('item-of-sub-1', 'child-1'), ('item-of-sub-1', 'child-2'),"
                " ('item-of-sub-1', 'child-2'), ('item-of-sub-2', 'child-1')"
            )
        )
    return engine


def test_counts_item_descendants_per_receiver_and_stage() -> None:
    store = SqlLineageStore("sqlite://", engine=_seeded_engine())

    with store.read_transaction() as snapshot:
        assert snapshot.count_item_descendants("sub-1", "CSV", "receive") == 5
        assert snapshot.count_item_descendants("sub-1", "CSV", "receive", "ignore") == 3
        assert snapshot.count_item_descendants("sub-1", "CSV", "batch") == 0
        assert snapshot.count_item_descendants("sub-2", "CSV", "receive") == 1


def test_sums_report_descendants_and_reports_missing_as_none() -> None:
    store = SqlLineageStore("sqlite://", engine=_seeded_engine())

    with store.read_transaction() as snapshot:
        assert snapshot.count_report_descendants("sub-1", "CSV", "batch") == 25
        assert snapshot.count_report_descendants("sub-1", "HL7", "batch") is None


def test_finds_uploaded_filename_and_latest_action() -> None:
    store = SqlLineageStore("sqlite://", engine=_seeded_engine())

    with store.read_transaction() as snapshot:
        assert snapshot.find_uploaded_filename("sub-1", "SFTP") == "pdi-covid-19-北京.csv"
        assert snapshot.find_uploaded_filename("sub-9", "SFTP") is None
        latest = snapshot.most_recent_action()

    assert latest is not None
    assert (latest.action_id, latest.action_name) == (3, "send")


def test_verifier_reads_counts_from_sql_store() -> None:
    store = SqlLineageStore("sqlite://", engine=_seeded_engine())
    receiver = ReceiverTarget(
        organization_name="ignore", name="CSV", has_timing=False, has_transport=False
    )

    passed = LineageVerifier(store).verify(
        "sub-1", (receiver,), 3, console=ScenarioConsole(), filter_by_org=True
    )

    assert passed is True


def test_query_failure_is_raised_as_lineage_store_error() -> None:
    store = SqlLineageStore("sqlite://", engine=_engine())

    with pytest.raises(LineageStoreError, match="Lineage store query failed"):
        with store.read_transaction() as snapshot:
            snapshot.count_item_descendants("sub-1", "CSV", "receive")


def test_invalid_url_is_raised_as_lineage_store_error() -> None:
    with pytest.raises(LineageStoreError, match="Invalid lineage store URL"):
        SqlLineageStore("not a database url")
