"""Report submitter tests."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import pytest
import requests
from pipeline_e2e_tester.configuration.runtime_settings import SenderIdentity, TargetEnvironment
from pipeline_e2e_tester.submission import (
    ReportSubmitter,
    SubmissionError,
    SubmissionResponse,
    SubmitMode,
)

ENVIRONMENT = TargetEnvironment(
    name="local",
    endpoint="http://localhost:7071/api/reports",
    database_markers=("localhost",),
    requires_key=False,
)
CSV_SENDER = SenderIdentity(organization_name="ignore", name="ignore-strac", format="CSV")
HL7_SENDER = SenderIdentity(organization_name="ignore", name="ignore-hl7", format="HL7")


@dataclass
class _FakeResponse:
    status_code: int
    text: str


class _FakeSession:
    def __init__(self, response: _FakeResponse | None = None, error: Exception | None = None):
        self.response = response or _FakeResponse(201, '{"id": "abc"}')
        self.error = error
        self.calls: list[dict[str, Any]] = []

    def post(self, url: str, **kwargs: Any) -> _FakeResponse:
        self.calls.append({"url": url, **kwargs})
        if self.error is not None:
            raise self.error
        return self.response


def test_posts_file_with_sender_headers(tmp_path: Path) -> None:
    payload = tmp_path / "payload.csv"
    payload.write_bytes(b"message_id\n1\n")
    session = _FakeSession()

    response = ReportSubmitter(session=session).submit(ENVIRONMENT, payload, CSV_SENDER, None)

    assert response == SubmissionResponse(status_code=201, body='{"id": "abc"}')
    assert response.is_created is True
    assert session.calls == [
        {
            "url": "http://localhost:7071/api/reports",
            "data": b"message_id\n1\n",
            "headers": {"Content-Type": "text/csv", "client": "ignore.ignore-strac"},
            "params": None,
        }
    ]


def test_key_and_mode_are_sent_when_given() -> None:
    session = _FakeSession(_FakeResponse(200, "{}"))

    response = ReportSubmitter(session=session).submit(
        ENVIRONMENT, b"x", HL7_SENDER, "secret", SubmitMode.CHECK_CONNECTIONS
    )

    assert response.is_ok is True
    call = session.calls[0]
    assert call["headers"] == {
        "Content-Type": "application/hl7-v2",
        "client": "ignore.ignore-hl7",
        "x-functions-key": "secret",
    }
    assert call["params"] == {"option": "CheckConnections"}


def test_error_status_is_returned_not_raised() -> None:
    session = _FakeSession(_FakeResponse(400, '{"errorCount": 1}'))

    response = ReportSubmitter(session=session).submit(ENVIRONMENT, b"", CSV_SENDER, None)

    assert response.status_code == 400
    assert response.is_created is False


def test_transport_failure_is_raised_as_submission_error() -> None:
    session = _FakeSession(error=requests.ConnectionError("connection refused"))

    with pytest.raises(SubmissionError, match="connection refused"):
        ReportSubmitter(session=session).submit(ENVIRONMENT, b"x", CSV_SENDER, None)


def test_unreadable_payload_is_raised_as_submission_error(tmp_path: Path) -> None:
    session = _FakeSession()

    with pytest.raises(SubmissionError, match="Unable to read payload file"):
        ReportSubmitter(session=session).submit(
            ENVIRONMENT, tmp_path / "missing.csv", CSV_SENDER, None
        )
    assert session.calls == []


def test_session_is_created_lazily() -> None:
    submitter = ReportSubmitter()

    assert isinstance(submitter.session, requests.Session)
    assert submitter.session is submitter.session


def test_concurrent_first_use_creates_a_single_session(monkeypatch) -> None:
    created: list[object] = []

    class _SlowSession:
        def __init__(self) -> None:
            time.sleep(0.01)
            created.append(self)

    monkeypatch.setattr(requests, "Session", _SlowSession)
    submitter = ReportSubmitter()
    barrier = threading.Barrier(8)
    seen: list[object] = []

    def read_session() -> None:
        barrier.wait()
        seen.append(submitter.session)

    threads = [threading.Thread(target=read_session) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(created) == 1
    assert all(session is created[0] for session in seen)
