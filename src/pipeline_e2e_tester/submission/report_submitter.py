"""HTTP submission of payload files to the pipeline's ingestion endpoint."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from http import HTTPStatus
from pathlib import Path

import requests

from pipeline_e2e_tester.configuration.runtime_settings import SenderIdentity, TargetEnvironment

logger = logging.getLogger(__name__)

CONTENT_TYPES = {"CSV": "text/csv", "HL7": "application/hl7-v2"}


class SubmissionError(Exception):
    """Raised when a payload cannot be read or the request does not complete."""


class SubmitMode(str, Enum):
    """Processing option passed to the endpoint as the `option` query parameter."""

    CHECK_CONNECTIONS = "CheckConnections"
    VALIDATE_PAYLOAD = "ValidatePayload"
    SKIP_SEND = "SkipSend"
    SKIP_INVALID_ITEMS = "SkipInvalidItems"


@dataclass(frozen=True)
class SubmissionResponse:
    """Status code and raw body returned by the ingestion endpoint."""

    status_code: int
    body: str

    @property
    def is_created(self) -> bool:
        return self.status_code == HTTPStatus.CREATED

    @property
    def is_ok(self) -> bool:
        return self.status_code == HTTPStatus.OK


class ReportSubmitter:  # pylint: disable=too-few-public-methods
    """POSTs a payload on behalf of a sender.

    Pass a custom `session` in tests to intercept calls without touching the
    network. No timeout is applied, so a hung endpoint blocks the caller.
    """

    def __init__(self, session: requests.Session | None = None) -> None:
        self._session = session
        self._session_lock = threading.Lock()

    @property
    def session(self) -> requests.Session:
        # read concurrently by fan-out workers
        with self._session_lock:
            if self._session is None:
                self._session = requests.Session()
            return self._session

    def submit(
        self,
        environment: TargetEnvironment,
        payload: Path | bytes,
        sender: SenderIdentity,
        key: str | None,
        mode: SubmitMode | None = None,
    ) -> SubmissionResponse:
        data = _read_payload(payload)
        headers = {
            "Content-Type": CONTENT_TYPES.get(sender.format, "text/csv"),
            "client": sender.full_name,
        }
        if key:
            headers["x-functions-key"] = key
        params = {"option": mode.value} if mode is not None else None
        logger.debug(
            "POST %s as %s (%s bytes, option=%s)",
            environment.endpoint,
            sender.full_name,
            len(data),
            mode.value if mode else None,
        )
        try:
            response = self.session.post(
                environment.endpoint, data=data, headers=headers, params=params
            )
        except requests.RequestException as exc:
            raise SubmissionError(f"Submission to {environment.endpoint} failed: {exc}") from exc
        logger.debug("response status %s", response.status_code)
        return SubmissionResponse(status_code=response.status_code, body=response.text)


def _read_payload(payload: Path | bytes) -> bytes:
    if isinstance(payload, bytes):
        return payload
    try:
        return payload.read_bytes()
    except OSError as exc:
        raise SubmissionError(f"Unable to read payload file {payload}: {exc}") from exc
