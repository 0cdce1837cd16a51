from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import pytest

from detector.metacore_client import InMemoryMetadataStore, MetaCoreError
from detector.models import CallbackPayload, ProcessRequest


@dataclass(slots=True)
class FakeHTTPResponse:
    status_code: int = 200
    text: str = ""


@dataclass(slots=True)
class HTTPCall:
    method: str
    url: str
    json: dict[str, Any] | None
    timeout: float | None


class FakeSession:
    """
    Minimal requests.Session mock.

    Records calls and answers with `status_code` (or raises `exc`).
    """

    def __init__(self, status_code: int = 200, *, text: str = "", exc: Exception | None = None) -> None:
        self.status_code = status_code
        self.text = text
        self.exc = exc
        self.calls: list[HTTPCall] = []

    def request(self, method: str, url: str, json: Any = None, timeout: float | None = None) -> FakeHTTPResponse:
        self.calls.append(HTTPCall(method=method, url=url, json=json, timeout=timeout))
        if self.exc is not None:
            raise self.exc
        return FakeHTTPResponse(status_code=self.status_code, text=self.text)


class RecordingStore(InMemoryMetadataStore):
    """In-memory store que registra cada llamada y puede fallar en la N-ésima."""

    def __init__(self, *, fail_on_call: int | None = None) -> None:
        super().__init__()
        self.calls: list[tuple[str, str, object]] = []
        self._fail_on_call = fail_on_call

    def _record(self, op: str, key: str, value: object) -> None:
        self.calls.append((op, key, value))
        if self._fail_on_call is not None and len(self.calls) == self._fail_on_call:
            raise MetaCoreError(f"meta-core HTTP 500 en {op} {key}")

    def set_property(self, cid: str, key: str, value: str) -> None:
        self._record("set", key, value)
        super().set_property(cid, key, value)

    def add_to_set(self, cid: str, key: str, value: str) -> None:
        self._record("add", key, value)
        super().add_to_set(cid, key, value)

    def merge_metadata(self, cid: str, metadata) -> None:
        self._record("merge", "*", dict(metadata))
        super().merge_metadata(cid, metadata)


@dataclass
class CallbackCollector:
    payloads: list[CallbackPayload] = field(default_factory=list)

    def __call__(self, payload: CallbackPayload) -> None:
        self.payloads.append(payload)

    @property
    def last(self) -> CallbackPayload:
        assert self.payloads, "no callback sent"
        return self.payloads[-1]


def make_request(
    meta: dict[str, Any] | None = None,
    *,
    file_path: str = "/videos/Movie.mkv",
    task_id: str = "task-1",
    cid: str = "cid-1",
) -> ProcessRequest:
    existing: dict[str, Any] = {"fileType": "video"}
    existing.update(meta or {})
    return ProcessRequest(
        task_id=task_id,
        cid=cid,
        file_path=file_path,
        callback_url="http://orchestrator/callback",
        meta_core_url="http://meta-core:9000",
        existing_meta=existing,
    )


@pytest.fixture()
def store() -> RecordingStore:
    return RecordingStore()


@pytest.fixture()
def callbacks() -> CallbackCollector:
    return CallbackCollector()


@pytest.fixture()
def process_payload() -> dict[str, Any]:
    return {
        "taskId": "test-anime-1",
        "cid": "test-cid-anime",
        "filePath": "/anime/Naruto S01E01.mkv",
        "callbackUrl": "http://localhost/callback",
        "metaCoreUrl": "http://localhost:9000",
        "existingMeta": {
            "fileType": "video",
            "originalTitle": "Naruto",
            "fileName": "Naruto S01E01.mkv",
        },
    }
