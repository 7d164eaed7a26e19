from __future__ import annotations

import io
import zipfile
from collections import deque

import pytest
import requests


def make_response(status_code: int, content: bytes = b"", url: str = "") -> requests.Response:
    response = requests.Response()
    response.status_code = status_code
    response._content = content
    response._content_consumed = True
    response.raw = io.BytesIO(content)
    response.url = url
    response.reason = "test"
    return response


def zip_bytes(members: dict[str, bytes]) -> bytes:
    data = io.BytesIO()
    with zipfile.ZipFile(data, "w") as archive:
        for name, payload in members.items():
            archive.writestr(name, payload)
    return data.getvalue()


class RecordingSession(requests.Session):
    """Session that answers from a queue of canned responses."""

    def __init__(self, responses: list[requests.Response]) -> None:
        super().__init__()
        self.responses = deque(responses)
        self.calls: list[tuple[str, str, bytes | None]] = []
        self.options: list[dict] = []

    def request(self, method, url, *args, **kwargs):  # type: ignore[override]
        body = kwargs.get("data")
        if hasattr(body, "read"):
            body = body.read()
        self.calls.append((method, url, body))
        self.options.append({k: v for k, v in kwargs.items() if k != "data"})
        response = self.responses.popleft()
        if isinstance(response, Exception):
            raise response
        response.url = url
        return response


@pytest.fixture
def recording_session():
    def _factory(*responses: requests.Response) -> RecordingSession:
        return RecordingSession(list(responses))

    return _factory
