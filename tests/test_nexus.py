from pathlib import Path

import pytest
import requests
from requests.adapters import BaseAdapter

from conftest import make_response
from nexus_sync_tools.errors import UnexpectedStatusError, UploadRejectedError
from nexus_sync_tools.models import Artifact, SyncSettings
from nexus_sync_tools.layout import decode_default_layout
from nexus_sync_tools.nexus import artifact_url, build_session, probe_artifact, repository_url, sync_artifacts

BASE = "http://nexus:8081/nexus/content/repositories/releases"


def _artifact(root: Path, filename: str, data: bytes = b"jar-bytes") -> Artifact:
    path = root / filename
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)
    return Artifact(root=root, filename=filename, gav=decode_default_layout(filename))


def test_repository_url_joins_server_content_path_and_repository() -> None:
    settings = SyncSettings(
        servername="nexus",
        port="8081",
        content_path="/nexus/content/repositories/",
        repository="releases",
    )
    assert repository_url(settings) == BASE
    assert artifact_url(BASE + "/", "/com/acme/a.jar") == BASE + "/com/acme/a.jar"


def test_build_session_only_sets_auth_with_both_credentials() -> None:
    assert build_session("admin", "secret").auth == ("admin", "secret")
    assert build_session("admin", "").auth is None
    assert build_session("", "secret").auth is None
    assert build_session(None, None, verify=False).verify is False


def test_existing_artifact_is_not_uploaded(tmp_path: Path, recording_session) -> None:
    artifact = _artifact(tmp_path, "com/acme/widget/1.0.0/widget-1.0.0.jar")
    session = recording_session(make_response(200))

    results = list(sync_artifacts(session, [artifact], repository_url=BASE, upload=True))

    assert results == [artifact]
    assert artifact.status_code == 200
    assert session.calls == [("HEAD", BASE + "/com/acme/widget/1.0.0/widget-1.0.0.jar", None)]


def test_missing_artifact_without_upload_keeps_not_found(tmp_path: Path, recording_session) -> None:
    artifact = _artifact(tmp_path, "com/acme/widget/1.0.0/widget-1.0.0.pom")
    session = recording_session(make_response(404))

    list(sync_artifacts(session, [artifact], repository_url=BASE, upload=False))

    assert artifact.status_code == 404
    assert [call[0] for call in session.calls] == ["HEAD"]


def test_missing_artifact_is_uploaded_with_file_body(tmp_path: Path, recording_session) -> None:
    artifact = _artifact(tmp_path, "com/acme/widget/1.0.0/widget-1.0.0.jar", b"payload")
    session = recording_session(make_response(404), make_response(201))

    list(sync_artifacts(session, [artifact], repository_url=BASE, upload=True))

    assert artifact.status_code == 201
    method, url, body = session.calls[1]
    assert method == "PUT"
    assert url.endswith("/widget-1.0.0.jar")
    assert body == b"payload"


def test_rejected_upload_raises(tmp_path: Path, recording_session) -> None:
    artifact = _artifact(tmp_path, "com/acme/widget/1.0.0/widget-1.0.0.jar")
    session = recording_session(make_response(404), make_response(401))

    with pytest.raises(UploadRejectedError) as excinfo:
        list(sync_artifacts(session, [artifact], repository_url=BASE, upload=True))
    assert excinfo.value.status_code == 401


def test_unexpected_probe_status_aborts_remaining_artifacts(tmp_path: Path, recording_session) -> None:
    first = _artifact(tmp_path, "g/a/1/a-1.jar")
    second = _artifact(tmp_path, "g/b/1/b-1.jar")
    session = recording_session(make_response(500), make_response(200))
    seen = []

    with pytest.raises(UnexpectedStatusError) as excinfo:
        for artifact in sync_artifacts(session, [first, second], repository_url=BASE, upload=True):
            seen.append(artifact)

    assert excinfo.value.status_code == 500
    assert seen == []
    assert len(session.calls) == 1
    assert second.status_code is None


class _RoutingAdapter(BaseAdapter):
    """Transport answering each URL with a fixed status and optional Location."""

    def __init__(self, routes: dict[str, tuple[int, str | None]]) -> None:
        super().__init__()
        self.routes = routes
        self.seen: list[tuple[str, str]] = []

    def send(self, request, **kwargs):
        self.seen.append((request.method, request.url))
        status, location = self.routes[request.url]
        response = make_response(status, url=request.url)
        if location:
            response.headers["Location"] = location
        response.request = request
        return response

    def close(self) -> None:
        pass


def test_probe_follows_redirects_to_the_moved_repository() -> None:
    old = BASE + "/g/a/1/a-1.jar"
    new = "http://nexus:8081/new/g/a/1/a-1.jar"
    adapter = _RoutingAdapter({old: (301, new), new: (200, None)})
    session = build_session(None, None)
    session.mount("http://nexus:8081/", adapter)

    assert probe_artifact(session, old) == 200
    assert adapter.seen == [("HEAD", old), ("HEAD", new)]


def test_transport_error_propagates_and_stops_the_run(tmp_path: Path, recording_session) -> None:
    first = _artifact(tmp_path, "g/a/1/a-1.jar")
    second = _artifact(tmp_path, "g/b/1/b-1.jar")
    session = recording_session(requests.ConnectionError("connection refused"), make_response(200))

    with pytest.raises(requests.ConnectionError):
        list(sync_artifacts(session, [first, second], repository_url=BASE, upload=False))

    assert len(session.calls) == 1
    assert first.status_code is None
    assert second.status_code is None
