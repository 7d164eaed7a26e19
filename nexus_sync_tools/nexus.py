from __future__ import annotations

import logging
from http import HTTPStatus
from pathlib import Path
from typing import Iterable, Iterator

import requests

from . import __version__
from .errors import UnexpectedStatusError, UploadRejectedError
from .models import Artifact, SyncSettings

LOGGER = logging.getLogger(__name__)

USER_AGENT = f"nexus-sync-tools/{__version__}"
PROBE_STATUSES = (HTTPStatus.NOT_FOUND, HTTPStatus.OK)


def build_session(username: str | None, password: str | None, *, verify: bool = True) -> requests.Session:
    session = requests.Session()
    session.headers.update({"User-Agent": USER_AGENT})
    session.verify = verify
    if username and password:
        session.auth = (username, password)
    return session


def repository_url(settings: SyncSettings) -> str:
    parts = [
        f"http://{settings.servername}:{settings.port}",
        settings.content_path.strip("/"),
        settings.repository.strip("/"),
    ]
    return "/".join(part for part in parts if part)


def artifact_url(base_url: str, relative_path: str) -> str:
    return f"{base_url.rstrip('/')}/{relative_path.lstrip('/')}"


def probe_artifact(session: requests.Session, url: str, *, timeout: float | None = None) -> int:
    with session.head(url, allow_redirects=True, timeout=timeout) as response:
        status = response.status_code
    LOGGER.debug("HEAD %s -> %s", url, status)
    if status not in PROBE_STATUSES:
        raise UnexpectedStatusError(url, status, tuple(int(code) for code in PROBE_STATUSES))
    return status


def upload_artifact(
    session: requests.Session,
    url: str,
    local_path: Path,
    *,
    timeout: float | None = None,
) -> int:
    with local_path.open("rb") as handle:
        with session.put(url, data=handle, timeout=timeout) as response:
            status = response.status_code
    LOGGER.info("PUT %s -> %s", url, status)
    if status != HTTPStatus.CREATED:
        raise UploadRejectedError(url, status, (int(HTTPStatus.CREATED),))
    return status


def sync_artifacts(
    session: requests.Session,
    artifacts: Iterable[Artifact],
    *,
    repository_url: str,
    upload: bool,
    timeout: float | None = None,
) -> Iterator[Artifact]:
    """Probe each artifact in turn and upload the missing ones.

    Runs strictly one artifact at a time. The first unexpected status or
    transport error propagates, so artifacts after it are never touched.
    """
    for artifact in artifacts:
        url = artifact_url(repository_url, artifact.filename)
        artifact.status_code = probe_artifact(session, url, timeout=timeout)
        if artifact.status_code == HTTPStatus.NOT_FOUND and upload:
            artifact.status_code = upload_artifact(session, url, artifact.local_path, timeout=timeout)
        yield artifact
