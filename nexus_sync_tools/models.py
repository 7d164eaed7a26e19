from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, slots=True)
class Gav:
    group_id: str
    artifact_id: str
    version: str
    packaging: str
    classifier: str = ""

    @property
    def is_complete(self) -> bool:
        return all((self.group_id, self.artifact_id, self.version, self.packaging))


@dataclass(slots=True)
class Artifact:
    root: Path
    filename: str
    gav: Gav
    status_code: int | None = None

    @property
    def local_path(self) -> Path:
        return self.root.joinpath(*self.filename.split("/"))


@dataclass(frozen=True, slots=True)
class Notification:
    id: int
    severity: str
    message: str


@dataclass(frozen=True, slots=True)
class Report:
    return_value: str = ""
    highest_severity: str = ""
    notifications: tuple[Notification, ...] = ()


@dataclass(frozen=True, slots=True)
class SyncSettings:
    servername: str
    port: str
    content_path: str
    repository: str
    username: str = ""
    password: str = ""
    upload: bool = False
    timeout_sec: float | None = None


@dataclass(frozen=True, slots=True)
class DeliverySettings:
    url: str
    gav: Gav
    username: str = ""
    password: str = ""
    dry_run: bool = False
    insecure_skip_verify: bool = False
    timeout_sec: float | None = None
