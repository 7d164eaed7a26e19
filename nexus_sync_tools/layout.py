"""Maven default repository layout.

<group>/<group>/<artifact>/<version>/<artifact>-<version>[-<classifier>].<packaging>
"""

from __future__ import annotations

import os
from dataclasses import replace
from pathlib import PurePath

from .models import Gav

SEPARATOR = "/"
CONSIDERED_EXTENSIONS = (".jar", ".pom")
QA_REPORT_CLASSIFIER = "qareport"


def _path_parts(path: str | PurePath) -> list[str]:
    if isinstance(path, PurePath):
        text = path.as_posix()
    else:
        text = path.replace(os.sep, SEPARATOR)
    return [part for part in text.split(SEPARATOR) if part not in {"", "."}]


def _classifier_from_stem(stem: str, artifact_id: str, version: str) -> str:
    if not artifact_id or not version:
        return ""
    prefix = f"{artifact_id}-{version}"
    if not stem.startswith(prefix):
        return ""
    rest = stem[len(prefix) :]
    if not rest.startswith("-"):
        return ""
    return rest[1:]


def decode_default_layout(path: str | PurePath) -> Gav:
    # Group segments stay joined by "/" rather than ".".
    parts = _path_parts(path)
    filename = parts[-1] if parts else ""
    stem, dot, packaging = filename.rpartition(".")
    if not dot:
        stem, packaging = filename, ""
    version = parts[-2] if len(parts) >= 2 else ""
    artifact_id = parts[-3] if len(parts) >= 3 else ""
    group_id = SEPARATOR.join(parts[:-3])
    return Gav(
        group_id=group_id,
        artifact_id=artifact_id,
        version=version,
        packaging=packaging,
        classifier=_classifier_from_stem(stem, artifact_id, version),
    )


def artifact_filename(gav: Gav) -> str:
    name = f"{gav.artifact_id}-{gav.version}"
    if gav.classifier:
        name = f"{name}-{gav.classifier}"
    return f"{name}.{gav.packaging}"


def encode_default_layout(gav: Gav) -> str:
    return SEPARATOR.join(
        [
            "",
            gav.group_id.replace(".", SEPARATOR),
            gav.artifact_id,
            gav.version,
            artifact_filename(gav),
        ]
    )


def with_classifier(gav: Gav, classifier: str) -> Gav:
    return replace(gav, classifier=classifier)


def gav_coordinates(gav: Gav) -> str:
    fields = [gav.group_id, gav.artifact_id, gav.version]
    if gav.classifier:
        fields.append(gav.classifier)
    fields.append(gav.packaging)
    return ":".join(fields)


def is_considered(filename: str) -> bool:
    return filename.endswith(CONSIDERED_EXTENSIONS)
