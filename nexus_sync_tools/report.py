from __future__ import annotations

import io
import logging
import xml.etree.ElementTree as ET
import zipfile
from typing import TextIO

from .errors import ReportError
from .models import Notification, Report

LOGGER = logging.getLogger(__name__)

DELIVERY_TAG = "delivery"
GATE_SEVERITIES = frozenset({"ERROR", "FATAL"})


def _text(elem: ET.Element | None, tag: str) -> str:
    if elem is None:
        return ""
    # Text is kept as written; the gate compares severities exactly.
    return elem.findtext(tag) or ""


def _parse_notification(elem: ET.Element) -> Notification:
    raw_id = elem.attrib.get("id", "0").strip() or "0"
    try:
        notification_id = int(raw_id)
    except ValueError as exc:
        raise ReportError(f"Notification id is not an integer: {raw_id!r}") from exc
    return Notification(
        id=notification_id,
        severity=_text(elem, "severity"),
        message=_text(elem, "message"),
    )


def parse_delivery(payload: bytes) -> Report:
    try:
        root = ET.fromstring(payload)
    except ET.ParseError as exc:
        raise ReportError(f"Malformed delivery report: {exc}") from exc
    if root.tag != DELIVERY_TAG:
        raise ReportError(f"Expected <{DELIVERY_TAG}> root element but got <{root.tag}>")

    report = root.find("report")
    if report is None:
        return Report()
    return Report(
        return_value=_text(report, "returnValue"),
        highest_severity=_text(report, "highestSeverity"),
        notifications=tuple(_parse_notification(elem) for elem in report.findall("notification")),
    )


def read_report_archive(payload: bytes) -> Report:
    """Parse every entry of a zipped QA report.

    Reports are small, so the archive is handled in memory. Each entry
    replaces the previous result; the archive normally holds one document.
    """
    report = Report()
    try:
        with zipfile.ZipFile(io.BytesIO(payload)) as archive:
            for info in archive.infolist():
                if info.is_dir():
                    continue
                LOGGER.info("Contents of %s", info.filename)
                with archive.open(info) as handle:
                    content = handle.read()
                LOGGER.debug("About to parse %r", content)
                report = parse_delivery(content)
    except zipfile.BadZipFile as exc:
        raise ReportError(f"Unreadable report archive: {exc}") from exc
    return report


def format_notification(notification: Notification) -> str:
    return f"{notification.id:02d} {notification.severity:<8} {notification.message}"


def write_notifications(report: Report, out: TextIO) -> None:
    for notification in report.notifications:
        out.write(format_notification(notification) + "\n")


def quality_gate_failure(report: Report) -> Notification | None:
    for notification in report.notifications:
        if notification.severity in GATE_SEVERITIES:
            return notification
    return None
