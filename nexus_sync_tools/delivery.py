from __future__ import annotations

import logging
from http import HTTPStatus
from typing import BinaryIO

import requests

from .errors import UnexpectedStatusError, UploadRejectedError
from .layout import QA_REPORT_CLASSIFIER, encode_default_layout, with_classifier
from .models import DeliverySettings, Report
from .report import read_report_archive

LOGGER = logging.getLogger(__name__)


def deliver_artifact(
    session: requests.Session,
    url: str,
    body: BinaryIO,
    *,
    dry_run: bool = False,
    timeout: float | None = None,
) -> None:
    if dry_run:
        LOGGER.info("Dry run, skipping upload to %s", url)
        return
    with session.put(url, data=body, timeout=timeout) as response:
        status = response.status_code
        LOGGER.debug("Received response %s %s", status, response.reason)
    if status != HTTPStatus.CREATED:
        raise UploadRejectedError(url, status, (int(HTTPStatus.CREATED),))


def fetch_report_archive(session: requests.Session, url: str, *, timeout: float | None = None) -> bytes:
    LOGGER.info("Fetching QA report from %s", url)
    with session.get(url, timeout=timeout) as response:
        if response.status_code != HTTPStatus.OK:
            raise UnexpectedStatusError(url, response.status_code, (int(HTTPStatus.OK),))
        return response.content


def run_delivery(session: requests.Session, settings: DeliverySettings, body: BinaryIO) -> Report:
    base_url = settings.url.rstrip("/")
    upload_url = base_url + encode_default_layout(settings.gav)
    deliver_artifact(
        session,
        upload_url,
        body,
        dry_run=settings.dry_run,
        timeout=settings.timeout_sec,
    )

    report_gav = with_classifier(settings.gav, QA_REPORT_CLASSIFIER)
    report_url = base_url + encode_default_layout(report_gav)
    payload = fetch_report_archive(session, report_url, timeout=settings.timeout_sec)
    report = read_report_archive(payload)
    LOGGER.debug("Raw report: %s", report)
    return report
