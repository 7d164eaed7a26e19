from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import requests
import yaml
from tqdm import tqdm

from . import __version__
from .config import apply_cli_overrides, delivery_settings, load_config, sync_settings
from .delivery import run_delivery
from .errors import NexusSyncError, UploadRejectedError
from .layout import gav_coordinates
from .models import Artifact
from .nexus import build_session, repository_url, sync_artifacts
from .report import quality_gate_failure, write_notifications
from .scanner import scan_roots
from .utils import open_input, open_output, setup_logging

LOGGER = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_USAGE = 1
EXIT_FATAL = 1
EXIT_UPLOAD_REJECTED = 2
EXIT_QUALITY_GATE = 3

LAYOUT_HINT = (
    "local folder must be a hierarchy in Maven default layout, "
    "e.g. ${HOME}/.m2/repository"
)
PROXY_HINT = "Remember to enable/disable environment variables http_proxy and/or no_proxy"


def _format_artifact(artifact: Artifact) -> str:
    return f"{artifact.status_code} {gav_coordinates(artifact.gav)} {artifact.filename}"


def _print_usage(args: argparse.Namespace, message: str) -> None:
    print(args.usage, file=sys.stderr, end="")
    print(message, file=sys.stderr)


def _create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="nexus-sync")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    sub = parser.add_subparsers(dest="cmd", required=True)

    sync = sub.add_parser("sync", help="Check local Maven trees against a Nexus repository")
    sync.add_argument("roots", nargs="*", type=Path, metavar="ROOT")
    sync.add_argument("--config", type=Path)
    sync.add_argument("--servername", help="Nexus server name or IP")
    sync.add_argument("--port", help="Nexus server port")
    sync.add_argument("--content-path", help="Repository content path on the server")
    sync.add_argument("--username", help="Nexus user")
    sync.add_argument("--password", help="Nexus password")
    sync.add_argument("--repository", help="Repository to sync against")
    sync.add_argument("--upload", action="store_true", default=None, help="Upload non-existing artifacts")
    sync.add_argument("--timeout", type=float, default=None)
    sync.add_argument("--no-progress", action="store_true")
    sync.add_argument("--log-level", default=None)
    sync.set_defaults(usage=sync.format_usage())

    deliver = sub.add_parser("deliver", help="Upload one artifact and evaluate its QA report")
    deliver.add_argument("--config", type=Path)
    deliver.add_argument("--group-id", help="GAV: Group ID")
    deliver.add_argument("--artifact-id", help="GAV: Artifact ID")
    deliver.add_argument("--version", dest="artifact_version", help="GAV: Version")
    deliver.add_argument("--packaging", help="GAV: Packaging")
    deliver.add_argument("--url", help="Vendor delivery store URL")
    deliver.add_argument("--username", help="Basic auth username")
    deliver.add_argument("--password", help="Basic auth password")
    deliver.add_argument("--dry-run", action="store_true", default=None, help="Do not upload anything")
    deliver.add_argument(
        "--insecure-skip-verify",
        action="store_true",
        default=None,
        help="Skip SSL certificate verification",
    )
    deliver.add_argument("--debug", action="store_true", help="Show verbose debug information")
    deliver.add_argument("--in", dest="in_path", type=Path, help="Input file (default: stdin)")
    deliver.add_argument("--out", dest="out_path", type=Path, help="Output file (default: stdout)")
    deliver.add_argument("--timeout", type=float, default=None)
    deliver.set_defaults(usage=deliver.format_usage())

    return parser


def _command_sync(args: argparse.Namespace) -> int:
    if not args.roots:
        _print_usage(args, LAYOUT_HINT)
        return EXIT_USAGE

    cfg = load_config(args.config)
    cfg = apply_cli_overrides(
        cfg,
        {
            "nexus": {
                "servername": args.servername,
                "port": args.port,
                "content_path": args.content_path,
                "username": args.username,
                "password": args.password,
                "repository": args.repository,
                "upload": args.upload,
                "timeout_sec": args.timeout,
            }
        },
    )
    settings = sync_settings(cfg)

    artifacts = scan_roots(args.roots)
    base_url = repository_url(settings)
    LOGGER.info("Checking %s artifacts against %s", len(artifacts), base_url)

    with build_session(settings.username, settings.password) as session:
        results = sync_artifacts(
            session,
            artifacts,
            repository_url=base_url,
            upload=settings.upload,
            timeout=settings.timeout_sec,
        )
        for artifact in tqdm(results, total=len(artifacts), desc="sync", disable=args.no_progress):
            tqdm.write(_format_artifact(artifact))
    return EXIT_OK


def _command_deliver(args: argparse.Namespace) -> int:
    cfg = load_config(args.config)
    cfg = apply_cli_overrides(
        cfg,
        {
            "delivery": {
                "group_id": args.group_id,
                "artifact_id": args.artifact_id,
                "version": args.artifact_version,
                "packaging": args.packaging,
                "url": args.url,
                "username": args.username,
                "password": args.password,
                "dry_run": args.dry_run,
                "insecure_skip_verify": args.insecure_skip_verify,
                "timeout_sec": args.timeout,
            }
        },
    )
    try:
        settings = delivery_settings(cfg)
    except ValueError as exc:
        _print_usage(args, str(exc))
        return EXIT_USAGE

    session = build_session(
        settings.username,
        settings.password,
        verify=not settings.insecure_skip_verify,
    )
    try:
        with session, open_input(args.in_path) as body:
            report = run_delivery(session, settings, body)
    except UploadRejectedError as exc:
        print(f"Upload failed: {exc}", file=sys.stderr)
        print(PROXY_HINT, file=sys.stderr)
        return EXIT_UPLOAD_REJECTED

    with open_output(args.out_path) as out:
        write_notifications(report, out)

    failure = quality_gate_failure(report)
    if failure is not None:
        LOGGER.info("Quality gate failed on notification %s (%s)", failure.id, failure.severity)
        return EXIT_QUALITY_GATE
    return EXIT_OK


def _log_level(args: argparse.Namespace) -> str:
    if args.cmd == "deliver":
        return "DEBUG" if args.debug else "WARNING"
    if args.log_level:
        return args.log_level
    cfg = load_config(getattr(args, "config", None))
    return cfg.get("runtime", {}).get("log_level", "INFO")


def main(argv: list[str] | None = None) -> int:
    parser = _create_parser()
    args = parser.parse_args(argv)

    try:
        setup_logging(_log_level(args))
        if args.cmd == "sync":
            return _command_sync(args)
        if args.cmd == "deliver":
            return _command_deliver(args)
    except UploadRejectedError as exc:
        print(f"Upload failed: {exc}", file=sys.stderr)
        return EXIT_UPLOAD_REJECTED
    except (NexusSyncError, requests.RequestException, OSError) as exc:
        print(f"Fatal: {exc}", file=sys.stderr)
        return EXIT_FATAL
    except (ValueError, yaml.YAMLError) as exc:
        _print_usage(args, f"Invalid configuration: {exc}")
        return EXIT_USAGE

    parser.error(f"Unhandled command: {args.cmd}")
    return 2


def _single_command_main(cmd: str) -> int:
    return main([cmd, *sys.argv[1:]])


def main_sync() -> int:
    return _single_command_main("sync")


def main_deliver() -> int:
    return _single_command_main("deliver")


if __name__ == "__main__":
    raise SystemExit(main())
