from __future__ import annotations


class NexusSyncError(Exception):
    """Base class for failures the command line maps to an exit code."""


class UnexpectedStatusError(NexusSyncError):
    def __init__(self, url: str, status_code: int, expected: tuple[int, ...]) -> None:
        self.url = url
        self.status_code = status_code
        self.expected = expected
        wanted = " or ".join(str(code) for code in expected)
        super().__init__(f"Expected {wanted} but got {status_code} ({url})")


class UploadRejectedError(UnexpectedStatusError):
    pass


class ReportError(NexusSyncError):
    pass
