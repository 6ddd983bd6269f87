"""Exceptions raised by the signing client."""

from __future__ import annotations

from typing import Any

from .formatting import format_response
from .types import Phase, StatusReport


class SignAddonError(Exception):
    pass


class BadResponseError(SignAddonError):
    """The API answered with a status code the caller cannot act on."""

    def __init__(
        self,
        url: str,
        status_code: int,
        body: Any = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        self.url = url
        self.status_code = status_code
        self.body = body
        self.headers = dict(headers or {})
        super().__init__(
            f"Received bad response from {url}; status: {status_code}; "
            f"response: {format_response(body if body is not None else '')}"
        )


class SigningTimeoutError(SignAddonError):
    def __init__(self, phase: Phase, last_status: StatusReport | None) -> None:
        self.phase = phase
        self.last_status = last_status
        shown = last_status.raw if last_status is not None else "[null]"
        super().__init__(
            f"Signing took too long to complete; last status: {format_response(shown)}"
        )


class NoSignedFilesError(SignAddonError):
    def __init__(self) -> None:
        super().__init__(
            "The XPI was processed but no signed files were found. Check your "
            "manifest and make sure it targets Firefox as an application."
        )


class DownloadError(SignAddonError):
    def __init__(self, url: str, status_code: int) -> None:
        self.url = url
        self.status_code = status_code
        super().__init__(f"Got a {status_code} response when downloading {url}")
