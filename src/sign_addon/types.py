"""Type definitions for the add-on signing client."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    SERVER_FAILURE = "SERVER_FAILURE"
    VALIDATION_FAILED = "VALIDATION_FAILED"
    ADDON_NOT_AUTO_SIGNED = "ADDON_NOT_AUTO_SIGNED"


class Phase(str, Enum):
    VALIDATING = "validating"
    SIGNING = "signing"


@dataclass(frozen=True)
class UploadRequest:
    package_path: str
    version: str
    guid: str | None = None
    channel: str | None = None


@dataclass(frozen=True)
class FileDescriptor:
    signed: bool
    download_url: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FileDescriptor":
        """Create from an API file object."""
        return cls(
            signed=bool(data.get("signed", False)),
            download_url=str(data.get("download_url") or ""),
        )


@dataclass(frozen=True)
class StatusReport:
    """Snapshot of the server-side processing state of an upload.

    ``automated_signing`` is ``None`` when the API does not report it; older
    API versions omit the field and such add-ons are treated as auto-signable.
    """

    guid: str | None = None
    active: bool = False
    automated_signing: bool | None = None
    files: tuple[FileDescriptor, ...] = ()
    processed: bool = False
    reviewed: bool = False
    valid: bool = False
    validation_url: str | None = None
    raw: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "StatusReport":
        """Create from a decoded status-check response body."""
        automated = data.get("automated_signing")
        return cls(
            guid=data.get("guid"),
            active=bool(data.get("active", False)),
            automated_signing=None if automated is None else bool(automated),
            files=tuple(FileDescriptor.from_dict(f) for f in data.get("files") or []),
            processed=bool(data.get("processed", False)),
            reviewed=bool(data.get("reviewed", False)),
            valid=bool(data.get("valid", False)),
            validation_url=data.get("validation_url"),
            raw=dict(data),
        )


@dataclass(frozen=True)
class SignOutcome:
    success: bool
    id: str | None = None
    downloaded_file_paths: list[str] | None = None
    error_code: ErrorCode | None = None
    error_details: str | None = None

    @classmethod
    def failed(cls, error_code: ErrorCode, error_details: str | None = None) -> "SignOutcome":
        return cls(success=False, error_code=error_code, error_details=error_details)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "success": self.success,
            "id": self.id,
            "downloaded_file_paths": self.downloaded_file_paths,
            "error_code": self.error_code.value if self.error_code else None,
            "error_details": self.error_details,
        }
