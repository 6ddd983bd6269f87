# Re-export from local modules
from .client import AmoHttpClient, SigningClient, issue_token
from .config import Settings
from .download import FileDownloader
from .errors import (
    BadResponseError,
    DownloadError,
    NoSignedFilesError,
    SignAddonError,
    SigningTimeoutError,
)
from .polling import SigningPoller
from .runtime import run, sign_addon, sign_addon_and_exit
from .types import ErrorCode, FileDescriptor, SignOutcome, StatusReport, UploadRequest

__all__ = [
    "AmoHttpClient",
    "BadResponseError",
    "DownloadError",
    "ErrorCode",
    "FileDescriptor",
    "FileDownloader",
    "NoSignedFilesError",
    "Settings",
    "SignAddonError",
    "SignOutcome",
    "SigningClient",
    "SigningPoller",
    "SigningTimeoutError",
    "StatusReport",
    "UploadRequest",
    "issue_token",
    "run",
    "sign_addon",
    "sign_addon_and_exit",
]
