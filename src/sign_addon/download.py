from __future__ import annotations

import asyncio
import logging
import os
import sys
from typing import Any, TextIO

from .errors import DownloadError, NoSignedFilesError
from .formatting import get_url_basename
from .types import FileDescriptor, SignOutcome

logger = logging.getLogger(__name__)


class DownloadProgress:
    """Byte counters shared by the concurrent downloads of one batch."""

    def __init__(self, stdout: TextIO) -> None:
        self.stdout = stdout
        self.expected: int | None = None
        self.received = 0

    def expect(self, content_length: str | None) -> None:
        if not content_length:
            return
        try:
            length = int(content_length)
        except ValueError:
            return
        self.expected = length if self.expected is None else self.expected + length

    def advance(self, size: int) -> None:
        self.received += size
        self.show()

    def show(self) -> None:
        progress = "..."
        if self.expected:
            progress = f"{round(self.received / self.expected * 100):>3}% "
        self.stdout.write(f"\rDownloading signed files: {progress}")
        self.stdout.flush()

    def end_line(self) -> None:
        self.stdout.write("\n")
        self.stdout.flush()


class FileDownloader:
    def __init__(
        self,
        gateway: Any,
        download_dir: str = ".",
        stdout: TextIO | None = None,
        chunk_size: int = 64 * 1024,
    ) -> None:
        self.gateway = gateway
        self.download_dir = download_dir
        self.stdout = stdout if stdout is not None else sys.stdout
        self.chunk_size = chunk_size

    async def fetch_all(self, files: list[FileDescriptor]) -> SignOutcome:
        """Download every signed file concurrently into the download directory.

        Unsigned files are skipped. Fails with NoSignedFilesError when nothing
        is signed; a failed download fails the whole batch.
        """
        signed = []
        for file in files:
            if file.signed:
                signed.append(file)
            else:
                logger.debug(f"This file was not signed: {file}")

        if not signed:
            raise NoSignedFilesError()
        if len(signed) < len(files):
            logger.info("Some files were not signed. Re-run with --verbose for details.")

        progress = DownloadProgress(self.stdout)
        progress.show()
        downloaded = await asyncio.gather(*(self._download(f.download_url, progress) for f in signed))

        logger.info("Downloaded:")
        for path in downloaded:
            logger.info(f"    {path}")
        return SignOutcome(success=True, downloaded_file_paths=list(downloaded))

    async def _download(self, url: str, progress: DownloadProgress) -> str:
        file_name = os.path.join(self.download_dir, get_url_basename(url))

        async with self.gateway.stream("GET", url, follow_redirects=True) as response:
            if not 200 <= response.status_code < 300:
                raise DownloadError(url, response.status_code)
            progress.expect(response.headers.get("content-length"))

            with open(file_name, "wb") as out:
                async for chunk in response.aiter_bytes(self.chunk_size):
                    out.write(chunk)
                    progress.advance(len(chunk))

        progress.end_line()
        return file_name
