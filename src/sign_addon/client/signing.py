from __future__ import annotations

import logging
import os
from typing import Any
from urllib.parse import quote

import httpx

from ..config import Settings
from ..download import FileDownloader
from ..errors import BadResponseError
from ..polling.poller import SigningPoller
from ..progress import ProgressIndicator, PseudoProgress
from ..types import ErrorCode, SignOutcome, UploadRequest
from .http import AmoHttpClient

logger = logging.getLogger(__name__)

ACCEPTABLE_STATUSES = (200, 201, 202)


class SigningClient:
    """Uploads an add-on for signing and downloads the signed files.

    Usage:
        async with SigningClient(Settings(api_key=..., api_secret=...)) as client:
            outcome = await client.sign(UploadRequest("addon.xpi", version="1.0"))
    """

    def __init__(
        self,
        settings: Settings,
        *,
        gateway: AmoHttpClient | None = None,
        http_client: httpx.AsyncClient | None = None,
        downloader: FileDownloader | None = None,
        poller: SigningPoller | None = None,
        progress: ProgressIndicator | None = None,
        timers: Any | None = None,
    ) -> None:
        self.settings = settings
        self.gateway = gateway or AmoHttpClient(settings, client=http_client)
        self.downloader = downloader or FileDownloader(self.gateway, settings.download_dir)
        self.poller = poller or SigningPoller(
            self.gateway,
            self.downloader,
            interval=settings.status_check_interval,
            timeout=settings.status_check_timeout,
            timers=timers,
            progress=progress or PseudoProgress(preamble="Validating add-on"),
        )

    async def aclose(self) -> None:
        await self.gateway.aclose()

    async def __aenter__(self) -> "SigningClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def sign(self, upload: UploadRequest) -> SignOutcome:
        """Submit a package and wait for it to be signed."""
        data: dict[str, str] = {}
        addon_url = "/addons/"
        if upload.guid:
            addon_url += f"{quote(upload.guid, safe='')}/versions/{quote(upload.version, safe='')}/"
            method = self.gateway.put
            if upload.channel:
                data["channel"] = upload.channel
        else:
            self.gateway.debug("Signing add-on without an ID")
            method = self.gateway.post
            data["version"] = upload.version
            if upload.channel:
                logger.warning(
                    "Specifying a channel for a new add-on is unsupported. "
                    "New add-ons are always in the unlisted channel."
                )

        with open(upload.package_path, "rb") as package:
            files = {"upload": (os.path.basename(upload.package_path), package)}
            response, body = await method(
                addon_url, files=files, data=data, throw_on_bad_response=False
            )

        payload = body if isinstance(body, dict) else {}
        error = payload.get("error")
        if error:
            logger.error(f"Server response: {error} (status: {response.status_code})")
            return SignOutcome.failed(ErrorCode.SERVER_FAILURE, str(error))

        status_url = payload.get("url")
        if response.status_code not in ACCEPTABLE_STATUSES or not status_url:
            raise BadResponseError(
                self.gateway.absolute_url(addon_url),
                response.status_code,
                body,
                dict(response.headers),
            )

        return await self.wait_for_signed_addon(status_url)

    async def wait_for_signed_addon(self, status_url: str) -> SignOutcome:
        return await self.poller.wait(status_url)
