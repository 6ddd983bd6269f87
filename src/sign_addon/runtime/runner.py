from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from collections.abc import Callable
from typing import Any

from ..client.signing import SigningClient
from ..config import DEFAULT_API_URL_PREFIX, Settings
from ..types import SignOutcome, UploadRequest

logger = logging.getLogger(__name__)


def _require(**values: Any) -> None:
    for name, value in values.items():
        if not value:
            raise ValueError(f"required argument was empty: {name}")


async def sign_addon(
    *,
    xpi_path: str,
    id: str | None,
    version: str,
    api_key: str,
    api_secret: str,
    api_url_prefix: str = DEFAULT_API_URL_PREFIX,
    verbose: bool = False,
    channel: str | None = None,
    timeout: float | None = None,
    download_dir: str | None = None,
    api_proxy: str | None = None,
    api_request_config: dict[str, Any] | None = None,
    client_class: Callable[..., SigningClient] = SigningClient,
) -> SignOutcome:
    """Sign an add-on package and download the signed files.

    ``id`` may be None to create a new add-on; the server then assigns one.
    """
    _require(xpi_path=xpi_path, version=version, api_key=api_key, api_secret=api_secret)

    if not os.path.exists(xpi_path):
        raise FileNotFoundError(f"error with {xpi_path}: no such file")
    if not os.path.isfile(xpi_path):
        raise ValueError(f"not a file: {xpi_path}")

    settings = Settings(
        api_key=api_key,
        api_secret=api_secret,
        api_url_prefix=api_url_prefix,
        debug_logging=verbose,
        proxy_server=api_proxy,
        request_config=dict(api_request_config or {}),
    )
    if timeout is not None:
        settings.status_check_timeout = timeout
    if download_dir is not None:
        settings.download_dir = download_dir

    client = client_class(settings)
    try:
        return await client.sign(
            UploadRequest(package_path=xpi_path, guid=id, version=version, channel=channel)
        )
    finally:
        await client.aclose()


def sign_addon_and_exit(
    options: dict[str, Any],
    *,
    exit: Callable[[int], Any] = sys.exit,
    throw_error: bool = False,
) -> None:
    """Run sign_addon() and exit with 0 on success, 1 otherwise."""
    try:
        result = asyncio.run(sign_addon(**options))
    except Exception:
        logger.error("FAIL")
        if throw_error:
            raise
        logger.exception("Signing error")
        exit(1)
        return

    if not result.success and result.error_code:
        logger.error(f"Error code: {result.error_code.value}")
        if result.error_details:
            logger.error(f"Details: {result.error_details}")
    logger.info("SUCCESS" if result.success else "FAIL")
    exit(0 if result.success else 1)


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="sign-addon", description="Sign a Firefox add-on using Mozilla's web service"
    )
    parser.add_argument("xpi_path", help="path to the add-on package")
    parser.add_argument("--id", default=None, help="add-on ID, omit for a new add-on")
    parser.add_argument("--version", required=True, help="add-on version string")
    parser.add_argument("--api-key", default=None)
    parser.add_argument("--api-secret", default=None)
    parser.add_argument("--api-url-prefix", default=None)
    parser.add_argument("--channel", choices=["listed", "unlisted"], default=None)
    parser.add_argument("--timeout", type=float, default=None, help="seconds per polling phase")
    parser.add_argument("--download-dir", default=None)
    parser.add_argument("--api-proxy", default=None)
    parser.add_argument("--verbose", action="store_true")
    return parser.parse_args(argv)


def run(argv: list[str] | None = None) -> None:
    """Command-line entry point.

    Credentials not given on the command line are read from SIGN_ADDON_*
    environment variables.
    """
    args = _parse_args(argv)
    env = Settings.from_env()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose or env.debug_logging else logging.INFO,
        format="%(message)s",
    )

    sign_addon_and_exit(
        {
            "xpi_path": args.xpi_path,
            "id": args.id,
            "version": args.version,
            "api_key": args.api_key or env.api_key,
            "api_secret": args.api_secret or env.api_secret,
            "api_url_prefix": args.api_url_prefix or env.api_url_prefix,
            "verbose": args.verbose or env.debug_logging,
            "channel": args.channel,
            "timeout": args.timeout if args.timeout is not None else env.status_check_timeout,
            "download_dir": args.download_dir or env.download_dir,
            "api_proxy": args.api_proxy or env.proxy_server,
        }
    )
