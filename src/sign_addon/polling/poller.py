"""Status polling for uploaded add-ons.

An upload goes through two phases on the server. While it is *validating*
the status report has ``processed == False``; once processed it is either
invalid (terminal) or valid, at which point the version is created and
*signing* starts. Each phase polls the same status URL on a fixed interval
and has its own abort timer.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any

from ..errors import BadResponseError, SigningTimeoutError
from ..progress import NullProgress, ProgressIndicator
from ..types import ErrorCode, Phase, SignOutcome, StatusReport
from .timers import LoopTimers

logger = logging.getLogger(__name__)


class Decision(str, Enum):
    REMAIN = "remain"
    ADVANCE = "advance"
    SUCCESS = "success"
    INVALID = "invalid"
    NEEDS_REVIEW = "needs_review"


def classify(report: StatusReport, phase: Phase) -> Decision:
    """Decide what a status report means for the given phase."""
    if phase is Phase.VALIDATING:
        if not report.processed:
            return Decision.REMAIN
        if not report.valid:
            return Decision.INVALID
        return Decision.ADVANCE

    if report.processed and not report.valid:
        return Decision.INVALID
    # None means the API did not report it; such add-ons can be auto-signed.
    if report.valid and report.automated_signing is False:
        return Decision.NEEDS_REVIEW
    if report.active and report.reviewed and len(report.files) > 0:
        return Decision.SUCCESS
    return Decision.REMAIN


@dataclass
class PollingSession:
    status_url: str
    phase: Phase = Phase.VALIDATING
    last_status: StatusReport | None = None
    poll_timer: Any = None
    abort_timer: Any = None
    poll_task: asyncio.Task | None = None
    result: asyncio.Future | None = None
    settled: bool = False


class SigningPoller:
    def __init__(
        self,
        gateway: Any,
        downloader: Any,
        *,
        interval: float = 1.0,
        timeout: float = 15 * 60.0,
        timers: Any | None = None,
        progress: ProgressIndicator | None = None,
    ) -> None:
        self.gateway = gateway
        self.downloader = downloader
        self.interval = interval
        self.timeout = timeout
        self.timers = timers if timers is not None else LoopTimers()
        self.progress = progress if progress is not None else NullProgress()

    async def wait(self, status_url: str) -> SignOutcome:
        """Poll ``status_url`` until the upload is signed, rejected or times out.

        Returns a failed outcome for invalid add-ons and add-ons held for manual
        review. Raises SigningTimeoutError when a phase outlives its abort
        timer; HTTP errors propagate unchanged.
        """
        session = PollingSession(status_url=status_url)
        self.progress.animate()
        try:
            decision = await self._run_phase(session, Phase.VALIDATING)
            if decision is Decision.ADVANCE:
                decision = await self._run_phase(session, Phase.SIGNING)
        finally:
            self._teardown(session)
            self.progress.finish()

        report = session.last_status
        logger.info(f"Validation results: {report.validation_url}")

        if decision is Decision.INVALID:
            logger.info("Your add-on failed validation and could not be signed")
            return SignOutcome.failed(ErrorCode.VALIDATION_FAILED, report.validation_url)

        if decision is Decision.NEEDS_REVIEW:
            logger.info(
                "Your add-on has been submitted for review. It passed validation but "
                "could not be automatically signed because this is a listed add-on."
            )
            return SignOutcome.failed(ErrorCode.ADDON_NOT_AUTO_SIGNED)

        result = await self.downloader.fetch_all(list(report.files))
        return replace(result, id=report.guid)

    async def _run_phase(self, session: PollingSession, phase: Phase) -> Decision:
        session.phase = phase
        session.settled = False
        session.result = asyncio.get_running_loop().create_future()
        session.abort_timer = self.timers.call_later(self.timeout, lambda: self._abort(session))
        self._start_check(session)
        try:
            return await session.result
        finally:
            self._teardown(session)

    def _start_check(self, session: PollingSession) -> None:
        session.poll_timer = None
        if session.settled:
            return
        session.poll_task = asyncio.get_running_loop().create_task(self._check(session))

    async def _check(self, session: PollingSession) -> None:
        try:
            response, body = await self.gateway.get(session.status_url)
            if session.settled:
                return
            if not isinstance(body, dict):
                raise BadResponseError(
                    str(getattr(response, "url", session.status_url)),
                    getattr(response, "status_code", 0),
                    body,
                )

            report = StatusReport.from_dict(body)
            session.last_status = report
            decision = classify(report, session.phase)
            if decision is Decision.REMAIN:
                session.poll_timer = self.timers.call_later(
                    self.interval, lambda: self._start_check(session)
                )
            else:
                self._settle(session, decision=decision)
        except Exception as e:
            self._settle(session, error=e)

    def _abort(self, session: PollingSession) -> None:
        if session.settled:
            return
        if session.poll_timer is not None:
            self.timers.cancel(session.poll_timer)
            session.poll_timer = None
        self._settle(session, error=SigningTimeoutError(session.phase, session.last_status))

    def _settle(
        self,
        session: PollingSession,
        decision: Decision | None = None,
        error: BaseException | None = None,
    ) -> None:
        if session.settled:
            return
        session.settled = True
        future = session.result
        if future is None or future.done():
            return
        if error is not None:
            future.set_exception(error)
        else:
            future.set_result(decision)

    def _teardown(self, session: PollingSession) -> None:
        session.settled = True
        if session.poll_timer is not None:
            self.timers.cancel(session.poll_timer)
            session.poll_timer = None
        if session.abort_timer is not None:
            self.timers.cancel(session.abort_timer)
            session.abort_timer = None

        task = session.poll_task
        session.poll_task = None
        if task is not None and not task.done() and task is not asyncio.current_task():
            task.cancel()
