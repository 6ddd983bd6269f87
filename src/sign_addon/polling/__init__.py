from .poller import Decision, PollingSession, SigningPoller, classify
from .timers import LoopTimers

__all__ = ["Decision", "LoopTimers", "PollingSession", "SigningPoller", "classify"]
