"""
Advisory Board - Transient display state for warnings and violations

Everything here is display-only: expiring an advisory never removes
a violation from the session log.
"""

import time
import logging
from dataclasses import dataclass
from typing import Callable, Optional

from ..types import ViolationEvent

logger = logging.getLogger(__name__)


@dataclass
class Advisory:
    message: str
    expires_at: float


class AdvisoryBoard:
    """
    Holds the currently displayed warning, violation and suspension
    notice, each auto-expiring after a fixed window.
    """

    DISPLAY_SECONDS = 5.0

    SUSPENSION_MESSAGE = "EXAM SUSPENDED: Multiple violations detected. Contact your proctor."

    def __init__(
        self,
        display_seconds: float = DISPLAY_SECONDS,
        clock: Optional[Callable[[], float]] = None
    ):
        self.display_seconds = display_seconds
        self._clock = clock or time.monotonic

        self._warning: Optional[Advisory] = None
        self._violation: Optional[ViolationEvent] = None
        self._violation_expires_at = 0.0
        self.suspended = False

    def _expiry(self) -> float:
        return self._clock() + self.display_seconds

    def show_warning(self, message: str):
        self._warning = Advisory(message=message, expires_at=self._expiry())

    def clear_warning(self):
        self._warning = None

    def show_violation(self, event: ViolationEvent):
        self._violation = event
        self._violation_expires_at = self._expiry()

    def signal_suspension(self):
        """Raise the suspension notice. The exam itself is ended by the caller."""
        self.suspended = True
        logger.warning("Suspension advisory raised")

    @property
    def suspension_notice(self) -> Optional[str]:
        return self.SUSPENSION_MESSAGE if self.suspended else None

    @property
    def current_warning(self) -> Optional[Advisory]:
        if self._warning is not None and self._clock() >= self._warning.expires_at:
            self._warning = None
        return self._warning

    @property
    def current_violation(self) -> Optional[ViolationEvent]:
        if self._violation is not None and self._clock() >= self._violation_expires_at:
            self._violation = None
        return self._violation
