"""
Frame Monitor - Periodic capture loop driving detection cycles

One cycle per interval while the session is active and the capture
source is ready. Cycles are synchronous, so they never overlap. A cycle
that raises is logged and skipped; the loop keeps ticking.
"""

import asyncio
import logging
import numpy as np
from typing import Any, Dict, Optional, Protocol

import cv2

from ..config import settings
from .session import ProctorSession
from .types import ExternalSignals

logger = logging.getLogger(__name__)


class FrameSource(Protocol):
    def is_ready(self) -> bool: ...

    def read(self) -> Optional[np.ndarray]: ...


class OpenCVFrameSource:
    """
    Webcam frames through cv2.VideoCapture, converted to RGB.
    """

    def __init__(self, device: int = 0, width: int = 640, height: int = 480):
        self.device = device
        self._capture = cv2.VideoCapture(device)
        self._capture.set(cv2.CAP_PROP_FRAME_WIDTH, width)
        self._capture.set(cv2.CAP_PROP_FRAME_HEIGHT, height)

        if not self._capture.isOpened():
            logger.warning(f"Camera {device} could not be opened")

    def is_ready(self) -> bool:
        return self._capture.isOpened()

    def read(self) -> Optional[np.ndarray]:
        ok, frame = self._capture.read()
        if not ok or frame is None:
            return None
        return cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)

    def close(self):
        self._capture.release()


class FrameMonitor:
    """
    Runs ProctorSession.process_frame on a fixed cadence.

    The source may also expose signals() returning ExternalSignals to
    attach to each cycle.
    """

    def __init__(
        self,
        session: ProctorSession,
        source: FrameSource,
        interval: Optional[float] = None
    ):
        self.session = session
        self.source = source
        self.interval = interval if interval is not None else settings.DETECTION_INTERVAL_SECONDS

        self._task: Optional[asyncio.Task] = None
        self.cycles = 0

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def _signals(self) -> Optional[ExternalSignals]:
        getter = getattr(self.source, "signals", None)
        return getter() if callable(getter) else None

    def run_once(self) -> Optional[Dict[str, Any]]:
        """
        Run exactly one cycle.

        Returns:
            The session's cycle result, or None when the cycle was skipped
        """
        if not self.session.is_active:
            return None

        try:
            if not self.source.is_ready():
                return None
            frame = self.source.read()
        except Exception as e:
            logger.warning(f"Frame capture error: {e}")
            return None

        if frame is None:
            return None

        result = self.session.process_frame(frame, self._signals())
        self.cycles += 1
        return result

    async def _run(self):
        while self.session.is_active:
            try:
                self.run_once()
            except Exception as e:
                logger.warning(f"Detection cycle failed for session {self.session.id}: {e}")
            await asyncio.sleep(self.interval)

        logger.info(f"Frame monitor for session {self.session.id} finished")

    def start(self) -> asyncio.Task:
        """Start the loop on the running event loop"""
        if self.is_running:
            return self._task

        self._task = asyncio.get_running_loop().create_task(self._run())
        logger.info(f"Frame monitor started: session={self.session.id} interval={self.interval}s")
        return self._task

    async def stop(self):
        """Cancel the loop; a cycle in progress always completes first"""
        if self._task is None:
            return

        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        except Exception as e:
            logger.error(f"Frame monitor for session {self.session.id} ended with error: {e}")
        self._task = None
        logger.info(f"Frame monitor stopped: session={self.session.id}")
