# =============================================================================
# ui/display.py
#
# Display and status sinks.
#
#   OpenCVDisplay  : cv2.imshow window with the status line drawn on top.
#   LogStatusSink  : headless status channel, writes status changes to the log.
#
# set_text() may be called from the alarm session thread; it only swaps a
# string, and the window reads the latest value on the next show().
# =============================================================================

from typing import Optional

import cv2
import numpy as np

from config import (
    WINDOW_TITLE, STATUS_FONT_SCALE, COLOR_STATUS_TEXT, COLOR_STATUS_BG,
)
from core.logger import get_logger

log = get_logger(__name__)


class LogStatusSink:
    """Status channel without a window."""

    def __init__(self):
        self._text = ""

    def set_text(self, text: str) -> None:
        if text != self._text:
            log.info(f"Status: {text}")
        self._text = text

    @property
    def text(self) -> str:
        return self._text


class OpenCVDisplay(LogStatusSink):
    """
    Usage:
        display = OpenCVDisplay()
        display.set_text("Eyes are detected!")
        display.show(frame)
        if display.poll_key() == ord("q"): ...
        display.close()
    """

    def __init__(self, title: str = WINDOW_TITLE):
        super().__init__()
        self.title = title
        self._opened = False

    def show(self, frame: np.ndarray) -> None:
        if self.text:
            self._draw_status(frame, self.text)
        cv2.imshow(self.title, frame)
        self._opened = True

    def poll_key(self) -> Optional[int]:
        """Pump the window event loop; returns the pressed key or None."""
        key = cv2.waitKey(1) & 0xFF
        return None if key == 0xFF else key

    def close(self) -> None:
        if self._opened:
            cv2.destroyWindow(self.title)
            self._opened = False

    @staticmethod
    def _draw_status(frame: np.ndarray, text: str) -> None:
        (tw, th), baseline = cv2.getTextSize(
            text, cv2.FONT_HERSHEY_SIMPLEX, STATUS_FONT_SCALE, 2
        )
        cv2.rectangle(frame, (0, 0), (tw + 20, th + baseline + 16), COLOR_STATUS_BG, -1)
        cv2.putText(frame, text, (10, th + 8), cv2.FONT_HERSHEY_SIMPLEX,
                    STATUS_FONT_SCALE, COLOR_STATUS_TEXT, 2, cv2.LINE_AA)
