# =============================================================================
# ui/annotator.py — Eye markers for the live feed.
# Purely cosmetic: draws on the frame, never feeds back into detection.
# =============================================================================

from typing import Iterable

import cv2
import numpy as np

from config import COLOR_EYE_OPEN, COLOR_EYE_CLOSED, MARKER_THICKNESS
from eye_monitor.data_structures import ClosureSample


class FrameAnnotator:

    def __init__(
        self,
        open_color=COLOR_EYE_OPEN,
        closed_color=COLOR_EYE_CLOSED,
        thickness: int = MARKER_THICKNESS,
    ):
        self.open_color = open_color
        self.closed_color = closed_color
        self.thickness = thickness

    def annotate(self, frame: np.ndarray, samples: Iterable[ClosureSample]) -> np.ndarray:
        """Circle each detected eye in place: green if open, red if closed."""
        for s in samples:
            color = self.open_color if s.is_open else self.closed_color
            radius = max(1, s.region.width // 2)
            cv2.circle(frame, s.region.center, radius, color, self.thickness)
        return frame
