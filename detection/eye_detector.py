# =============================================================================
# detection/eye_detector.py
#
# Haar-cascade eye detector.
#
# Runs cv2.CascadeClassifier.detectMultiScale over a grayscale frame and
# returns the candidate eye boxes as EyeRegion values.  The cascade is
# loaded once at construction; a missing or empty cascade aborts startup
# because no detection can happen without it.
# =============================================================================

import os
from typing import List, Tuple

import cv2
import numpy as np

from config import (
    EYE_CASCADE_PATH, EYE_SCALE_FACTOR, EYE_MIN_NEIGHBORS, EYE_MIN_SIZE,
)
from eye_monitor.data_structures import EyeRegion
from core.logger import get_logger

log = get_logger(__name__)


class DetectorLoadError(RuntimeError):
    """The cascade model file is missing or could not be loaded."""


class EyeRegionDetector:
    """
    Usage:
        detector = EyeRegionDetector()
        regions = detector.detect(gray)
    """

    def __init__(
        self,
        cascade_path: str = EYE_CASCADE_PATH,
        scale_factor: float = EYE_SCALE_FACTOR,
        min_neighbors: int = EYE_MIN_NEIGHBORS,
        min_size: Tuple[int, int] = EYE_MIN_SIZE,
    ):
        if not os.path.isfile(cascade_path):
            raise DetectorLoadError(f"Eye cascade not found: {cascade_path}")

        self._cascade = cv2.CascadeClassifier(cascade_path)
        if self._cascade.empty():
            raise DetectorLoadError(f"Eye cascade failed to load: {cascade_path}")

        self.cascade_path  = cascade_path
        self.scale_factor  = scale_factor
        self.min_neighbors = min_neighbors
        self.min_size      = tuple(min_size)
        log.info(f"Eye cascade loaded: {os.path.basename(cascade_path)} "
                 f"(scale={scale_factor}, neighbors={min_neighbors}, "
                 f"min={self.min_size[0]}x{self.min_size[1]})")

    def detect(self, gray: np.ndarray) -> List[EyeRegion]:
        """
        Detect eye regions in a grayscale frame.

        Args:
            gray: 2D uint8 grayscale frame.

        Returns:
            List of EyeRegion in detector order (may be empty).
        """
        boxes = self._cascade.detectMultiScale(
            gray,
            scaleFactor=self.scale_factor,
            minNeighbors=self.min_neighbors,
            minSize=self.min_size,
        )
        return [EyeRegion(int(x), int(y), int(w), int(h)) for (x, y, w, h) in boxes]
