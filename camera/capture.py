"""
camera/capture.py — Camera Capture Module
Handles webcam frame acquisition and grayscale conversion for the monitor.
"""

import cv2
import numpy as np

import config
from core.logger import get_logger

log = get_logger(__name__)


class CameraUnavailableError(RuntimeError):
    """The capture device could not be opened."""


def to_grayscale(frame: np.ndarray) -> np.ndarray:
    """
    Convert a captured frame to single-channel grayscale.

    Args:
        frame: BGR (3-channel), BGRA (4-channel) or already-gray 2D frame.

    Returns:
        2D uint8 grayscale array.

    Raises:
        ValueError: if the frame is empty or has an unsupported shape.
    """
    if frame is None or frame.size == 0:
        raise ValueError("empty frame")
    if frame.ndim == 2:
        return frame
    if frame.ndim == 3 and frame.shape[2] == 1:
        return frame[:, :, 0]
    if frame.ndim == 3 and frame.shape[2] == 3:
        return cv2.cvtColor(frame, cv2.COLOR_BGR2GRAY)
    if frame.ndim == 3 and frame.shape[2] == 4:
        return cv2.cvtColor(frame, cv2.COLOR_BGRA2GRAY)
    raise ValueError(f"unsupported frame shape {frame.shape}")


class CameraCapture:
    """
    Wraps OpenCV VideoCapture as the monitor's frame source.
    acquire() returns one frame per call, or None when no frame is available.
    """

    def __init__(
        self,
        camera_index: int = config.CAMERA_INDEX,
        width: int = config.CAMERA_WIDTH,
        height: int = config.CAMERA_HEIGHT,
        fps: int = config.CAMERA_FPS,
    ):
        """
        Args:
            camera_index: OS camera device index (0 = default webcam).
            width:  Capture width in pixels.
            height: Capture height in pixels.
            fps:    Target capture frame rate.
        """
        self.camera_index = camera_index
        self.width = width
        self.height = height
        self.fps = fps
        self._cap: cv2.VideoCapture | None = None
        self._missed = 0

    # ──────────────────────────────────────────────────────────────────────────
    # Lifecycle
    # ──────────────────────────────────────────────────────────────────────────

    def open(self) -> None:
        """
        Open the camera device.

        Raises:
            CameraUnavailableError: if the device cannot be opened.
        """
        self._cap = cv2.VideoCapture(self.camera_index)
        if not self._cap.isOpened():
            self._cap.release()
            self._cap = None
            raise CameraUnavailableError(
                config.STATUS_CAMERA_ERROR.format(index=self.camera_index)
            )

        self._cap.set(cv2.CAP_PROP_FRAME_WIDTH, self.width)
        self._cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self.height)
        self._cap.set(cv2.CAP_PROP_FPS, self.fps)

        actual_w = int(self._cap.get(cv2.CAP_PROP_FRAME_WIDTH))
        actual_h = int(self._cap.get(cv2.CAP_PROP_FRAME_HEIGHT))
        log.info(f"Opened camera {self.camera_index} at {actual_w}x{actual_h}.")

    def release(self) -> None:
        """Release the camera resource."""
        if self._cap is not None:
            self._cap.release()
            self._cap = None
            log.info("Camera released.")

    @property
    def is_open(self) -> bool:
        """True if the camera is currently open."""
        return self._cap is not None and self._cap.isOpened()

    @property
    def missed_frames(self) -> int:
        """Number of acquire() calls that produced no frame."""
        return self._missed

    # ──────────────────────────────────────────────────────────────────────────
    # Frame acquisition
    # ──────────────────────────────────────────────────────────────────────────

    def acquire(self) -> np.ndarray | None:
        """
        Read the next frame from the camera.

        Returns:
            BGR ndarray, or None if the camera is closed or the read failed.
        """
        if not self.is_open:
            return None

        ret, frame = self._cap.read()
        if not ret or frame is None:
            self._missed += 1
            log.warning("Failed to read frame. Camera may be disconnected.")
            return None

        return frame

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, *_):
        self.release()
