# =============================================================================
# config.py — Central Configuration for the Eye-Closure Drowsiness Monitor
# All tunable parameters live here. Never hardcode values in modules.
# =============================================================================

import os

import cv2

# ── Paths ─────────────────────────────────────────────────────────────────────
BASE_DIR    = os.path.dirname(os.path.abspath(__file__))
# Shipped as package data of `alerts`, next to this module once installed
ASSETS_DIR  = os.path.join(BASE_DIR, "alerts", "assets")
# Outside the install tree; EYE_MONITOR_LOG_DIR overrides
LOGS_DIR    = os.environ.get(
    "EYE_MONITOR_LOG_DIR",
    os.path.join(os.path.expanduser("~"), ".eye_monitor", "logs"),
)
os.makedirs(LOGS_DIR, exist_ok=True)

# ── Camera ────────────────────────────────────────────────────────────────────
CAMERA_INDEX        = 0          # Webcam device index
CAMERA_WIDTH        = 640
CAMERA_HEIGHT       = 480
CAMERA_FPS          = 30

# ── Tick loop ─────────────────────────────────────────────────────────────────
TICK_INTERVAL_MS    = 33         # ~30 Hz polling timer

# ── Eye detection (Haar cascade) ──────────────────────────────────────────────
EYE_CASCADE_PATH    = os.path.join(cv2.data.haarcascades, "haarcascade_eye.xml")
EYE_SCALE_FACTOR    = 1.1
EYE_MIN_NEIGHBORS   = 10
EYE_MIN_SIZE        = (30, 30)   # (width, height) in pixels

# ── Eye closure ───────────────────────────────────────────────────────────────
# Openness proxy = region height / region width.  Strictly above → open.
EYE_OPEN_RATIO_THRESHOLD = 0.2

# Continuous all-closed time before the alarm fires (seconds)
CLOSURE_HOLD_SECONDS     = 1.0

# ── Alarm ─────────────────────────────────────────────────────────────────────
ALARM_SOUND_PATH    = os.path.join(ASSETS_DIR, "alarm.wav")
MIXER_FREQUENCY     = 44100
MIXER_BUFFER        = 512
ALARM_JOIN_TIMEOUT  = 1.0        # seconds to wait for a session thread on shutdown

# ── Status text ───────────────────────────────────────────────────────────────
STATUS_EYES_DETECTED     = "Eyes are detected!"
STATUS_EYES_NOT_DETECTED = "Eyes are not detected!"
STATUS_ALARM_ERROR       = "Error playing alarm: {error}"
STATUS_ALARM_MISSING     = "Alarm sound not found: {path}"
STATUS_CAMERA_ERROR      = "Cannot open camera {index}"

# ── Window / UI ───────────────────────────────────────────────────────────────
WINDOW_TITLE        = "Eye Closure Monitor"
STATUS_FONT_SCALE   = 0.7

# Colors (B, G, R), OpenCV channel order
COLOR_EYE_OPEN      = (0,   255,   0)
COLOR_EYE_CLOSED    = (0,     0, 255)
COLOR_STATUS_TEXT   = (255, 255, 255)
COLOR_STATUS_BG     = (30,   30,  40)
MARKER_THICKNESS    = 2

# ── Debug ─────────────────────────────────────────────────────────────────────
DEBUG_MODE          = False      # Per-tick telemetry at INFO instead of DEBUG
