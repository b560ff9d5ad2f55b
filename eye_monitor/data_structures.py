# =============================================================================
# eye_monitor/data_structures.py
# Dataclasses that flow between the modules of the per-tick pipeline.
# =============================================================================

from dataclasses import dataclass, field
from typing import List, Optional, Tuple


# ── Monitor states ────────────────────────────────────────────────────────────
STATE_AWAKE   = "AWAKE"     # no sustained closure
STATE_CLOSING = "CLOSING"   # all eyes closed, hold timer running
STATE_ALARMED = "ALARMED"   # hold duration exceeded, alarm active

# ── Per-tick events ───────────────────────────────────────────────────────────
EVENT_ALARM     = "ALARM"       # transition into ALARMED
EVENT_RECOVERED = "RECOVERED"   # transition back to AWAKE


@dataclass(frozen=True)
class EyeRegion:
    """Axis-aligned eye bounding box in frame pixel coordinates."""
    x: int
    y: int
    width: int
    height: int

    @property
    def center(self) -> Tuple[int, int]:
        return (self.x + self.width // 2, self.y + self.height // 2)


@dataclass(frozen=True)
class ClosureSample:
    """Openness measurement for one detected region on one tick."""
    region: EyeRegion
    # height / width, 0.0 for a degenerate region
    ratio: float
    is_open: bool


@dataclass
class MonitorState:
    """
    Persistent state of the drowsiness monitor.
    closure_start_time is None whenever an open eye was last observed.
    """
    closure_start_time: Optional[float] = None
    alarm_active: bool = False

    @property
    def name(self) -> str:
        if self.alarm_active:
            return STATE_ALARMED
        if self.closure_start_time is not None:
            return STATE_CLOSING
        return STATE_AWAKE


@dataclass
class TickResult:
    """Outcome of one detection pass."""
    samples: List[ClosureSample] = field(default_factory=list)
    all_closed: bool = True
    state: str = STATE_AWAKE
    # EVENT_ALARM, EVENT_RECOVERED or None
    event: Optional[str] = None
    timestamp: float = 0.0

    @property
    def open_count(self) -> int:
        return sum(1 for s in self.samples if s.is_open)
