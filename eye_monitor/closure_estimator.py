# =============================================================================
# eye_monitor/closure_estimator.py
#
# Bounding-box openness estimate.
#
# The "eye aspect ratio" here is simply region height / region width of
# the detected eye box, not a landmark EAR.  A region is open when the
# ratio is strictly above EYE_OPEN_RATIO_THRESHOLD.  A region without a
# positive width cannot produce a ratio and is classified closed.
# =============================================================================

from typing import Iterable, List

from config import EYE_OPEN_RATIO_THRESHOLD
from eye_monitor.data_structures import EyeRegion, ClosureSample


class ClosureEstimator:

    def __init__(self, threshold: float = EYE_OPEN_RATIO_THRESHOLD):
        self.threshold = threshold

    @staticmethod
    def ratio(region: EyeRegion) -> float:
        """Height / width, or 0.0 when width is not positive."""
        if region.width <= 0:
            return 0.0
        return region.height / region.width

    def estimate(self, region: EyeRegion) -> ClosureSample:
        ratio = self.ratio(region)
        is_open = region.width > 0 and ratio > self.threshold
        return ClosureSample(region=region, ratio=ratio, is_open=is_open)

    def estimate_all(self, regions: Iterable[EyeRegion]) -> List[ClosureSample]:
        return [self.estimate(r) for r in regions]


def aggregate_all_closed(samples: Iterable[ClosureSample]) -> bool:
    """
    True unless some sample is open.

    No samples at all also yields True: with no detected eye there is
    nothing to show the eyes are open, so the tick counts as closed.
    """
    return not any(s.is_open for s in samples)
