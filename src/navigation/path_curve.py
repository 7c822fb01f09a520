"""Cell path to smooth curve pipeline.

waypoints -> midpoint layers -> string pull -> spline.
"""

import logging
from typing import Optional, Sequence

from src.core.config import MovementSettings

from .curves import CurveSmoother, SmoothCurve
from .hex_grid import HexCell, HexLayout
from .interpolation import PathInterpolator
from .string_pull import StringPullValidator

logger = logging.getLogger(__name__)


class PathCurveBuilder:
    """
    Builds the traversed curve for a cell path.

    Usage:
        builder = PathCurveBuilder(grid.layout, settings)
        curve = builder.build(path)
    """

    def __init__(self, layout: HexLayout, settings: Optional[MovementSettings] = None):
        """
        Initialize builder.

        Args:
            layout: Grid layout (for cell polygons).
            settings: Pipeline tunables (defaults when omitted).
        """
        self.settings = settings or MovementSettings()
        self.interpolator = PathInterpolator(self.settings.straight_angle_tolerance)
        self.validator = StringPullValidator(
            layout,
            max_iterations=self.settings.string_pull_iterations,
            convergence=self.settings.string_pull_convergence,
        )
        self.smoother = CurveSmoother(
            self.settings.curve_method, self.settings.smoothing_iterations
        )

    def build(self, path: Sequence[HexCell]) -> Optional[SmoothCurve]:
        """
        Convert a cell path into an open SmoothCurve.

        Straight runs come back as the cell centers with no smoothing.

        Returns:
            The curve, or None for an empty path.
        """
        if not path:
            return None

        if self.interpolator.is_straight(path):
            return SmoothCurve.from_points([c.world_position for c in path])

        waypoints = self.interpolator.generate_path_waypoints(path, self.settings.waypoint_tension)
        dense = self.interpolator.generate_midpoint_interpolation(
            waypoints, self.settings.interpolation_layers
        )
        tightened = self.validator.pull_string_through_path(dense, path)
        smoothed = self.smoother.smooth(tightened, closed=False)
        logger.debug(
            "Curve for %d cells: %d waypoints -> %d points",
            len(path),
            len(waypoints),
            len(smoothed),
        )
        return SmoothCurve.from_points(smoothed)
