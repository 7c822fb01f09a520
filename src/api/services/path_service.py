"""
Stateless path planning service.
"""

from typing import Optional

from src.core.config import CurveMethod, MovementSettings
from src.navigation import (
    BoundaryTracer,
    HexCoord,
    HexGrid,
    HexLayout,
    HexPathfinder,
    Orientation,
    PathCurveBuilder,
    path_cost,
)

from ..schemas.common import CoordSchema
from ..schemas.grid import (
    BoundaryResponse,
    GridShape,
    GridSpec,
    PathResponse,
)


def build_grid(spec: GridSpec, settings: Optional[MovementSettings] = None) -> HexGrid:
    """
    Build a HexGrid from a request spec.

    Args:
        spec: Shape, size, layout and disabled cells.
        settings: Supplies hex size and projection the spec leaves out.

    Returns:
        The grid, with listed cells disabled (unknown coords ignored).
    """
    settings = settings or MovementSettings()
    layout = HexLayout(
        size=spec.hex_size if spec.hex_size is not None else settings.hex_size,
        orientation=Orientation(spec.orientation.value),
        isometric=spec.isometric if spec.isometric is not None else settings.isometric,
    )
    if spec.shape is GridShape.HEXAGON:
        grid = HexGrid.hexagon(spec.radius, layout=layout)
    else:
        grid = HexGrid.parallelogram(spec.width, spec.height, layout=layout)

    for coord in spec.disabled:
        grid.set_enabled(HexCoord(coord.q, coord.r), False)
    return grid


class PathService:
    """Pathfinding and boundary tracing over request-supplied grids."""

    def __init__(self, settings: Optional[MovementSettings] = None):
        self.settings = settings or MovementSettings()

    def find_path(
        self,
        grid_spec: GridSpec,
        start: CoordSchema,
        goal: CoordSchema,
        radius: Optional[int] = None,
        curve_method: Optional[CurveMethod] = None,
    ) -> Optional[PathResponse]:
        """
        Find a path and build its curve.

        Returns:
            PathResponse, or None when no path exists.
        """
        grid = build_grid(grid_spec, self.settings)
        settings = self.settings
        if curve_method is not None:
            settings = settings.model_copy(update={"curve_method": curve_method})

        finder = HexPathfinder(grid)
        start_cell = grid.cell_at_coord(HexCoord(start.q, start.r))
        goal_cell = grid.cell_at_coord(HexCoord(goal.q, goal.r))
        if radius is None:
            path = finder.find_path(start_cell, goal_cell)
        else:
            path = finder.find_path_to_range(start_cell, goal_cell, radius)
        if not path:
            return None

        curve = PathCurveBuilder(grid.layout, settings).build(path)
        return PathResponse(
            cells=[CoordSchema(q=c.q, r=c.r) for c in path],
            cost=path_cost(path),
            curve=list(curve.points),
            curve_length=curve.length,
        )

    def trace_boundary(self, grid_spec: GridSpec, iterations: int) -> BoundaryResponse:
        """Trace the enabled region's boundary and its Chaikin contour."""
        grid = build_grid(grid_spec, self.settings)
        tracer = BoundaryTracer()
        cells = grid.enabled_cells()
        ordered = tracer.trace_boundary(cells)
        contour = tracer.trace_contour(cells, iterations=iterations)
        return BoundaryResponse(
            boundary=[CoordSchema(q=c.q, r=c.r) for c in ordered],
            contour=list(contour.points) if contour else [],
        )
