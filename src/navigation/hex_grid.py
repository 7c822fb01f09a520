"""Hex Grid System for turn-based movement.

Implements axial coordinates (q, r) with derived cube coordinate s, the
world-space layout used to place hexes (pointy or flat top, optionally
projected isometrically) and the grid that owns cell enabled-state.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, Iterator, List, Optional, Protocol, Sequence, Tuple, Union

from src.core.constants import DEFAULT_HEX_SIZE, HEX_DIRECTIONS, SQRT3

from .vector import Point


@dataclass(frozen=True, order=True)
class HexCoord:
    """
    Hex coordinate using axial coordinates.

    The third cube component is derived, so q + r + s == 0 always holds.

    Attributes:
        q: Column axis.
        r: Diagonal row axis.
    """

    q: int
    r: int

    @property
    def s(self) -> int:
        """Third cube coordinate."""
        return -self.q - self.r

    @property
    def cube(self) -> Tuple[int, int, int]:
        """Cube coordinates (q, r, s)."""
        return (self.q, self.r, self.s)

    @classmethod
    def from_cube(cls, q: int, r: int, s: int) -> "HexCoord":
        """
        Create coordinate from cube coordinates.

        Raises:
            ValueError: If the components do not sum to zero.
        """
        if q + r + s != 0:
            raise ValueError(f"Cube coordinates must sum to 0, got ({q}, {r}, {s})")
        return cls(q, r)

    def __add__(self, other: "HexCoord") -> "HexCoord":
        return HexCoord(self.q + other.q, self.r + other.r)

    def __sub__(self, other: "HexCoord") -> "HexCoord":
        return HexCoord(self.q - other.q, self.r - other.r)

    def distance_to(self, other: "HexCoord") -> int:
        """
        Calculate hex distance to another coordinate.

        Args:
            other: Target coordinate.

        Returns:
            Number of adjacent-cell steps between the two.
        """
        dq = self.q - other.q
        dr = self.r - other.r
        return max(abs(dq), abs(dr), abs(dq + dr))

    def neighbor(self, direction: int) -> "HexCoord":
        """
        Get the adjacent coordinate in a direction.

        Args:
            direction: Index into HEX_DIRECTIONS (0=E, clockwise).
        """
        dq, dr = HEX_DIRECTIONS[direction % 6]
        return HexCoord(self.q + dq, self.r + dr)

    def neighbors(self) -> List["HexCoord"]:
        """All 6 adjacent coordinates, clockwise starting east."""
        return [HexCoord(self.q + dq, self.r + dr) for dq, dr in HEX_DIRECTIONS]

    def direction_to(self, other: "HexCoord") -> Optional[int]:
        """Direction index of an adjacent coordinate, or None if not adjacent."""
        delta = (other.q - self.q, other.r - self.r)
        try:
            return HEX_DIRECTIONS.index(delta)
        except ValueError:
            return None

    def is_adjacent(self, other: "HexCoord") -> bool:
        return self.distance_to(other) == 1

    def ring(self, radius: int) -> List["HexCoord"]:
        """
        Coordinates exactly ``radius`` steps away, walked clockwise.

        Radius 0 returns just this coordinate.
        """
        if radius < 0:
            raise ValueError(f"Radius must be non-negative, got {radius}")
        if radius == 0:
            return [self]

        results = []
        # Start at the NW corner of the ring, then walk E, SE, SW, W, NW, NE
        dq, dr = HEX_DIRECTIONS[4]
        current = HexCoord(self.q + dq * radius, self.r + dr * radius)
        for direction in range(6):
            for _ in range(radius):
                results.append(current)
                current = current.neighbor(direction)
        return results

    def spiral(self, radius: int) -> List["HexCoord"]:
        """Coordinates within ``radius`` steps, ring by ring from the center."""
        results = []
        for k in range(radius + 1):
            results.extend(self.ring(k))
        return results

    def __repr__(self) -> str:
        return f"Hex({self.q}, {self.r})"


def cube_round(fq: float, fr: float) -> HexCoord:
    """Round fractional axial coordinates to the containing hex."""
    fs = -fq - fr
    q = round(fq)
    r = round(fr)
    s = round(fs)

    q_diff = abs(q - fq)
    r_diff = abs(r - fr)
    s_diff = abs(s - fs)

    # Reset the component with the largest rounding error
    if q_diff > r_diff and q_diff > s_diff:
        q = -r - s
    elif r_diff > s_diff:
        r = -q - s
    return HexCoord(int(q), int(r))


class Orientation(Enum):
    """Hex orientation."""

    POINTY = "pointy"  # Corner at the top
    FLAT = "flat"  # Edge at the top


# (forward 2x2, inverse 2x2, first corner angle in units of 60 degrees)
_ORIENTATION_MATRICES = {
    Orientation.POINTY: (
        (SQRT3, SQRT3 / 2.0, 0.0, 3.0 / 2.0),
        (SQRT3 / 3.0, -1.0 / 3.0, 0.0, 2.0 / 3.0),
        0.5,
    ),
    Orientation.FLAT: (
        (3.0 / 2.0, 0.0, SQRT3 / 2.0, SQRT3),
        (2.0 / 3.0, 0.0, -1.0 / 3.0, SQRT3 / 3.0),
        0.0,
    ),
}


@dataclass(frozen=True)
class HexLayout:
    """
    Maps hex coordinates to world space and back.

    World y grows downward (screen convention), so HEX_DIRECTIONS are
    clockwise on screen. When ``isometric`` is set the flat layout is
    projected with ``(x - y, (x + y) / 2)``.

    Attributes:
        size: Hex radius (center to corner) in world units.
        origin: World position of Hex(0, 0).
        orientation: Pointy or flat top.
        isometric: Apply the isometric projection.
    """

    size: float = DEFAULT_HEX_SIZE
    origin: Point = (0.0, 0.0)
    orientation: Orientation = Orientation.POINTY
    isometric: bool = False

    def __post_init__(self):
        if self.size <= 0:
            raise ValueError(f"Hex size must be positive, got {self.size}")

    @property
    def cell_spacing(self) -> float:
        """Distance between neighboring centers before projection."""
        return SQRT3 * self.size

    def project(self, point: Point) -> Point:
        """Apply the isometric projection (identity when disabled)."""
        if not self.isometric:
            return point
        x, y = point
        return (x - y, (x + y) * 0.5)

    def unproject(self, point: Point) -> Point:
        """Inverse of ``project``."""
        if not self.isometric:
            return point
        ix, iy = point
        return ((2.0 * iy + ix) * 0.5, (2.0 * iy - ix) * 0.5)

    def to_world(self, coord: HexCoord) -> Point:
        """
        Convert a hex coordinate to the world position of its center.

        Args:
            coord: Hex coordinate.

        Returns:
            (x, y) world position.
        """
        f, _, _ = _ORIENTATION_MATRICES[self.orientation]
        x = (f[0] * coord.q + f[1] * coord.r) * self.size
        y = (f[2] * coord.q + f[3] * coord.r) * self.size
        local = self.project((x, y))
        return (local[0] + self.origin[0], local[1] + self.origin[1])

    def to_fractional(self, point: Point) -> Tuple[float, float]:
        """World position to fractional axial coordinates."""
        _, b, _ = _ORIENTATION_MATRICES[self.orientation]
        x, y = self.unproject((point[0] - self.origin[0], point[1] - self.origin[1]))
        x /= self.size
        y /= self.size
        return (b[0] * x + b[1] * y, b[2] * x + b[3] * y)

    def to_hex(self, point: Point) -> HexCoord:
        """World position to the coordinate of the hex containing it."""
        fq, fr = self.to_fractional(point)
        return cube_round(fq, fr)

    def corners(self, coord: HexCoord) -> List[Point]:
        """
        The 6 corner points of a hex, in order around the polygon.

        Args:
            coord: Hex coordinate.

        Returns:
            List of 6 world-space points.
        """
        _, _, start_angle = _ORIENTATION_MATRICES[self.orientation]
        f, _, _ = _ORIENTATION_MATRICES[self.orientation]
        cx = (f[0] * coord.q + f[1] * coord.r) * self.size
        cy = (f[2] * coord.q + f[3] * coord.r) * self.size

        points = []
        for i in range(6):
            angle = math.pi / 3.0 * (i + start_angle)
            corner = (cx + self.size * math.cos(angle), cy + self.size * math.sin(angle))
            px, py = self.project(corner)
            points.append((px + self.origin[0], py + self.origin[1]))
        return points


@dataclass(eq=False)
class HexCell:
    """
    A grid cell.

    Cells are owned by a HexGrid, created once and only ever toggled.
    Identity is the object itself; the grid keeps one cell per coordinate.

    Attributes:
        coord: Axial coordinate (unique within the grid).
        world_position: Cached world position of the center.
        enabled: Whether agents may enter the cell.
        metadata: Free-form data (terrain, move_cost, ...).
    """

    coord: HexCoord
    world_position: Point
    enabled: bool = True
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def q(self) -> int:
        return self.coord.q

    @property
    def r(self) -> int:
        return self.coord.r

    def __repr__(self) -> str:
        state = "" if self.enabled else ", disabled"
        return f"HexCell({self.coord.q}, {self.coord.r}{state})"


class CellProvider(Protocol):
    """Capabilities the pathfinding core needs from a grid."""

    def enabled_neighbors(self, cell: HexCell) -> Sequence[HexCell]: ...

    def cell_at_world_position(self, point: Point) -> Optional[HexCell]: ...

    def cell_at_coord(self, coord: HexCoord) -> Optional[HexCell]: ...

    def enabled_cells_in_range(self, center: HexCell, radius: int) -> Sequence[HexCell]: ...


CoordLike = Union[HexCoord, HexCell, Tuple[int, int]]


def as_coord(value: CoordLike) -> HexCoord:
    """Accept a HexCoord, HexCell or (q, r) tuple."""
    if isinstance(value, HexCoord):
        return value
    if isinstance(value, HexCell):
        return value.coord
    q, r = value
    return HexCoord(int(q), int(r))


class HexGrid:
    """
    Hex grid of cells with enabled/disabled state.

    Usage:
        grid = HexGrid.parallelogram(5, 5)
        grid.set_enabled(HexCoord(1, 0), False)
        cell = grid.cell_at_world_position((40.0, 12.0))
    """

    def __init__(self, layout: Optional[HexLayout] = None):
        """
        Initialize empty grid.

        Args:
            layout: World layout for cell positions (default pointy, size 32).
        """
        self.layout = layout or HexLayout()
        self._cells: Dict[HexCoord, HexCell] = {}

    @classmethod
    def from_coords(
        cls, coords: Iterable[CoordLike], layout: Optional[HexLayout] = None
    ) -> "HexGrid":
        """Create a grid with one enabled cell per coordinate."""
        grid = cls(layout)
        for coord in coords:
            grid.add_cell(as_coord(coord))
        return grid

    @classmethod
    def parallelogram(
        cls, width: int, height: int, layout: Optional[HexLayout] = None
    ) -> "HexGrid":
        """Create a grid with q in [0, width) and r in [0, height)."""
        return cls.from_coords(
            (HexCoord(q, r) for r in range(height) for q in range(width)), layout
        )

    @classmethod
    def hexagon(
        cls, radius: int, center: HexCoord = HexCoord(0, 0), layout: Optional[HexLayout] = None
    ) -> "HexGrid":
        """Create a hexagon-shaped grid of the given radius."""
        return cls.from_coords(center.spiral(radius), layout)

    def add_cell(
        self,
        coord: HexCoord,
        enabled: bool = True,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> HexCell:
        """
        Add a cell at a coordinate.

        Raises:
            ValueError: If a cell already exists at the coordinate.
        """
        if coord in self._cells:
            raise ValueError(f"Cell already exists at {coord}")
        cell = HexCell(
            coord=coord,
            world_position=self.layout.to_world(coord),
            enabled=enabled,
            metadata=dict(metadata or {}),
        )
        self._cells[coord] = cell
        return cell

    def cell_at_coord(self, coord: CoordLike) -> Optional[HexCell]:
        """Get the cell at a coordinate, or None if off-grid."""
        return self._cells.get(as_coord(coord))

    def cell_at_world_position(self, point: Point) -> Optional[HexCell]:
        """Get the cell containing a world position, or None if off-grid."""
        return self._cells.get(self.layout.to_hex(point))

    def set_enabled(self, coord: CoordLike, enabled: bool) -> bool:
        """
        Enable or disable a cell.

        Returns:
            True if the cell exists, False otherwise.
        """
        cell = self.cell_at_coord(coord)
        if cell is None:
            return False
        cell.enabled = enabled
        return True

    def toggle(self, coord: CoordLike) -> Optional[bool]:
        """Flip a cell's enabled flag. Returns the new value, or None if off-grid."""
        cell = self.cell_at_coord(coord)
        if cell is None:
            return None
        cell.enabled = not cell.enabled
        return cell.enabled

    def is_enabled(self, coord: CoordLike) -> bool:
        cell = self.cell_at_coord(coord)
        return cell is not None and cell.enabled

    def neighbors(self, cell: HexCell) -> List[HexCell]:
        """Existing neighbor cells regardless of enabled state."""
        return [
            self._cells[n] for n in cell.coord.neighbors() if n in self._cells
        ]

    def enabled_neighbors(self, cell: HexCell) -> List[HexCell]:
        """
        Get neighboring cells agents may enter.

        Args:
            cell: Center cell.

        Returns:
            Enabled neighbors in direction order (E, then clockwise).
        """
        return [n for n in self.neighbors(cell) if n.enabled]

    def enabled_cells_in_range(self, center: CoordLike, radius: int) -> List[HexCell]:
        """
        Get enabled cells within a hex distance.

        Args:
            center: Center cell or coordinate.
            radius: Maximum distance (inclusive).

        Returns:
            Enabled cells, nearest rings first.
        """
        origin = as_coord(center)
        cells = []
        for coord in origin.spiral(max(0, radius)):
            cell = self._cells.get(coord)
            if cell is not None and cell.enabled:
                cells.append(cell)
        return cells

    def enabled_cells(self) -> List[HexCell]:
        return [cell for cell in self._cells.values() if cell.enabled]

    def cell_polygon(self, cell: HexCell) -> List[Point]:
        """Corner polygon of a cell."""
        return self.layout.corners(cell.coord)

    def __len__(self) -> int:
        return len(self._cells)

    def __contains__(self, coord: object) -> bool:
        if isinstance(coord, (HexCoord, HexCell)):
            return as_coord(coord) in self._cells
        return False

    def __iter__(self) -> Iterator[HexCell]:
        return iter(self._cells.values())
