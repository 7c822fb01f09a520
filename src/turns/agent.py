"""Agent body adapter.

The controller only reads the agent's position and writes position and
facing while executing; anything beyond that belongs to the caller.
"""

from typing import Optional, Protocol

from src.navigation.vector import Point


class AgentBody(Protocol):
    """What the movement core needs from an agent."""

    @property
    def position(self) -> Point: ...

    def set_position(self, point: Point) -> None: ...

    def set_facing(self, direction: Point) -> None: ...


class PointBody:
    """In-memory AgentBody: a position and a facing vector."""

    def __init__(self, position: Point, facing: Optional[Point] = None):
        self._position = (float(position[0]), float(position[1]))
        self.facing: Optional[Point] = facing

    @property
    def position(self) -> Point:
        return self._position

    def set_position(self, point: Point) -> None:
        self._position = (float(point[0]), float(point[1]))

    def set_facing(self, direction: Point) -> None:
        self.facing = direction

    def __repr__(self) -> str:
        return f"PointBody(position={self._position}, facing={self.facing})"
