"""Cardinal directions stored in a segmentation genome."""

from enum import IntEnum


class Direction(IntEnum):
    """Link from a pixel to one of its 4-connected neighbours.

    ``NONE`` marks a segment root (or an isolated pixel). The integer values
    double as column indices into ``ProblemInstance.neighbor_table``.
    """

    NONE = 0
    UP = 1
    DOWN = 2
    LEFT = 3
    RIGHT = 4

    @property
    def offset(self) -> tuple[int, int]:
        """(dx, dy) step taken when following this direction."""
        return _OFFSETS[self]

    @property
    def opposite(self) -> "Direction":
        return _OPPOSITES[self]


_OFFSETS = {
    Direction.NONE: (0, 0),
    Direction.UP: (0, -1),
    Direction.DOWN: (0, 1),
    Direction.LEFT: (-1, 0),
    Direction.RIGHT: (1, 0),
}

_OPPOSITES = {
    Direction.NONE: Direction.NONE,
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
}

CARDINAL_DIRECTIONS: tuple[Direction, ...] = (Direction.UP, Direction.DOWN, Direction.LEFT, Direction.RIGHT)
