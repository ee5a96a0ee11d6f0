import pytest

from segevo.core.direction import CARDINAL_DIRECTIONS, Direction


@pytest.mark.parametrize(
    ("direction", "opposite"),
    [
        (Direction.UP, Direction.DOWN),
        (Direction.DOWN, Direction.UP),
        (Direction.LEFT, Direction.RIGHT),
        (Direction.RIGHT, Direction.LEFT),
        (Direction.NONE, Direction.NONE),
    ],
)
def test_opposite(direction, opposite):
    assert direction.opposite is opposite
    assert direction.opposite.opposite is direction


def test_offsets_cancel_out():
    for d in CARDINAL_DIRECTIONS:
        dx, dy = d.offset
        ox, oy = d.opposite.offset
        assert (dx + ox, dy + oy) == (0, 0)
        assert abs(dx) + abs(dy) == 1
    assert Direction.NONE.offset == (0, 0)


def test_cardinal_directions_exclude_none():
    assert Direction.NONE not in CARDINAL_DIRECTIONS
    assert [int(d) for d in CARDINAL_DIRECTIONS] == [1, 2, 3, 4]
