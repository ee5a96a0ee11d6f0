"""Image segmentation problem instance.

A :class:`ProblemInstance` owns the working image, the RGB and HSB colour of
every pixel and the pixel graph whose edges carry HSB distances. It is built
once and then shared, read-only, by every individual of a run.
"""

from __future__ import annotations

import logging
import operator
from typing import Any

import numpy as np
from PIL import Image

from segevo.core.color import euclidean_distance, rgb_to_hsb
from segevo.core.direction import CARDINAL_DIRECTIONS, Direction
from segevo.core.errors import OutOfRangeError
from segevo.core.graph import PixelGraph
from segevo.segmentation.fitness import FitnessWeights

logger = logging.getLogger(__name__)


def _as_pil_image(image: Any) -> Image.Image:
    if isinstance(image, Image.Image):
        return image.convert("RGB")
    arr = np.asarray(image)
    if arr.ndim != 3 or arr.shape[2] not in (3, 4):
        raise ValueError(f"Image array must have shape (height, width, 3), got {arr.shape}.")
    if arr.shape[0] == 0 or arr.shape[1] == 0:
        raise ValueError("Image must contain at least one pixel.")
    if arr.min() < 0 or arr.max() > 255:
        raise ValueError("Image values must lie in [0, 255].")
    return Image.fromarray(np.ascontiguousarray(arr[..., :3]).astype(np.uint8))


class ProblemInstance:
    """Represents an image segmentation problem instance.

    Parameters
    ----------
    image : PIL.Image.Image | array-like
        Source bitmap, either a Pillow image or an ``(height, width, 3)`` array
        of 0-255 values.
    image_scaling : float, default 1.0
        Ratio by which the source image is resized before anything else.
    name : str, default ""
        Free-form label, used in logs.
    fitness_weights : FitnessWeights | None
        Weighting of the fitness terms; defaults to ``FitnessWeights()``.
    """

    def __init__(
        self,
        image: Any,
        image_scaling: float = 1.0,
        name: str = "",
        fitness_weights: FitnessWeights | None = None,
    ) -> None:
        if image_scaling <= 0:
            raise ValueError("image_scaling must be > 0")
        source = _as_pil_image(image)
        self.name = name
        self.original_width, self.original_height = source.size
        self.image_scaling = float(image_scaling)
        self.fitness_weights = fitness_weights if fitness_weights is not None else FitnessWeights()

        if image_scaling == 1:
            self.image = source
        else:
            size = (
                max(1, round(self.original_width * image_scaling)),
                max(1, round(self.original_height * image_scaling)),
            )
            self.image = source.resize(size, Image.Resampling.BILINEAR)

        self.width, self.height = self.image.size
        self.pixel_count = self.width * self.height

        pixels = np.asarray(self.image, dtype=np.int64).reshape(self.pixel_count, 3)
        self._rgb = pixels.copy()
        self._hsb = rgb_to_hsb(pixels)
        self._neighbor_table = self._build_neighbor_table()
        self._valid_mask = self._neighbor_table[:, 1:] >= 0
        for arr in (self._rgb, self._hsb, self._neighbor_table, self._valid_mask):
            arr.setflags(write=False)

        self._graph = self._build_graph()
        logger.debug(
            "Problem instance %r: %dx%d pixels (scaling %.3f), %d edges",
            self.name,
            self.width,
            self.height,
            self.image_scaling,
            self._graph.edge_count,
        )

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------
    def _build_neighbor_table(self) -> np.ndarray:
        idx = np.arange(self.pixel_count)
        xs, ys = idx % self.width, idx // self.width
        table = np.full((self.pixel_count, len(Direction)), -1, dtype=np.int64)
        table[:, Direction.NONE] = idx
        for direction in CARDINAL_DIRECTIONS:
            dx, dy = direction.offset
            nx_, ny_ = xs + dx, ys + dy
            inside = (nx_ >= 0) & (nx_ < self.width) & (ny_ >= 0) & (ny_ < self.height)
            table[inside, direction] = ny_[inside] * self.width + nx_[inside]
        return table

    def _build_graph(self) -> PixelGraph:
        # Each pixel is connected to its 4 cardinal neighbours, weighted by HSB distance
        graph = PixelGraph(self.pixel_count)
        for direction in (Direction.RIGHT, Direction.DOWN):
            targets = self._neighbor_table[:, direction]
            sources = np.nonzero(targets >= 0)[0]
            ends = targets[sources]
            weights = np.linalg.norm(self._hsb[sources] - self._hsb[ends], axis=1)
            for i, j, w in zip(sources.tolist(), ends.tolist(), weights.tolist(), strict=True):
                graph.add_connection(i, j, w)
        graph.freeze()
        return graph

    # ------------------------------------------------------------------
    # Pixel accessors
    # ------------------------------------------------------------------
    @property
    def euclidean_distance_graph(self) -> PixelGraph:
        """Graph of cardinal neighbours weighted by HSB euclidean distance."""
        return self._graph

    @property
    def neighbor_table(self) -> np.ndarray:
        """``(pixel_count, 5)`` table: neighbour index per direction, -1 off-grid.

        The ``Direction.NONE`` column holds the pixel itself.
        """
        return self._neighbor_table

    @property
    def valid_direction_mask(self) -> np.ndarray:
        """``(pixel_count, 4)`` booleans, columns in ``CARDINAL_DIRECTIONS`` order."""
        return self._valid_mask

    @property
    def rgb(self) -> np.ndarray:
        return self._rgb

    @property
    def hsb(self) -> np.ndarray:
        return self._hsb

    def get_rgb(self, i: int) -> np.ndarray:
        self._check_index(i)
        return self._rgb[i]

    def get_hsb(self, i: int) -> np.ndarray:
        self._check_index(i)
        return self._hsb[i]

    def pixel_index_to_pos(self, index: int) -> tuple[int, int]:
        """Project a flattened pixel index onto ``(x, y)``."""
        self._check_index(index)
        return index % self.width, index // self.width

    def pos_to_pixel_index(self, x: int, y: int) -> int:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise OutOfRangeError(f"Position ({x}, {y}) outside {self.width}x{self.height} image.")
        return y * self.width + x

    # ------------------------------------------------------------------
    # Adjacency
    # ------------------------------------------------------------------
    def get_direction(self, i: int, j: int) -> Direction:
        """Direction to go from pixel ``i`` to the adjacent pixel ``j``.

        Returns ``Direction.NONE`` when the pixels are not adjacent.
        """
        x_from, y_from = self.pixel_index_to_pos(i)
        x_to, y_to = self.pixel_index_to_pos(j)
        return self.get_direction_xy(x_from, y_from, x_to, y_to)

    @staticmethod
    def get_direction_xy(x_from: int, y_from: int, x_to: int, y_to: int) -> Direction:
        """Same as :meth:`get_direction` on explicit coordinates."""
        step = (x_to - x_from, y_to - y_from)
        for direction in CARDINAL_DIRECTIONS:
            if direction.offset == step:
                return direction
        return Direction.NONE

    def get_neighbor(self, i: int, direction: Direction) -> int | None:
        """Index of the pixel reached from ``i`` along ``direction``, if any."""
        self._check_index(i)
        if direction == Direction.NONE:
            return None
        j = int(self._neighbor_table[i, direction])
        return j if j >= 0 else None

    def valid_directions(self, i: int) -> list[Direction]:
        """Directions from ``i`` that stay on the grid (never ``NONE``)."""
        self._check_index(i)
        return [d for d in CARDINAL_DIRECTIONS if self._neighbor_table[i, d] >= 0]

    def get_euclidean_distance(self, i: int, j: int) -> float:
        """Euclidean distance between two pixels in HSB colour space.

        Hue is compared as a plain number in ``[0, 1)``, not as an angle, so reds
        on either side of the wrap point (hue near 0 and near 1) come out far apart.
        """
        self._check_index(i)
        self._check_index(j)
        return euclidean_distance(self._hsb[i], self._hsb[j])

    def __repr__(self) -> str:
        return f"ProblemInstance(name={self.name!r}, size={self.width}x{self.height})"

    def _check_index(self, i: int) -> None:
        try:
            operator.index(i)
        except TypeError:
            raise OutOfRangeError(f"Pixel index {i!r} is not an integer.") from None
        if not (0 <= i < self.pixel_count):
            raise OutOfRangeError(f"Pixel index {i} outside [0, {self.pixel_count}).")
