"""
segevo.core.errors
==================

Exception taxonomy for the segmentation core.

None of these signal a transient condition: each one means an invariant was
broken (bad pixel index, genome built over another problem instance, ...).
Callers are not expected to retry.
"""


class SegmentationError(Exception):
    """Base class for all segmentation core errors."""


class InvalidIndexError(SegmentationError, IndexError):
    """A pixel / node index lies outside ``[0, node_count)``."""


class OutOfRangeError(InvalidIndexError):
    """A pixel index or (x, y) position lies outside the image grid."""


class NoSuchEdgeError(SegmentationError, KeyError):
    """Two pixels queried as an edge are not connected in the pixel graph."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message
        return str(self.args[0]) if self.args else ""


class IncompatibleGenomeError(SegmentationError, ValueError):
    """Individuals built over different problem instances were mixed."""


class EmptyPopulationError(SegmentationError, ValueError):
    """A query needing at least one individual hit an empty population."""


class GraphFrozenError(SegmentationError, RuntimeError):
    """The pixel graph was modified after construction finished."""
