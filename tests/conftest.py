import numpy as np
import pytest

from segevo.segmentation.problem import ProblemInstance

RED = (255, 0, 0)
NEAR_RED = (250, 0, 0)
BLUE = (0, 0, 255)
NEAR_BLUE = (0, 0, 250)


def two_pair_image() -> np.ndarray:
    """2x2 image: a red pair on top, a blue pair below."""
    return np.array([[RED, NEAR_RED], [BLUE, NEAR_BLUE]], dtype=np.uint8)


def random_image(width: int, height: int, seed: int = 0) -> np.ndarray:
    rng = np.random.default_rng(seed)
    return rng.integers(0, 256, size=(height, width, 3), dtype=np.uint8)


@pytest.fixture
def two_pair_problem() -> ProblemInstance:
    return ProblemInstance(two_pair_image(), name="two-pair")


@pytest.fixture
def random_problem() -> ProblemInstance:
    return ProblemInstance(random_image(5, 4), name="random-5x4")


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(1234)
