import numpy as np
import pytest

from pixelcomp import utils
from pixelcomp.errors import (
    DecodeError,
    DuplicateRegistration,
    InternalInvariant,
    InvalidArgument,
    OutOfBounds,
    PixelCompError,
    Unsupported,
)


def test_safe_divide():
    result = utils.safe_divide(np.array([1.0, 1.0, 0.0]), np.array([2.0, 0.0, 0.0]))
    np.testing.assert_allclose(result, [0.5, 1.0, 1.0])
    result = utils.safe_divide(np.array([1.0]), np.array([0.0]), fill=0.0)
    np.testing.assert_allclose(result, [0.0])


@pytest.mark.parametrize(
    "boxes, expected",
    [
        ([(0, 0, 10, 10), (5, 5, 15, 15)], (5, 5, 10, 10)),
        ([(0, 0, 10, 10), (10, 0, 20, 10)], utils.EMPTY_BOX),
        ([(0, 0, 10, 10), (-5, -5, 20, 20)], (0, 0, 10, 10)),
        ([(0, 0, 10, 10), (2, 0, 20, 8), (0, 3, 6, 9)], (2, 3, 6, 8)),
    ],
)
def test_intersect(boxes, expected):
    assert utils.intersect(*boxes) == expected


def test_union():
    assert utils.union(0.5, 0.5) == 0.75
    np.testing.assert_allclose(utils.union(np.array([0.0, 1.0]), 0.5), [0.5, 1.0])


def test_premultiply_unpremultiply():
    color = np.array([[0.8, 0.4, 0.2], [0.5, 0.5, 0.5]])
    alpha = np.array([[0.5], [0.0]])
    premultiplied = utils.premultiply(color, alpha)
    np.testing.assert_allclose(premultiplied, [[0.4, 0.2, 0.1], [0.0, 0.0, 0.0]])
    np.testing.assert_allclose(
        utils.unpremultiply(premultiplied, alpha), [[0.8, 0.4, 0.2], [0.0, 0.0, 0.0]]
    )


@pytest.mark.parametrize(
    "error, builtin",
    [
        (InvalidArgument, ValueError),
        (OutOfBounds, IndexError),
        (OutOfBounds, InvalidArgument),
        (Unsupported, NotImplementedError),
        (DuplicateRegistration, KeyError),
        (DecodeError, IOError),
        (InternalInvariant, AssertionError),
    ],
)
def test_error_hierarchy(error, builtin):
    assert issubclass(error, PixelCompError)
    assert issubclass(error, builtin)
