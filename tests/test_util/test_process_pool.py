"""Test the behaviour of the ProcessPool class."""

import os
from typing import Iterable, Tuple

import pytest
from pytest_mock import MockerFixture

from autopad.util import ProcessPool


def dummy_initializer(*args: Iterable) -> Tuple:
    """Implement a 'do nothing' function that accepts initialization arguments."""
    return args


def square(num: int) -> int:
    """Return the square of an integer."""
    return num * num


@pytest.mark.skipif("SKIP_MP" in os.environ, reason="unsafe for parallel execution")
@pytest.mark.parametrize(
    "attributes",
    [
        {},
        {"processes": 2},
        {"initializer": dummy_initializer},
        {"initializer": dummy_initializer, "initargs": (1, "2", [3], {"a": 4})},
        {"maxtasksperchild": 1},
    ],
)
def test_init(attributes: dict) -> None:
    """Test that a process pool can be initialized with each of its arguments."""
    with ProcessPool(**attributes):
        pass


@pytest.mark.skipif("SKIP_MP" in os.environ, reason="unsafe for parallel execution")
def test_with_context(mocker: MockerFixture) -> None:
    """Test that the composed pool is closed and joined on exit."""
    pool = ProcessPool(processes=2)
    pool._pool.terminate()
    mock = mocker.patch.object(pool, "_pool", autospec=True)
    with pool:
        pass
    mock.__enter__.assert_called_once()
    mock.close.assert_called_once()
    mock.join.assert_called_once()
    mock.__exit__.assert_called_once()


@pytest.mark.skipif("SKIP_MP" in os.environ, reason="unsafe for parallel execution")
def test_imap() -> None:
    """Test that mapped function results can be iterated."""
    with ProcessPool(processes=2) as pool:
        assert sum(pool.imap(square, [2] * 6, chunksize=3)) == 24


@pytest.mark.skipif("SKIP_MP" in os.environ, reason="unsafe for parallel execution")
def test_map() -> None:
    """Test that a function can be mapped over an iterable of values."""
    with ProcessPool(processes=2) as pool:
        assert pool.map(square, [1, 2, 3]) == [1, 4, 9]


@pytest.mark.skipif("SKIP_MP" in os.environ, reason="unsafe for parallel execution")
def test_close(mocker: MockerFixture) -> None:
    """Test that closing the pool closes the composed pool and cleans up."""
    pool = ProcessPool(processes=2)
    pool._pool.terminate()
    mock = mocker.patch.object(pool, "_pool", autospec=True)
    clean_up = mocker.patch.object(pool, "_clean_up")
    pool.close()
    mock.close.assert_called_once()
    clean_up.assert_called_once()
