"""Provide a process pool for per-reaction work."""


import multiprocessing
import os
import pickle
from pathlib import Path
from platform import system
from tempfile import mkstemp
from types import TracebackType
from typing import Any, Callable, Optional, Tuple, Type


__all__ = ("ProcessPool",)


def _init_win_worker(filename: str) -> None:
    """Load the pickled initializer and its arguments, then call it."""
    with open(filename, mode="rb") as handle:
        func, *args = pickle.load(handle)
    func(*args)


class ProcessPool:
    """Wrap `multiprocessing.Pool` and close and join it on context exit."""

    def __init__(
        self,
        processes: Optional[int] = None,
        initializer: Optional[Callable] = None,
        initargs: Tuple = (),
        maxtasksperchild: Optional[int] = None,
    ) -> None:
        """
        Initialize a process pool.

        On Windows the worker initializer and its arguments travel through a
        temporary pickle file instead of the pool's own argument passing,
        which is slow there, see [1_].

        Parameters
        ----------
        processes : int, optional
            The number of worker processes (default the number of cores).
        initializer : callable, optional
            Called with `initargs` in every worker when it starts, e.g. to set
            the target pH used by the reaction classification.
        initargs : tuple
            The arguments of `initializer`.
        maxtasksperchild : int, optional
            The number of tasks a worker completes before it is replaced
            (default the worker lives as long as the pool).

        References
        ----------
        .. [1] https://github.com/opencobra/cobrapy/issues/997

        """
        self._filename = None
        if initializer is not None and system() == "Windows":
            descriptor, self._filename = mkstemp(suffix=".pkl")
            # write through the descriptor from `mkstemp` so the file is closed
            # and can be removed later on Windows
            with os.fdopen(descriptor, mode="wb") as handle:
                pickle.dump((initializer,) + tuple(initargs), handle)
            initializer = _init_win_worker
            initargs = (self._filename,)
        self._pool = multiprocessing.Pool(
            processes=processes,
            initializer=initializer,
            initargs=initargs,
            maxtasksperchild=maxtasksperchild,
        )

    def __getattr__(self, name: str) -> Any:
        """Defer attribute access to the pool instance."""
        return getattr(self._pool, name)

    def __enter__(self) -> "ProcessPool":
        """Enable context management."""
        self._pool.__enter__()
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[TracebackType],
    ) -> Optional[bool]:
        """Close and join the workers, then clean up when leaving a context.

        Returns
        -------
        bool or None
            The result of the composed pool's `__exit__`.

        """
        # `multiprocessing.Pool.__exit__` only terminates, close and join first
        try:
            self._pool.close()
            self._pool.join()
        finally:
            self._clean_up()
        return self._pool.__exit__(exc_type, exc_val, exc_tb)

    def close(self) -> None:
        """
        Close the process pool.

        No more tasks can be submitted. The workers exit once the pending tasks
        are completed.

        """
        try:
            self._pool.close()
        finally:
            self._clean_up()

    def _clean_up(self) -> None:
        """Remove the initializer pickle file if it exists."""
        if self._filename is not None and Path(self._filename).exists():
            Path(self._filename).unlink()
