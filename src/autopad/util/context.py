"""Context manager for the package."""

from contextlib import contextmanager
from functools import partial
from typing import TYPE_CHECKING, Any, Callable, Iterator, Optional


if TYPE_CHECKING:
    from autopad import Model, Object


class HistoryManager:
    """
    Define a base context manager.

    It records a list of undo actions to be taken at a later time. This is
    used to implement contexts that allow temporary changes to an
    `autopad.Model` and to roll back a failed pH adjustment.

    """

    def __init__(self, **kwargs) -> None:
        """Initialize the class."""
        super().__init__(**kwargs)
        # this acts like a stack
        self._history = []

    def __call__(self, operation: Callable[[], Any]) -> None:
        """Add an undo operation to the history stack."""
        self._history.append(operation)

    def reset(self) -> None:
        """Trigger executions for all items in the stack in reverse order."""
        while self._history:
            entry = self._history.pop()
            entry()

    def size(self) -> int:
        """Calculate number of operations on the stack."""
        return len(self._history)


def get_context(obj: "Object") -> Optional[HistoryManager]:
    """Search for the innermost active context of `obj` or of its model.

    Returns
    -------
    HistoryManager or None
        HistoryManager instance, or None if no context manager is found.

    """
    # works for autopad.Model objects
    try:
        return obj._contexts[-1]
    except (AttributeError, IndexError):
        pass
    # works for metabolites and reactions
    try:
        return obj._model._contexts[-1]
    except (AttributeError, IndexError):
        pass
    return None


def set_reversibly(obj: "Object", attribute: str, value: Any) -> None:
    """Set `attribute` on `obj`, recording the old value in the active context."""
    context = get_context(obj)
    old_value = getattr(obj, attribute)
    if context and old_value != value:
        context(partial(setattr, obj, attribute, old_value))
    setattr(obj, attribute, value)


@contextmanager
def atomic(model: "Model") -> Iterator["Model"]:
    """Undo every change made to `model` inside the block if it raises.

    Changes that succeed are kept. If the model is itself used as a context
    they are reverted together when that context exits.

    """
    history = HistoryManager()
    model._contexts.append(history)
    try:
        yield model
    except Exception:
        model._contexts.remove(history)
        history.reset()
        raise
    model._contexts.remove(history)
    outer = get_context(model)
    if outer is not None:
        outer(history.reset)
