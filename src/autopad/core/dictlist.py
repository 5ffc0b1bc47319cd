"""Define the DictList class."""

from typing import Callable, Iterable, Union

from .object import Object


class DictList(list):
    """
    Define a combined dict and list.

    This object behaves like a list, but looks up its members by id in
    O(1) through an id-to-position index kept in sync with the list.

    """

    def __init__(self, *args):
        """Instantiate a combined dict and list.

        Parameters
        ----------
        args : iterable
            iterable as single argument to create new DictList from

        """
        if len(args) > 1:
            raise TypeError(f"takes at most 1 argument ({len(args):d} given)")
        super().__init__()
        self._dict = {}
        if len(args) == 1:
            self.extend(args[0])

    # noinspection PyShadowingBuiltins
    def has_id(self, id: str) -> bool:
        """Check if id is in DictList."""
        return id in self._dict

    # noinspection PyShadowingBuiltins
    def _check(self, id: str) -> None:
        if id in self._dict:
            raise ValueError(f"id {str(id)} is already present in list")

    def _generate_index(self) -> None:
        """Rebuild the _dict index."""
        self._dict = {v.id: k for k, v in enumerate(self)}

    # noinspection PyShadowingBuiltins
    def get_by_id(self, id: str) -> Object:
        """Return the element with a matching id."""
        return list.__getitem__(self, self._dict[id])

    def list_attr(self, attribute: str) -> list:
        """Return a list of the given attribute for every object."""
        return [getattr(i, attribute) for i in self]

    def query(self, search_function: Callable[[Object], bool]) -> "DictList":
        """Return a new DictList of the members matching `search_function`.

        Examples
        --------
        >>> model.reactions.query(lambda x: x.boundary)

        """
        return DictList(x for x in self if search_function(x))

    def append(self, entity: Object) -> None:
        """Append object to end."""
        self._check(entity.id)
        self._dict[entity.id] = len(self)
        super().append(entity)

    def extend(self, iterable: Iterable[Object]) -> None:
        """Extend list by appending elements from the iterable.

        Raises
        ------
        ValueError
            If an id is already present or repeated within `iterable`.

        """
        for entity in iterable:
            self.append(entity)

    def __iadd__(self, other: Iterable[Object]) -> "DictList":
        self.extend(other)
        return self

    def remove(self, x: Union[str, Object]) -> None:
        """Remove a member by object or id and reindex."""
        position = self.index(x)
        super().__delitem__(position)
        self._generate_index()

    def index(self, id: Union[str, Object], *args) -> int:
        """Determine the position in the list.

        Parameters
        ----------
        id : string or Object
            The id or the object itself.

        """
        try:
            return self._dict[id]
        except KeyError:
            pass
        try:
            i = self._dict[id.id]
        except (AttributeError, KeyError):
            raise ValueError(f"{str(id)} not found")
        if list.__getitem__(self, i) is not id:
            raise ValueError(
                f"Another object with the identical id ({id.id}) found"
            )
        return i

    def __contains__(self, entity: Union[str, Object]) -> bool:
        """Check whether an object or an id is a member."""
        the_id = entity.id if hasattr(entity, "id") else entity
        return the_id in self._dict

    def __getstate__(self) -> dict:
        return {"_dict": self._dict}

    def __setstate__(self, state: dict) -> None:
        self._generate_index()

    def __reduce__(self):
        return self.__class__, (), self.__getstate__(), iter(self)

    def __getattr__(self, attr: str) -> Object:
        """Allow `model.metabolites.atp_c` style access."""
        if attr.startswith("_"):
            raise AttributeError(attr)
        try:
            return DictList.get_by_id(self, attr)
        except KeyError:
            raise AttributeError(f"DictList has no attribute or entry {attr}")
