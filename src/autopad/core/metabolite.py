"""Define the Metabolite class."""

from copy import deepcopy
from typing import TYPE_CHECKING, FrozenSet, Optional

import numpy as np

from .formula import formula_to_vector, parse_composition
from .object import Object


if TYPE_CHECKING:
    from .model import Model


class Metabolite(Object):
    """Metabolite is a class for holding information regarding
    a metabolite in an autopad.Reaction object.

    Parameters
    ----------
    id : str
        the identifier to associate with the metabolite, carrying its
        compartment tag, e.g. "atp[c]" or "atp_c"
    formula : str
        Chemical formula (e.g. H2O)
    name : str
        A human readable name.
    charge : int
       The charge number of the metabolite
    compartment: str or None
       Compartment of the metabolite.
    """

    # noinspection PyShadowingBuiltins
    def __init__(
        self,
        id: Optional[str] = None,
        formula: Optional[str] = None,
        name: str = "",
        charge: Optional[int] = None,
        compartment: Optional[str] = None,
    ) -> None:
        super().__init__(id=id, name=name)
        self.formula = formula
        self.compartment = compartment
        self.charge = charge
        self._model = None
        # references to reactions that operate on this metabolite
        self._reaction = set()

    def _set_id_with_model(self, value: str) -> None:
        if value in self._model.metabolites:
            raise ValueError(
                f"The model already contains a metabolite with the id: {value}"
            )
        self._id = value
        self._model.metabolites._generate_index()

    @property
    def model(self) -> Optional["Model"]:
        """Return the model the metabolite belongs to, if any."""
        return self._model

    @property
    def reactions(self) -> FrozenSet:
        """Return a frozenset of the reactions using this metabolite."""
        return frozenset(self._reaction)

    @property
    def elements(self) -> Optional[dict]:
        """Dictionary of elements as keys and their count in the metabolite.

        When set, the `formula` property is updated accordingly.
        """
        return parse_composition(self.formula)

    @elements.setter
    def elements(self, elements_dict: dict) -> None:
        def stringify(element, number):
            return element if number == 1 else element + str(number)

        self.formula = "".join(
            stringify(e, n) for e, n in sorted(elements_dict.items())
        )

    @property
    def element_vector(self) -> np.ndarray:
        """Return the formula as a vector over `autopad.core.formula.ELEMENTS`."""
        return formula_to_vector(self.formula)

    @property
    def has_formula(self) -> bool:
        """Whether a non-empty formula is assigned."""
        return bool(self.formula)

    def __getstate__(self) -> dict:
        """Drop the reaction references to avoid recursion when serializing."""
        state = super().__getstate__()
        state["_reaction"] = set()
        return state

    def copy(self) -> "Metabolite":
        """Return a copy that belongs to no model and no reaction."""
        return deepcopy(self)
