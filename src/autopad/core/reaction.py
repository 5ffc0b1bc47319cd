"""Define the Reaction class."""

from copy import deepcopy
from functools import partial
from typing import TYPE_CHECKING, Dict, List, Optional, Set, Union

import numpy as np

from ..util.context import get_context
from .formula import ELEMENTS
from .metabolite import Metabolite
from .object import Object


if TYPE_CHECKING:
    from .model import Model


class Reaction(Object):
    """Reaction is a class for holding information regarding a biochemical
    reaction in an autopad.Model object.

    Reactions are by default reversible; the signs of the coefficients only
    fix which metabolites are substrates (negative) and which are products
    (positive).

    Parameters
    ----------
    id : str
        The identifier to associate with this reaction.
    name : str
        A human readable name for the reaction.
    """

    # noinspection PyShadowingBuiltins
    def __init__(self, id: Optional[str] = None, name: str = "") -> None:
        super().__init__(id=id, name=name)
        self._model = None
        # A dictionary of metabolites and their stoichiometric coefficients
        self._metabolites = {}

    def _set_id_with_model(self, value: str) -> None:
        if value in self._model.reactions:
            raise ValueError(
                f"The model already contains a reaction with the id: {value}"
            )
        self._id = value
        self._model.reactions._generate_index()

    @property
    def model(self) -> Optional["Model"]:
        """Return the model the reaction is a part of, if any."""
        return self._model

    @property
    def metabolites(self) -> Dict[Metabolite, float]:
        """Get a copy of the metabolite to coefficient mapping.

        Positive coefficient means the reaction produces this metabolite,
        while negative coefficient means the reaction consumes it.
        """
        return self._metabolites.copy()

    @property
    def reactants(self) -> List[Metabolite]:
        """Return the metabolites consumed (coefficient < 0) by the reaction."""
        return [k for k, v in self._metabolites.items() if v < 0]

    @property
    def products(self) -> List[Metabolite]:
        """Return the metabolites produced (coefficient > 0) by the reaction."""
        return [k for k, v in self._metabolites.items() if v > 0]

    @property
    def boundary(self) -> bool:
        """Whether the reaction has metabolites on only one side."""
        return not (self.reactants and self.products)

    @property
    def compartments(self) -> Set[str]:
        """Return the set of compartments the metabolites are in."""
        return {
            met.compartment for met in self._metabolites if met.compartment is not None
        }

    def get_coefficient(self, metabolite_id: Union[str, Metabolite]) -> float:
        """Return the stoichiometric coefficient of a metabolite.

        Parameters
        ----------
        metabolite_id : str or autopad.Metabolite

        """
        if isinstance(metabolite_id, Metabolite):
            return self._metabolites[metabolite_id]

        _id_to_metabolites = {m.id: m for m in self._metabolites}
        return self._metabolites[_id_to_metabolites[metabolite_id]]

    def add_metabolites(
        self,
        metabolites_to_add: Dict[Union[Metabolite, str], float],
        combine: bool = True,
        reversibly: bool = True,
    ) -> None:
        """Add metabolites and stoichiometric coefficients to the reaction.

        If the final coefficient for a metabolite is 0 then it is removed
        from the reaction.

        The change is reverted upon exit when using the model as a context.

        Parameters
        ----------
        metabolites_to_add : dict
            Dictionary with metabolite objects or metabolite identifiers as
            keys and coefficients as values. If keys are strings the reaction
            must already be part of a model that contains those metabolites.
        combine : bool
            True causes the coefficients to be added to existing ones, False
            causes them to be replaced (default True).
        reversibly : bool
            Whether to add the change to the context to make the change
            reversibly or not (primarily intended for internal use).

        Raises
        ------
        KeyError
            If the metabolite string id is not in the model.
        ValueError
            If the metabolite key is a string and the reaction has no model.

        """
        old_coefficients = {m.id: c for m, c in self._metabolites.items()}
        new_metabolites = []
        _id_to_metabolites = {x.id: x for x in self._metabolites}

        for metabolite, coefficient in metabolites_to_add.items():
            met_id = str(metabolite)
            if met_id in _id_to_metabolites:
                reaction_metabolite = _id_to_metabolites[met_id]
                if combine:
                    self._metabolites[reaction_metabolite] += coefficient
                else:
                    self._metabolites[reaction_metabolite] = coefficient
                continue
            if self._model is not None:
                try:
                    metabolite = self._model.metabolites.get_by_id(met_id)
                except KeyError as e:
                    if isinstance(metabolite, Metabolite):
                        new_metabolites.append(metabolite)
                    else:
                        raise e
            elif isinstance(metabolite, str):
                raise ValueError(
                    f"Reaction '{self.id}' does not belong to a model. "
                    f"Either add the reaction to a model or use Metabolite objects "
                    f"instead of strings as keys."
                )
            self._metabolites[metabolite] = coefficient
            _id_to_metabolites[met_id] = metabolite
            # make the metabolite aware that it is involved in this reaction
            metabolite._reaction.add(self)

        if self._model is not None and new_metabolites:
            self._model.add_metabolites(new_metabolites)

        for metabolite, the_coefficient in list(self._metabolites.items()):
            if the_coefficient == 0:
                metabolite._reaction.discard(self)
                self._metabolites.pop(metabolite)

        context = get_context(self)
        if context and reversibly:
            if combine:
                context(
                    partial(
                        self.add_metabolites,
                        {str(k): -v for k, v in metabolites_to_add.items()},
                        combine=True,
                        reversibly=False,
                    )
                )
            else:
                mets_to_reset = {
                    str(key): old_coefficients.get(str(key), 0)
                    for key in metabolites_to_add
                }
                context(
                    partial(
                        self.add_metabolites,
                        mets_to_reset,
                        combine=False,
                        reversibly=False,
                    )
                )

    def check_mass_balance(self) -> Dict[str, float]:
        """Compute mass and charge balance for the reaction.

        Metabolites are counted by their element vector, so a formula that
        cannot be represented over `autopad.core.formula.ELEMENTS` contributes
        no elements, and a missing charge contributes no charge.

        Returns
        -------
        dict
            a dict of {element: amount} for unbalanced elements.
            "charge" is treated as an element in this dict.
            This should be empty for balanced reactions.

        """
        columns = list(ELEMENTS) + ["charge"]
        balance = np.zeros(len(columns))
        for metabolite, coefficient in self._metabolites.items():
            balance[:-1] += coefficient * metabolite.element_vector
            if metabolite.charge is not None:
                balance[-1] += coefficient * metabolite.charge
        return {k: float(v) for k, v in zip(columns, balance) if v != 0}

    def build_reaction_string(self) -> str:
        """Return a human readable equation using metabolite ids."""

        def format_side(metabolites):
            return " + ".join(
                met.id if abs(coef) == 1 else f"{abs(coef):g} {met.id}"
                for met, coef in metabolites
            )

        substrates = [(m, c) for m, c in self._metabolites.items() if c < 0]
        products = [(m, c) for m, c in self._metabolites.items() if c > 0]
        return f"{format_side(substrates)} --> {format_side(products)}"

    def copy(self) -> "Reaction":
        """Return a copy that belongs to no model."""
        return deepcopy(self)

    def __str__(self) -> str:
        return f"{self.id}: {self.build_reaction_string()}"
