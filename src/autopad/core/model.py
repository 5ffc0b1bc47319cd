"""Define the Model class."""

import logging
from copy import deepcopy
from functools import partial
from typing import Dict, Iterable, List, Optional, Union

from ..util.context import HistoryManager, get_context
from .dictlist import DictList
from .metabolite import Metabolite
from .object import Object
from .reaction import Reaction


logger = logging.getLogger(__name__)


class Model(Object):
    """Class representation for a metabolic network model.

    Parameters
    ----------
    id_or_model : str or Model
        String to use as model id, or actual model to base new model one.
        If string, it is used as input to load a model from. If the model is
        a Model object, it is copied into this one.
    name : str
        Human readable string to be model description (default None).

    Attributes
    ----------
    reactions : DictList
        A DictList where the key is the reaction identifier and the value a
        Reaction
    metabolites : DictList
        A DictList where the key is the metabolite identifier and the value a
        Metabolite
    compartments : dict
        The declared compartment vocabulary, compartment code to name, in
        declaration order. May be empty.

    """

    def __init__(
        self, id_or_model: Union[str, "Model", None] = None, name: Optional[str] = None
    ) -> None:
        if isinstance(id_or_model, Model):
            super().__init__(id_or_model.id, name=name or id_or_model.name)
            self.__setstate__(id_or_model.copy().__dict__)
        else:
            super().__init__(id_or_model, name=name or "")
            self.reactions = DictList()
            self.metabolites = DictList()
            self._compartments = {}
            self._contexts = []

    def __setstate__(self, state: Dict) -> None:
        """Make sure all objects in the model point to it."""
        self.__dict__.update(state)
        for attr in ("reactions", "metabolites"):
            for x in getattr(self, attr):
                x._model = self
        for reaction in self.reactions:
            for metabolite in reaction._metabolites:
                metabolite._reaction.add(reaction)
        self._contexts = []

    def __getstate__(self) -> Dict:
        """Get state for serialization, dropping any active contexts."""
        odict = self.__dict__.copy()
        odict["_contexts"] = []
        return odict

    @property
    def compartments(self) -> Dict[str, str]:
        """Return the declared compartments, code to name."""
        return self._compartments.copy()

    @compartments.setter
    def compartments(self, value: Dict[str, str]) -> None:
        """Merge compartment codes and names into the declared vocabulary.

        Parameters
        ----------
        value : dict
            Dictionary mapping compartments codes to their names.

        """
        context = get_context(self)
        if context:
            context(partial(setattr, self, "_compartments", self._compartments.copy()))
        self._compartments.update(value)

    def copy(self) -> "Model":
        """Return an independent copy of the model."""
        return deepcopy(self)

    def add_metabolites(
        self, metabolite_list: Union[Iterable[Metabolite], Metabolite]
    ) -> None:
        """Add new metabolites to a model.

        Metabolites whose id is already present are ignored. The change is
        reverted upon exit when using the model as a context.

        """
        if not hasattr(metabolite_list, "__iter__"):
            metabolite_list = [metabolite_list]
        metabolite_list = [x for x in metabolite_list if x.id not in self.metabolites]
        if len(metabolite_list) == 0:
            return

        bad_ids = [
            m for m in metabolite_list if not isinstance(m.id, str) or len(m.id) < 1
        ]
        if len(bad_ids) != 0:
            raise ValueError(f"invalid identifiers in {repr(bad_ids)}")

        for x in metabolite_list:
            x._model = self
        self.metabolites += metabolite_list

        context = get_context(self)
        if context:
            context(partial(self._remove_unused_metabolites, metabolite_list))

    def _remove_unused_metabolites(self, metabolite_list: List[Metabolite]) -> None:
        for met in metabolite_list:
            if met.id in self.metabolites and not met._reaction:
                self.metabolites.remove(met)
                met._model = None

    def add_reactions(self, reaction_list: Iterable[Reaction]) -> None:
        """Add reactions, and the metabolites they use, to the model.

        Reactions whose id is already present are skipped with a warning.

        """
        pruned = []
        for reaction in reaction_list:
            if reaction.id in self.reactions:
                logger.warning(
                    f"Ignoring reaction '{reaction.id}' since it already exists."
                )
                continue
            pruned.append(reaction)

        for reaction in pruned:
            reaction._model = self
            for metabolite in list(reaction._metabolites):
                if metabolite.id not in self.metabolites:
                    self.add_metabolites(metabolite)
                else:
                    # reuse the model's instance of the metabolite
                    stored = self.metabolites.get_by_id(metabolite.id)
                    if stored is not metabolite:
                        coefficient = reaction._metabolites.pop(metabolite)
                        metabolite._reaction.discard(reaction)
                        reaction._metabolites[stored] = coefficient
                        stored._reaction.add(reaction)
        self.reactions += pruned

    def __enter__(self) -> "Model":
        """Record future changes to the model.

        Record all future changes to the model, undoing them when a call to
        __exit__ is received. Creates a new context and adds it to the stack.

        """
        try:
            self._contexts.append(HistoryManager())
        except AttributeError:
            self._contexts = [HistoryManager()]
        return self

    def __exit__(self, type, value, traceback) -> None:
        """Pop the top context manager and trigger the undo functions."""
        context = self._contexts.pop()
        context.reset()

    def __repr__(self) -> str:
        return (
            f"<{self.__class__.__name__} {self.id} at {id(self):#x} with "
            f"{len(self.metabolites)} metabolites and {len(self.reactions)} reactions>"
        )
