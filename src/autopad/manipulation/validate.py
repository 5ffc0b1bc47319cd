"""Provide functions for model component validations."""

from typing import TYPE_CHECKING, Dict

import numpy as np
import pandas as pd

from ..core.formula import ELEMENTS
from ..util.array import create_element_matrix, create_stoichiometric_matrix


if TYPE_CHECKING:
    from autopad import Model, Reaction


# Set of mass unbalanced SBO terms
_NOT_MASS_BALANCED_TERMS = {
    "SBO:0000627",  # EXCHANGE
    "SBO:0000628",  # DEMAND
    "SBO:0000629",  # BIOMASS
    "SBO:0000631",  # PSEUDOREACTION
    "SBO:0000632",  # SINK
}


def check_mass_balance(model: "Model") -> Dict["Reaction", Dict[str, float]]:
    """Check mass balance for reactions of `model` and return unbalanced ones.

    Reactions annotated with an SBO term for exchange, demand, biomass, sink
    or pseudo reactions are skipped. The amounts are the non-zero entries of
    `mass_charge_imbalance`.

    Parameters
    ----------
    model: autopad.Model
        The model to perform check on.

    Returns
    -------
    dict of {autopad.Reaction: dict of {str: float}}
        Returns an empty dict if all components are balanced.

    """
    imbalance = mass_charge_imbalance(model)
    unbalanced = {}
    for reaction in model.reactions:
        if reaction.annotation.get("sbo") in _NOT_MASS_BALANCED_TERMS:
            continue
        balance = imbalance.loc[reaction.id]
        balance = balance[balance != 0]
        if not balance.empty:
            unbalanced[reaction] = balance.to_dict()
    return unbalanced


def mass_charge_imbalance(model: "Model") -> pd.DataFrame:
    """Return the net element and charge imbalance of every reaction.

    The imbalance is the amount on the product side minus the amount on the
    substrate side, i.e. the transposed stoichiometric matrix applied to the
    element vectors and charges of the metabolites. Metabolites without a
    representable formula contribute nothing to the element columns and
    metabolites without a charge nothing to "charge".

    Parameters
    ----------
    model: autopad.Model
        The model to perform check on.

    Returns
    -------
    pandas.DataFrame
        Indexed by reaction identifier with one column per symbol in
        `autopad.core.formula.ELEMENTS` followed by "charge".

    """
    columns = list(ELEMENTS) + ["charge"]
    reaction_ids = [rxn.id for rxn in model.reactions]
    if len(model.reactions) == 0 or len(model.metabolites) == 0:
        return pd.DataFrame(
            np.zeros((len(reaction_ids), len(columns))),
            index=reaction_ids,
            columns=columns,
        )
    stoichiometry = create_stoichiometric_matrix(model, array_type="lil").tocsr()
    composition = np.column_stack(
        [
            create_element_matrix(model).to_numpy(dtype=float),
            [0.0 if met.charge is None else met.charge for met in model.metabolites],
        ]
    )
    return pd.DataFrame(
        stoichiometry.T.dot(composition), index=reaction_ids, columns=columns
    )
