"""Helper functions for array operations."""

from typing import TYPE_CHECKING, Optional, Union

import numpy as np
import pandas as pd
from scipy.sparse import dok_matrix, lil_matrix

from ..core.formula import ELEMENTS


# Used to avoid cyclic reference and enable third-party static type checkers to work
if TYPE_CHECKING:
    from autopad import Model


def create_stoichiometric_matrix(
    model: "Model", array_type: str = "dense", dtype: Optional[np.dtype] = None
) -> Union[np.ndarray, dok_matrix, lil_matrix, pd.DataFrame]:
    """Return a stoichiometric array representation of the given model.

    The the columns represent the reactions and rows represent
    metabolites. S[i,j] therefore contains the quantity of metabolite `i`
    produced (negative for consumed) by reaction `j`.

    Parameters
    ----------
    model : autopad.Model
        The model to construct the matrix for.
    array_type : {"dense", "dok", "lil", "DataFrame"}
        The type of array to construct. "dense" will return a standard
        numpy.ndarray. "dok", or "lil" will construct a sparse array using
        scipy of the corresponding type. "DataFrame" will give a
        pandas.DataFrame with metabolite as indices and reaction as
        columns.
    dtype : numpy.dtype, optional
        The desired numpy data type for the array (default numpy.float64).

    Returns
    -------
    matrix of class `dtype`
        The stoichiometric matrix for the given model.

    """
    if dtype is None:
        dtype = np.float64

    array_constructor = {
        "dense": np.zeros,
        "dok": dok_matrix,
        "lil": lil_matrix,
        "DataFrame": np.zeros,
    }
    if array_type not in array_constructor:
        raise ValueError(f"Unknown array type '{array_type}'.")

    n_metabolites = len(model.metabolites)
    n_reactions = len(model.reactions)
    array = array_constructor[array_type]((n_metabolites, n_reactions), dtype=dtype)

    m_ind = model.metabolites.index
    r_ind = model.reactions.index

    for reaction in model.reactions:
        for metabolite, stoich in reaction.metabolites.items():
            array[m_ind(metabolite), r_ind(reaction)] = stoich

    if array_type == "DataFrame":
        metabolite_ids = [met.id for met in model.metabolites]
        reaction_ids = [rxn.id for rxn in model.reactions]
        return pd.DataFrame(array, index=metabolite_ids, columns=reaction_ids)

    else:
        return array


def create_element_matrix(model: "Model") -> pd.DataFrame:
    """Return the element vectors of all metabolites as a frame.

    Rows are metabolite identifiers in model order, columns the symbols of
    `autopad.core.formula.ELEMENTS`. Metabolites whose formula cannot be
    represented have an all-zero row.

    """
    array = np.zeros((len(model.metabolites), len(ELEMENTS)), dtype=np.int64)
    for i, met in enumerate(model.metabolites):
        array[i, :] = met.element_vector
    return pd.DataFrame(
        array, index=[met.id for met in model.metabolites], columns=list(ELEMENTS)
    )
