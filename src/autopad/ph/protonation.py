"""Select the dominant protonation state of metabolites from their pKa."""

import logging
from typing import TYPE_CHECKING, Mapping, Sequence, Union

import numpy as np
import pandas as pd

from ..exceptions import DimensionMismatchError


if TYPE_CHECKING:
    from autopad import Model

    from .compartments import CompartmentAssignment


__all__ = (
    "sort_pka",
    "protonation_ordinal",
    "align_pka_table",
    "align_ph",
    "proton_deltas",
)


logger = logging.getLogger(__name__)


def sort_pka(pka: Sequence[float]) -> np.ndarray:
    """Sort pKa values descending with missing (NaN) entries last."""
    values = np.asarray(pka, dtype=float).ravel()
    defined = values[~np.isnan(values)]
    missing = np.full(values.size - defined.size, np.nan)
    return np.concatenate([np.sort(defined)[::-1], missing])


def protonation_ordinal(pka: Sequence[float], ph: float) -> int:
    """Count the protons removed from the fully protonated state at `ph`.

    The pKa values are scanned from the most acidic (highest) downward up to
    the first missing entry. The ordinal is the number of those pKa that the
    pH exceeds, so a pH above every defined pKa gives the number of defined
    entries and a row without entries gives 0.

    Parameters
    ----------
    pka : sequence of float
        The dissociation constants of one metabolite, NaN marking missing
        entries. Need not be sorted.
    ph : float
        The pH of the metabolite's compartment.

    Returns
    -------
    int
        The protonation ordinal.

    Examples
    --------
    >>> protonation_ordinal([12.3, 6.5, 4.0], 7.0)
    2

    """
    values = sort_pka(pka)
    missing = np.flatnonzero(np.isnan(values))
    if missing.size > 0:
        values = values[: missing[0]]
    return int(np.count_nonzero(ph > values))


def align_pka_table(
    model: "Model", pka: Union[pd.DataFrame, np.ndarray, Sequence[Sequence[float]]]
) -> np.ndarray:
    """Return the pKa table as a float array aligned with `model.metabolites`.

    A frame is reindexed by metabolite identifier, metabolites it does not
    list get an all-missing row. Arrays and nested sequences must already
    have one row per metabolite. Rows are sorted descending.

    Raises
    ------
    DimensionMismatchError
        If an array does not have one row per metabolite or a frame lists
        a metabolite more than once.

    """
    metabolite_ids = [met.id for met in model.metabolites]
    if isinstance(pka, pd.DataFrame):
        if not pka.index.is_unique:
            duplicated = sorted(set(pka.index[pka.index.duplicated()]))
            raise DimensionMismatchError(
                f"The pKa table lists metabolites more than once: {duplicated}."
            )
        absent = [met_id for met_id in metabolite_ids if met_id not in pka.index]
        if absent:
            logger.info(
                f"{len(absent)} metabolites are absent from the pKa table and "
                f"keep their protonation state."
            )
        table = pka.reindex(metabolite_ids).to_numpy(dtype=float)
    else:
        table = np.asarray(pka, dtype=float)
        if table.ndim == 1:
            table = table.reshape(-1, 1)
        if table.ndim != 2:
            raise DimensionMismatchError("The pKa table must be two-dimensional.")
        if table.shape[0] != len(metabolite_ids):
            raise DimensionMismatchError(
                f"The pKa table has {table.shape[0]} rows but the model has "
                f"{len(metabolite_ids)} metabolites."
            )
    if table.shape[1] == 0:
        return np.full((len(metabolite_ids), 1), np.nan)
    return np.array([sort_pka(row) for row in table]).reshape(table.shape)


def align_ph(
    ph: Union[Mapping[str, float], Sequence[float], pd.Series],
    compartments: Sequence[str],
    label: str = "pH",
) -> np.ndarray:
    """Return pH values aligned with the compartment vocabulary.

    Parameters
    ----------
    ph : mapping, pandas.Series or sequence
        Either compartment codes mapped to pH values, or values in the order
        of `compartments`.
    compartments : sequence of str
        The compartment vocabulary.
    label : str
        Name of the quantity used in error messages.

    Raises
    ------
    DimensionMismatchError
        If the values do not cover exactly the compartment vocabulary.

    """
    if isinstance(ph, (Mapping, pd.Series)):
        keys = set(ph.keys())
        if keys != set(compartments):
            raise DimensionMismatchError(
                f"The {label} values are given for compartments "
                f"{', '.join(sorted(map(str, keys)))} but the model has "
                f"{', '.join(compartments)}."
            )
        return np.array([float(ph[c]) for c in compartments])
    values = np.asarray(ph, dtype=float).ravel()
    if values.size != len(compartments):
        raise DimensionMismatchError(
            f"{values.size} {label} values were given for "
            f"{len(compartments)} compartments."
        )
    return values


def proton_deltas(
    model: "Model",
    assignment: "CompartmentAssignment",
    pka_table: np.ndarray,
    reference_ph: np.ndarray,
    target_ph: np.ndarray,
) -> pd.Series:
    """Return the proton delta of every metabolite.

    The delta is the protonation ordinal at the target pH minus the one at
    the reference pH, both taken in the metabolite's compartment.

    Parameters
    ----------
    model : autopad.Model
        The model whose metabolites are inspected.
    assignment : CompartmentAssignment
        The resolved compartments.
    pka_table : numpy.ndarray
        The aligned pKa table, see `align_pka_table`.
    reference_ph, target_ph : numpy.ndarray
        The pH values aligned with `assignment.compartments`.

    Returns
    -------
    pandas.Series
        Integer deltas indexed by metabolite identifier.

    """
    deltas = np.zeros(len(model.metabolites), dtype=np.int64)
    for i, met in enumerate(model.metabolites):
        compartment = assignment.compartment_index(met.id)
        deltas[i] = protonation_ordinal(
            pka_table[i], target_ph[compartment]
        ) - protonation_ordinal(pka_table[i], reference_ph[compartment])
    return pd.Series(deltas, index=[met.id for met in model.metabolites], name="delta")
