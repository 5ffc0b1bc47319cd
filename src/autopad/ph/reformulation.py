"""Rewrite metabolite formulae and charges for a change in protonation."""

import logging
from typing import TYPE_CHECKING, Iterable, List, NamedTuple, Optional, Tuple

import numpy as np
import pandas as pd

from ..core.formula import HYDROGEN, formula_to_vector, vector_to_formula
from ..exceptions import NegativeAtomCountError
from ..util.context import set_reversibly


if TYPE_CHECKING:
    from autopad import Model


__all__ = (
    "FormulaEdit",
    "adjust_vector",
    "reformulate",
    "compute_formula_edits",
    "apply_formula_edits",
)


logger = logging.getLogger(__name__)


class FormulaEdit(NamedTuple):
    """The new formula and charge of one metabolite.

    `fallback` is set when the formula could not be rebuilt from its element
    vector and the original string was kept.
    """

    metabolite_id: str
    formula: Optional[str]
    charge: Optional[int]
    delta: int
    fallback: bool


def adjust_vector(
    vector: np.ndarray, charge: Optional[int], delta: int
) -> Tuple[np.ndarray, Optional[int]]:
    """Shift the hydrogen count and the charge by `delta`.

    Parameters
    ----------
    vector : numpy.ndarray
        An element vector, left untouched.
    charge : int or None
        The current charge. A missing charge stays missing.
    delta : int
        The proton delta.

    Returns
    -------
    tuple of (numpy.ndarray, int or None)
        The adjusted element vector and charge.

    Raises
    ------
    NegativeAtomCountError
        If the hydrogen count would become negative.

    """
    adjusted = np.array(vector, dtype=np.int64)
    adjusted[HYDROGEN] += delta
    if adjusted[HYDROGEN] < 0:
        raise NegativeAtomCountError(
            f"Removing {-delta} protons leaves {adjusted[HYDROGEN]} hydrogen atoms."
        )
    return adjusted, None if charge is None else charge + delta


def reformulate(
    metabolite_id: str, formula: Optional[str], charge: Optional[int], delta: int
) -> FormulaEdit:
    """Compute the formula edit of one metabolite.

    Formulas that have no element vector representation (missing, or using
    an element outside the vocabulary) keep their string, only the charge is
    shifted. If the adjusted vector has no positive count left the original
    formula is kept as well and the edit is marked as a fallback.

    """
    vector = formula_to_vector(formula)
    if not vector.any():
        return FormulaEdit(
            metabolite_id,
            formula,
            None if charge is None else charge + delta,
            delta,
            bool(formula),
        )
    try:
        adjusted, new_charge = adjust_vector(vector, charge, delta)
    except NegativeAtomCountError as error:
        raise NegativeAtomCountError(
            f"Metabolite '{metabolite_id}' ({formula}): {error}"
        ) from error
    new_formula = vector_to_formula(adjusted)
    if not new_formula:
        return FormulaEdit(metabolite_id, formula, new_charge, delta, True)
    return FormulaEdit(metabolite_id, new_formula, new_charge, delta, False)


def compute_formula_edits(model: "Model", deltas: pd.Series) -> List[FormulaEdit]:
    """Return the formula edits for all metabolites with a non-zero delta.

    Nothing is modified, so a `NegativeAtomCountError` leaves the model
    intact.

    """
    edits = []
    for met in model.metabolites:
        delta = int(deltas.get(met.id, 0))
        if delta != 0:
            edits.append(reformulate(met.id, met.formula, met.charge, delta))
    return edits


def apply_formula_edits(model: "Model", edits: Iterable[FormulaEdit]) -> None:
    """Write formula edits to the metabolites of `model`.

    The change is reverted upon exit when using the model as a context.

    """
    for edit in edits:
        met = model.metabolites.get_by_id(edit.metabolite_id)
        if edit.fallback:
            logger.warning(
                f"The formula '{met.formula}' of metabolite '{met.id}' could not "
                f"be rebuilt and was kept unchanged."
            )
        set_reversibly(met, "formula", edit.formula)
        set_reversibly(met, "charge", edit.charge)
