"""Adjust the protonation state of a model to new compartment pH values."""

import logging
from typing import TYPE_CHECKING, Callable, Mapping, Optional, Sequence, Union

import numpy as np
import pandas as pd

from ..core.formula import ELEMENTS
from ..exceptions import DimensionMismatchError
from ..manipulation.validate import mass_charge_imbalance
from ..util.context import atomic
from .balance import apply_stoichiometry_edits, balance_edits, charge_imbalanced
from .compartments import resolve_compartments
from .protonation import align_ph, align_pka_table, proton_deltas
from .protons import apply_proton_pool_plan, locate_proton_pools
from .reformulation import apply_formula_edits, compute_formula_edits
from .report import AdjustmentReport
from .topology import classify_reactions, complex_imbalance_flags


if TYPE_CHECKING:
    from autopad import Model


__all__ = ("adjust_ph",)


logger = logging.getLogger(__name__)


PHValues = Union[Mapping[str, float], Sequence[float], pd.Series]


def _align_direction(
    model: "Model", direction: Union[Sequence[bool], pd.Series, None]
) -> pd.Series:
    """Return the direction overrides as a boolean series by reaction id."""
    reaction_ids = [rxn.id for rxn in model.reactions]
    if direction is None:
        return pd.Series(False, index=reaction_ids, dtype=bool)
    if isinstance(direction, pd.Series):
        unknown = set(direction.index).difference(reaction_ids)
        if unknown:
            raise DimensionMismatchError(
                f"Direction overrides name unknown reactions: "
                f"{', '.join(sorted(map(str, unknown)))}."
            )
        values = direction.reindex(reaction_ids, fill_value=False)
    else:
        values = pd.Series(list(direction), dtype=object)
        if len(values) != len(reaction_ids):
            raise DimensionMismatchError(
                f"{len(values)} direction overrides were given for "
                f"{len(reaction_ids)} reactions."
            )
        values.index = reaction_ids
    if not values.map(lambda value: value in (0, 1)).all():
        raise DimensionMismatchError("Direction overrides can only contain 0s and 1s.")
    return values.astype(bool)


def _align_imbalance(
    model: "Model", imbalance: Union[pd.DataFrame, np.ndarray]
) -> pd.DataFrame:
    """Return the balance checker output as a frame by reaction id."""
    reaction_ids = [rxn.id for rxn in model.reactions]
    if not isinstance(imbalance, pd.DataFrame):
        array = np.asarray(imbalance, dtype=float)
        columns = list(ELEMENTS) + ["charge"]
        if array.shape != (len(reaction_ids), len(columns)):
            raise DimensionMismatchError(
                f"The imbalance matrix has shape {array.shape}, expected "
                f"{(len(reaction_ids), len(columns))}."
            )
        return pd.DataFrame(array, index=reaction_ids, columns=columns)
    if "H" not in imbalance.columns:
        raise DimensionMismatchError("The imbalance table has no 'H' column.")
    missing = set(reaction_ids).difference(imbalance.index)
    if missing:
        raise DimensionMismatchError(
            f"The imbalance table lacks {len(missing)} of the model's reactions."
        )
    return imbalance.loc[reaction_ids]


def adjust_ph(
    model: "Model",
    target_ph: PHValues,
    reference_ph: PHValues,
    pka: Union[pd.DataFrame, np.ndarray, Sequence[Sequence[float]]],
    direction: Union[Sequence[bool], pd.Series, None] = None,
    balance_checker: Optional[Callable[["Model"], pd.DataFrame]] = None,
    processes: Optional[int] = None,
) -> AdjustmentReport:
    """Set every compartment of `model` to a new pH and rebalance protons.

    Each metabolite gets the formula and charge of its dominant protonation
    state at the target pH of its compartment, judged from its pKa values
    relative to the reference pH. Reactions whose hydrogen balance breaks
    in the process are rebalanced with the free proton of the compartment
    chosen by their topology. Exchange reactions are left alone and
    reactions with missing formulae or imbalances in other elements are
    reported as unresolved. Reactions that end up out of charge
    balance, e.g. because a formula could not be rewritten, are reported
    for the caller to fix.

    The model is modified in place. Input errors are raised before any
    modification; if applying the changes fails the model is restored. When
    the model is used as a context the whole adjustment is reverted on exit.

    Parameters
    ----------
    model : autopad.Model
        The model to adjust. Metabolite identifiers must carry their
        compartment, as in "atp[c]" or "atp_c".
    target_ph : mapping, pandas.Series or sequence of float
        The pH to set, by compartment code or in the order of the
        compartment vocabulary.
    reference_ph : mapping, pandas.Series or sequence of float
        The pH the current formulae and charges correspond to.
    pka : pandas.DataFrame, numpy.ndarray or nested sequence
        The pKa values of every metabolite, NaN where missing. A frame is
        matched by metabolite identifier, an array must have one row per
        metabolite, see `autopad.ph.build_pka_table`.
    direction : sequence of bool or pandas.Series, optional
        Reactions whose transport direction is opposite to the one written
        in the model, aligned with the reactions or indexed by reaction
        identifier (default none).
    balance_checker : callable, optional
        Function computing the per-reaction element and charge imbalance of
        a model (default `autopad.manipulation.mass_charge_imbalance`).
    processes : int, optional
        The number of processes for classifying reactions (default
        `Configuration().processes`).

    Returns
    -------
    AdjustmentReport
        What was changed and which reactions remain unresolved.

    Raises
    ------
    FormatError
        If a metabolite identifier has no compartment suffix.
    CompartmentMismatchError
        If the resolved compartments differ from the declared ones.
    DimensionMismatchError
        If pH, pKa, direction or imbalance input does not match the model.
    NegativeAtomCountError
        If a metabolite would lose more hydrogens than it has.
    AmbiguousProtonError
        If a compartment has more than one proton metabolite.

    """
    if balance_checker is None:
        balance_checker = mass_charge_imbalance

    assignment = resolve_compartments(model)
    compartments = assignment.compartments
    target = align_ph(target_ph, compartments, label="target pH")
    reference = align_ph(reference_ph, compartments, label="reference pH")
    pka_table = align_pka_table(model, pka)
    reverse = _align_direction(model, direction)

    deltas = proton_deltas(model, assignment, pka_table, reference, target)
    formula_edits = compute_formula_edits(model, deltas)
    plan = locate_proton_pools(model, assignment)
    logger.info(
        f"{len(formula_edits)} metabolites change their protonation state, "
        f"{len(plan.additions)} protons need to be added."
    )

    with atomic(model):
        if assignment.adopted:
            model.compartments = {c: "" for c in compartments}
        apply_formula_edits(model, formula_edits)
        synthesized = apply_proton_pool_plan(model, plan)

        imbalance = _align_imbalance(model, balance_checker(model))
        classifications = classify_reactions(
            model,
            assignment,
            target,
            complex_imbalance=complex_imbalance_flags(imbalance),
            reverse=reverse,
            processes=processes,
        )
        stoichiometry_edits, unresolved = balance_edits(
            classifications, imbalance, assignment, plan
        )
        apply_stoichiometry_edits(model, stoichiometry_edits)

        final = _align_imbalance(model, balance_checker(model))
        off_charge = charge_imbalanced(classifications, final)

    logger.info(
        f"{len(classifications) - len(unresolved)} out of {len(classifications)} "
        f"reactions were analyzed and balanced if needed."
    )
    return AdjustmentReport(
        compartments,
        reference,
        target,
        deltas,
        formula_edits,
        synthesized,
        classifications,
        stoichiometry_edits,
        unresolved,
        adopted_compartments=assignment.adopted,
        charge_imbalanced=off_charge,
    )
