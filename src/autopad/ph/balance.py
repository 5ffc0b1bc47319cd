"""Restore the hydrogen balance of classified reactions."""

import logging
from typing import (
    TYPE_CHECKING,
    Iterable,
    List,
    NamedTuple,
    Optional,
    Sequence,
    Tuple,
)

import pandas as pd

from ..core.configuration import Configuration
from .topology import Classification, Topology


if TYPE_CHECKING:
    from autopad import Model

    from .compartments import CompartmentAssignment
    from .protons import ProtonPoolPlan


__all__ = (
    "StoichiometryEdit",
    "balance_reaction",
    "balance_edits",
    "apply_stoichiometry_edits",
    "charge_imbalanced",
)


logger = logging.getLogger(__name__)

configuration = Configuration()


class StoichiometryEdit(NamedTuple):
    """A change of the coefficient of one metabolite in one reaction."""

    reaction_id: str
    metabolite_id: str
    change: float


def balance_reaction(
    classification: Classification,
    hydrogen_imbalance: float,
    assignment: "CompartmentAssignment",
    plan: "ProtonPoolPlan",
) -> List[StoichiometryEdit]:
    """Return the edit that cancels the hydrogen imbalance of one reaction.

    The imbalance is subtracted from the coefficient of the proton of the
    classified compartment. Reactions without a compartment and balanced
    reactions need no edit.

    """
    if classification.compartment is None or hydrogen_imbalance == 0:
        return []
    compartment = assignment.compartments[classification.compartment]
    return [
        StoichiometryEdit(
            classification.reaction_id, plan.pools[compartment], -hydrogen_imbalance
        )
    ]


def balance_edits(
    classifications: Sequence[Classification],
    imbalance: pd.DataFrame,
    assignment: "CompartmentAssignment",
    plan: "ProtonPoolPlan",
) -> Tuple[List[StoichiometryEdit], List[str]]:
    """Return the stoichiometry edits and the unresolved reaction identifiers.

    Parameters
    ----------
    classifications : sequence of Classification
        The classification of every reaction.
    imbalance : pandas.DataFrame
        Per-reaction imbalances with an "H" column.
    assignment : CompartmentAssignment
        The resolved compartments.
    plan : ProtonPoolPlan
        The proton metabolite of every compartment.

    Returns
    -------
    tuple of (list of StoichiometryEdit, list of str)
        The edits, and the reactions that could not be analyzed. Exchange
        reactions are in neither.

    """
    edits = []
    unresolved = []
    for classification in classifications:
        if classification.topology is Topology.UNANALYZABLE:
            logger.warning(
                f"Reaction {classification.reaction_id} was not analyzed as not all "
                f"of its metabolites possess a chemical formula or it is imbalanced "
                f"in other elements than hydrogen."
            )
            unresolved.append(classification.reaction_id)
            continue
        edits.extend(
            balance_reaction(
                classification,
                float(imbalance.at[classification.reaction_id, "H"]),
                assignment,
                plan,
            )
        )
    return edits, unresolved


def apply_stoichiometry_edits(
    model: "Model", edits: Iterable[StoichiometryEdit]
) -> None:
    """Apply stoichiometry edits to the reactions of `model`.

    The change is reverted upon exit when using the model as a context.

    """
    for edit in edits:
        reaction = model.reactions.get_by_id(edit.reaction_id)
        reaction.add_metabolites({edit.metabolite_id: edit.change}, combine=True)
        logger.debug(
            f"Balanced {edit.reaction_id} with {edit.change:+g} {edit.metabolite_id}."
        )


def charge_imbalanced(
    classifications: Sequence[Classification],
    imbalance: pd.DataFrame,
    tolerance: Optional[float] = None,
) -> List[str]:
    """Return the analyzed reactions that are left out of charge balance.

    A metabolite whose formula cannot be rewritten keeps its formula but its
    charge is still shifted, so its reactions can be hydrogen balanced while
    their charge is not. Exchange and unanalyzable reactions are not checked.

    Parameters
    ----------
    classifications : sequence of Classification
        The classification of every reaction.
    imbalance : pandas.DataFrame
        Per-reaction imbalances after balancing. Without a "charge" column no
        reaction is reported.
    tolerance : float, optional
        Imbalances up to this absolute value count as zero (default
        `Configuration().tolerance`).

    """
    if tolerance is None:
        tolerance = configuration.tolerance
    if "charge" not in imbalance.columns:
        return []
    result = []
    for classification in classifications:
        if classification.topology in (Topology.EXCHANGE, Topology.UNANALYZABLE):
            continue
        charge = float(imbalance.at[classification.reaction_id, "charge"])
        if abs(charge) > tolerance:
            logger.warning(
                f"Reaction {classification.reaction_id} is hydrogen balanced but "
                f"its charge is off by {charge:+g}."
            )
            result.append(classification.reaction_id)
    return result
