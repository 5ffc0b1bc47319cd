"""Classify reactions by the compartments of their substrates and products.

The classification decides which compartment's proton pool absorbs the
hydrogen imbalance of a reaction after its metabolites were re-protonated.
Reactions with metabolites on one side only are exchanges and reactions
imbalanced in other elements than hydrogen, or using metabolites without a
formula, cannot be analyzed. All other reactions are looked up in
`DECISION_TABLE` by

1. whether all substrates share one compartment,
2. whether all products share one compartment,
3. whether, in that case, it is the same compartment on both sides.

"""

import logging
from enum import Enum
from typing import TYPE_CHECKING, Dict, List, NamedTuple, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from ..core.configuration import Configuration
from ..util.process_pool import ProcessPool


if TYPE_CHECKING:
    from autopad import Model, Reaction

    from .compartments import CompartmentAssignment


__all__ = (
    "Topology",
    "TopologyRule",
    "DECISION_TABLE",
    "ReactionProfile",
    "Classification",
    "complex_imbalance_flags",
    "profile_reaction",
    "classify",
    "classify_reactions",
)


logger = logging.getLogger(__name__)
configuration = Configuration()


class Topology(Enum):
    """The compartmental topologies a reaction can have."""

    SAME_COMPARTMENT = "same-compartment"
    SYMPORT = "symport/diffusion"
    ABC = "ABC"
    MEMBRANE_BOUND = "membrane-bound"
    ANTIPORT = "antiport"
    EXCHANGE = "exchange"
    UNANALYZABLE = "unanalyzable"


class TopologyRule(NamedTuple):
    """Where to balance a topology, as given and with reversed direction.

    The sides are "substrates" or "products" (the compartment of the first
    metabolite on that side) or "lowest_ph" and "highest_ph" (the substrate
    compartment with the extreme target pH).
    """

    topology: Topology
    side: str
    reversed_side: str


DECISION_TABLE: Dict[Tuple[bool, bool, bool], TopologyRule] = {
    # A[c] + B[c] -> C[c] + D[c]
    (True, True, True): TopologyRule(
        Topology.SAME_COMPARTMENT, "substrates", "products"
    ),
    # A[c] + B[c] -> A[e] + B[e]
    (True, True, False): TopologyRule(Topology.SYMPORT, "products", "substrates"),
    # A[c] + B[e] -> C[c] + B[c] + D[c]
    (False, True, False): TopologyRule(Topology.ABC, "products", "substrates"),
    # A[c] + B[c] -> A[e] + B[c]
    (True, False, False): TopologyRule(
        Topology.MEMBRANE_BOUND, "substrates", "products"
    ),
    # A[c] + B[e] -> A[e] + B[c]
    (False, False, False): TopologyRule(Topology.ANTIPORT, "lowest_ph", "highest_ph"),
}


class ReactionProfile(NamedTuple):
    """What the classification needs to know about one reaction.

    Compartments are indices into the vocabulary, listed in the model order
    of the metabolites.
    """

    reaction_id: str
    substrate_compartments: Tuple[int, ...]
    product_compartments: Tuple[int, ...]
    complex_imbalance: bool
    missing_formula: bool
    reverse: bool


class Classification(NamedTuple):
    """The topology of a reaction and the compartment index to balance in.

    `compartment` is None for exchange and unanalyzable reactions.
    """

    reaction_id: str
    topology: Topology
    compartment: Optional[int]


def complex_imbalance_flags(
    imbalance: pd.DataFrame, tolerance: Optional[float] = None
) -> pd.Series:
    """Flag reactions imbalanced in any element other than hydrogen.

    Parameters
    ----------
    imbalance : pandas.DataFrame
        Per-reaction element imbalances, e.g. from
        `autopad.manipulation.mass_charge_imbalance`. A "charge" column is
        ignored.
    tolerance : float, optional
        Imbalances up to this absolute value count as zero (default
        `Configuration().tolerance`).

    """
    if tolerance is None:
        tolerance = configuration.tolerance
    others = imbalance.drop(columns=["H", "charge"], errors="ignore")
    return (others.abs() > tolerance).any(axis=1)


def profile_reaction(
    reaction: "Reaction",
    assignment: "CompartmentAssignment",
    metabolite_positions: Dict[str, int],
    complex_imbalance: bool = False,
    reverse: bool = False,
) -> ReactionProfile:
    """Build the profile of a reaction."""
    ordered = sorted(
        reaction.metabolites.items(), key=lambda item: metabolite_positions[item[0].id]
    )
    substrates = tuple(
        assignment.compartment_index(met.id) for met, coef in ordered if coef < 0
    )
    products = tuple(
        assignment.compartment_index(met.id) for met, coef in ordered if coef > 0
    )
    missing_formula = any(not met.formula for met, _ in ordered)
    return ReactionProfile(
        reaction.id,
        substrates,
        products,
        bool(complex_imbalance),
        missing_formula,
        bool(reverse),
    )


def classify(profile: ReactionProfile, target_ph: Sequence[float]) -> Classification:
    """Classify one reaction and select the compartment to balance in.

    Antiport reactions are balanced in the substrate compartment with the
    lowest target pH, or the highest one when the direction is reversed.
    Ties go to the lowest compartment index.

    Parameters
    ----------
    profile : ReactionProfile
        The reaction to classify.
    target_ph : sequence of float
        The target pH of every compartment, by index.

    """
    substrates = profile.substrate_compartments
    products = profile.product_compartments
    if not substrates or not products:
        return Classification(profile.reaction_id, Topology.EXCHANGE, None)
    if profile.complex_imbalance or profile.missing_formula:
        return Classification(profile.reaction_id, Topology.UNANALYZABLE, None)

    single_substrate = len(set(substrates)) == 1
    single_product = len(set(products)) == 1
    shared = single_substrate and single_product and substrates[0] == products[0]
    rule = DECISION_TABLE[(single_substrate, single_product, shared)]
    side = rule.reversed_side if profile.reverse else rule.side

    if side == "substrates":
        compartment = substrates[0]
    elif side == "products":
        compartment = products[0]
    else:
        sign = 1.0 if side == "lowest_ph" else -1.0
        compartment = min(set(substrates), key=lambda c: (sign * target_ph[c], c))
    return Classification(profile.reaction_id, rule.topology, compartment)


def _init_worker(target_ph: np.ndarray) -> None:
    """Initialize the global target pH for multiprocessing."""
    global _target_ph
    _target_ph = target_ph


def _classify_step(profile: ReactionProfile) -> Classification:
    global _target_ph
    return classify(profile, _target_ph)


def classify_reactions(
    model: "Model",
    assignment: "CompartmentAssignment",
    target_ph: Sequence[float],
    complex_imbalance: Optional[pd.Series] = None,
    reverse: Optional[pd.Series] = None,
    processes: Optional[int] = None,
) -> List[Classification]:
    """Classify all reactions of `model`, in model order.

    Parameters
    ----------
    model : autopad.Model
        The model whose reactions are classified.
    assignment : CompartmentAssignment
        The resolved compartments.
    target_ph : sequence of float
        The target pH of every compartment, by index.
    complex_imbalance : pandas.Series, optional
        Boolean flags indexed by reaction identifier, see
        `complex_imbalance_flags` (default no reaction flagged).
    reverse : pandas.Series, optional
        Boolean direction overrides indexed by reaction identifier (default
        no reaction reversed).
    processes : int, optional
        The number of parallel processes to run. If not explicitly passed,
        will be set from the global configuration singleton.

    """
    if processes is None:
        processes = configuration.processes
    positions = {met.id: i for i, met in enumerate(model.metabolites)}
    profiles = [
        profile_reaction(
            rxn,
            assignment,
            positions,
            complex_imbalance=False
            if complex_imbalance is None
            else complex_imbalance.get(rxn.id, False),
            reverse=False if reverse is None else reverse.get(rxn.id, False),
        )
        for rxn in model.reactions
    ]
    target_ph = np.asarray(target_ph, dtype=float)

    processes = min(processes, len(profiles))
    if processes > 1:
        chunk_size = len(profiles) // processes
        logger.debug(f"Classifying {len(profiles)} reactions in {processes} processes.")
        with ProcessPool(
            processes, initializer=_init_worker, initargs=(target_ph,)
        ) as pool:
            return list(pool.imap(_classify_step, profiles, chunksize=chunk_size))
    _init_worker(target_ph)
    return list(map(_classify_step, profiles))
