"""Locate or synthesize the free proton metabolite of every compartment."""

import logging
from typing import TYPE_CHECKING, Dict, List, NamedTuple, Optional, Tuple

from ..core.configuration import Configuration
from ..core.metabolite import Metabolite
from ..exceptions import AmbiguousProtonError


if TYPE_CHECKING:
    from autopad import Model

    from .compartments import CompartmentAssignment


__all__ = (
    "PROTON_SPELLINGS",
    "ProtonPoolPlan",
    "is_proton_stem",
    "locate_proton_pools",
    "apply_proton_pool_plan",
)


logger = logging.getLogger(__name__)
configuration = Configuration()


# Identifier stems recognised as the free proton, compared case-insensitively
# and ignoring whitespace.
PROTON_SPELLINGS = frozenset(("h", "h+", "h(+)"))


class ProtonPoolPlan(NamedTuple):
    """The proton metabolite of each compartment.

    Attributes
    ----------
    pools : dict
        Compartment code to proton metabolite identifier, one entry per
        compartment.
    additions : tuple of (str, str)
        (metabolite identifier, compartment) of protons that do not exist
        yet and must be added to the model.

    """

    pools: Dict[str, str]
    additions: Tuple[Tuple[str, str], ...]


def is_proton_stem(stem: str) -> bool:
    """Return whether an identifier stem names the free proton."""
    return "".join(stem.split()).lower() in PROTON_SPELLINGS


def locate_proton_pools(
    model: "Model", assignment: "CompartmentAssignment", stem: Optional[str] = None
) -> ProtonPoolPlan:
    """Find the proton metabolite of every compartment.

    The model is not modified; compartments without a proton receive a new
    identifier built from `stem` in the plan's `additions`.

    Parameters
    ----------
    model : autopad.Model
        The model to search.
    assignment : CompartmentAssignment
        The resolved compartments.
    stem : str, optional
        Identifier stem for synthesized protons (default
        `Configuration().proton_stem`).

    Raises
    ------
    AmbiguousProtonError
        If a compartment has more than one proton candidate or there are more
        candidates than compartments.

    """
    if stem is None:
        stem = configuration.proton_stem
    candidates = [
        met.id
        for met in model.metabolites
        if is_proton_stem(assignment.metabolite_stems[met.id])
    ]
    if len(candidates) > len(assignment.compartments):
        raise AmbiguousProtonError(
            f"Found {len(candidates)} proton candidates ({', '.join(candidates)}) "
            f"for {len(assignment.compartments)} compartments."
        )

    by_compartment: Dict[str, List[str]] = {}
    for met_id in candidates:
        compartment = assignment.metabolite_compartments[met_id]
        by_compartment.setdefault(compartment, []).append(met_id)
    for compartment, met_ids in by_compartment.items():
        if len(met_ids) > 1:
            raise AmbiguousProtonError(
                f"Compartment '{compartment}' has several proton candidates: "
                f"{', '.join(met_ids)}."
            )

    pools = {}
    additions = []
    for compartment in assignment.compartments:
        if compartment in by_compartment:
            pools[compartment] = by_compartment[compartment][0]
            continue
        met_id = assignment.convention.join(stem, compartment)
        if met_id in model.metabolites:
            raise AmbiguousProtonError(
                f"Cannot add a proton to compartment '{compartment}': the "
                f"identifier '{met_id}' is taken by a non-proton metabolite."
            )
        pools[compartment] = met_id
        additions.append((met_id, compartment))
    return ProtonPoolPlan(pools, tuple(additions))


def apply_proton_pool_plan(model: "Model", plan: ProtonPoolPlan) -> List[Metabolite]:
    """Add the missing protons of `plan` to `model` and return them.

    The new metabolites take part in no reaction, i.e. they add a zero row
    to the stoichiometric matrix. The change is reverted upon exit when
    using the model as a context.

    """
    protons = [
        Metabolite(met_id, formula="H", name="H+", charge=1, compartment=compartment)
        for met_id, compartment in plan.additions
    ]
    model.add_metabolites(protons)
    for proton in protons:
        logger.info(
            f"Due to absence in the compartment, a proton was added to "
            f"compartment {proton.compartment} named as {proton.id}."
        )
    return protons
