"""Resolve metabolite compartments from identifier suffixes."""

import logging
import re
from typing import TYPE_CHECKING, Dict, Iterable, List, NamedTuple, Pattern, Tuple

from ..exceptions import CompartmentMismatchError, FormatError


if TYPE_CHECKING:
    from autopad import Model


__all__ = (
    "NamingConvention",
    "NAMING_CONVENTIONS",
    "CompartmentAssignment",
    "detect_convention",
    "resolve_compartments",
)


logger = logging.getLogger(__name__)


class NamingConvention(NamedTuple):
    """A way of tagging metabolite identifiers with their compartment."""

    name: str
    pattern: Pattern
    template: str

    def split(self, metabolite_id: str) -> Tuple[str, str]:
        """Return the (stem, compartment) pair of an identifier.

        Raises
        ------
        FormatError
            If the identifier carries no compartment tag of this convention.

        """
        match = self.pattern.match(metabolite_id)
        if match is None:
            raise FormatError(
                f"Metabolite '{metabolite_id}' has no compartment suffix in "
                f"the {self.name} convention."
            )
        return match.group("stem").strip(), match.group("compartment")

    def join(self, stem: str, compartment: str) -> str:
        """Build an identifier for `stem` in `compartment`."""
        return self.template.format(stem=stem, compartment=compartment)


NAMING_CONVENTIONS = {
    "bracket": NamingConvention(
        "bracket",
        re.compile(r"^(?P<stem>.*)\[(?P<compartment>[^\[\]\s]+)\]\s*$"),
        "{stem}[{compartment}]",
    ),
    "underscore": NamingConvention(
        "underscore",
        re.compile(r"^(?P<stem>.+)_(?P<compartment>[^_\s]+)\s*$"),
        "{stem}_{compartment}",
    ),
}


class CompartmentAssignment(NamedTuple):
    """The compartment vocabulary and the compartment of every metabolite.

    Attributes
    ----------
    convention : NamingConvention
        The naming convention detected from the first metabolite.
    compartments : tuple of str
        The vocabulary in canonical order. Positions are compartment indices.
    metabolite_compartments : dict
        Metabolite identifier to compartment code.
    metabolite_stems : dict
        Metabolite identifier to the identifier without compartment tag.
    adopted : bool
        True if the model declared no vocabulary and the resolved one must
        be adopted.

    """

    convention: NamingConvention
    compartments: Tuple[str, ...]
    metabolite_compartments: Dict[str, str]
    metabolite_stems: Dict[str, str]
    adopted: bool

    def index(self, compartment: str) -> int:
        """Return the position of `compartment` in the vocabulary."""
        return self.compartments.index(compartment)

    def compartment_index(self, metabolite_id: str) -> int:
        """Return the compartment index of a metabolite."""
        return self.index(self.metabolite_compartments[metabolite_id])


def detect_convention(metabolite_ids: Iterable[str]) -> NamingConvention:
    """Detect the naming convention from the first identifier.

    Raises
    ------
    FormatError
        If there are no identifiers to inspect.

    """
    for metabolite_id in metabolite_ids:
        if metabolite_id.strip().endswith("]"):
            return NAMING_CONVENTIONS["bracket"]
        return NAMING_CONVENTIONS["underscore"]
    raise FormatError("Cannot detect a naming convention without metabolites.")


def resolve_compartments(model: "Model") -> CompartmentAssignment:
    """Assign every metabolite of `model` to a compartment.

    The model itself is not modified. When it declares no compartments the
    returned assignment is flagged as `adopted` and the caller is expected to
    store the resolved vocabulary. A model without metabolites or
    compartments yields an empty assignment.

    Raises
    ------
    FormatError
        If an identifier has no compartment suffix.
    CompartmentMismatchError
        If the resolved vocabulary differs from the declared one.

    """
    metabolite_ids = [met.id for met in model.metabolites]
    if metabolite_ids:
        convention = detect_convention(metabolite_ids)
    else:
        convention = NAMING_CONVENTIONS["bracket"]
    logger.debug(f"Metabolite identifiers follow the {convention.name} convention.")

    resolved: List[str] = []
    met_compartments = {}
    met_stems = {}
    for metabolite_id in metabolite_ids:
        stem, compartment = convention.split(metabolite_id)
        met_compartments[metabolite_id] = compartment
        met_stems[metabolite_id] = stem
        if compartment not in resolved:
            resolved.append(compartment)

    declared = list(model.compartments)
    if declared:
        if len(resolved) > len(declared):
            raise CompartmentMismatchError(
                f"Identified more compartments ({', '.join(resolved)}) than the "
                f"model declares ({', '.join(declared)})."
            )
        if len(resolved) < len(declared):
            raise CompartmentMismatchError(
                f"Identified fewer compartments ({', '.join(resolved)}) than the "
                f"model declares ({', '.join(declared)})."
            )
        if set(resolved) != set(declared):
            raise CompartmentMismatchError(
                f"Identified different compartments ({', '.join(resolved)}) than "
                f"the model declares ({', '.join(declared)})."
            )
        return CompartmentAssignment(
            convention, tuple(declared), met_compartments, met_stems, False
        )

    if not resolved:
        logger.debug("The model has no metabolites and no compartments.")
        return CompartmentAssignment(convention, (), {}, {}, False)

    logger.warning(
        f"The model did not declare compartments. The vocabulary "
        f"{', '.join(resolved)} was generated from the metabolite identifiers."
    )
    return CompartmentAssignment(
        convention, tuple(resolved), met_compartments, met_stems, True
    )
