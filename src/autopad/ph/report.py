"""Provide the outcome of a pH adjustment."""

from textwrap import dedent
from typing import TYPE_CHECKING, Dict, List, Optional, Sequence

import pandas as pd

from .topology import Topology


if TYPE_CHECKING:
    from autopad import Metabolite

    from .balance import StoichiometryEdit
    from .reformulation import FormulaEdit
    from .topology import Classification


__all__ = ("AdjustmentReport",)


class AdjustmentReport:
    """
    Describe what a pH adjustment changed and what it left unresolved.

    Attributes
    ----------
    compartments : tuple of str
        The compartment vocabulary.
    reference_ph, target_ph : pandas.Series
        The pH values indexed by compartment.
    deltas : pandas.Series
        The proton delta of every metabolite.
    formula_edits : list of FormulaEdit
        The formula and charge changes, one per metabolite with a non-zero
        delta.
    synthesized : list of Metabolite
        Proton metabolites that were added to the model.
    classifications : list of Classification
        The topology of every reaction.
    stoichiometry_edits : list of StoichiometryEdit
        The proton coefficient changes.
    unresolved : list of str
        Reactions that could not be analyzed. Exchange reactions are not
        listed.
    adopted_compartments : bool
        Whether the compartment vocabulary was generated from the metabolite
        identifiers.
    charge_imbalanced : list of str
        Analyzed reactions whose charge is out of balance after the
        adjustment. Fixing them is left to the caller.

    """

    def __init__(
        self,
        compartments: Sequence[str],
        reference_ph: Sequence[float],
        target_ph: Sequence[float],
        deltas: pd.Series,
        formula_edits: List["FormulaEdit"],
        synthesized: List["Metabolite"],
        classifications: List["Classification"],
        stoichiometry_edits: List["StoichiometryEdit"],
        unresolved: List[str],
        adopted_compartments: bool = False,
        charge_imbalanced: Optional[List[str]] = None,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.compartments = tuple(compartments)
        self.reference_ph = pd.Series(
            reference_ph, index=self.compartments, name="reference_ph", dtype=float
        )
        self.target_ph = pd.Series(
            target_ph, index=self.compartments, name="target_ph", dtype=float
        )
        self.deltas = deltas
        self.formula_edits = formula_edits
        self.synthesized = synthesized
        self.classifications = classifications
        self.stoichiometry_edits = stoichiometry_edits
        self.unresolved = unresolved
        self.adopted_compartments = adopted_compartments
        self.charge_imbalanced = (
            [] if charge_imbalanced is None else list(charge_imbalanced)
        )

    @property
    def fallbacks(self) -> List[str]:
        """Return the metabolites whose original formula had to be kept."""
        return [edit.metabolite_id for edit in self.formula_edits if edit.fallback]

    @property
    def balanced(self) -> List[str]:
        """Return the reactions whose proton coefficient was changed."""
        return [edit.reaction_id for edit in self.stoichiometry_edits]

    @property
    def exchanges(self) -> List[str]:
        """Return the reactions that were skipped as exchanges."""
        return [
            c.reaction_id
            for c in self.classifications
            if c.topology is Topology.EXCHANGE
        ]

    @property
    def topologies(self) -> Dict[str, Topology]:
        """Return the topology of every reaction."""
        return {c.reaction_id: c.topology for c in self.classifications}

    def to_frame(self) -> pd.DataFrame:
        """Return a per-reaction data frame of the classification and balancing."""
        changes = {edit.reaction_id: edit for edit in self.stoichiometry_edits}
        rows = []
        for c in self.classifications:
            edit = changes.get(c.reaction_id)
            rows.append(
                {
                    "reaction": c.reaction_id,
                    "topology": c.topology.value,
                    "compartment": None
                    if c.compartment is None
                    else self.compartments[c.compartment],
                    "proton": None if edit is None else edit.metabolite_id,
                    "change": 0.0 if edit is None else edit.change,
                }
            )
        return pd.DataFrame(
            rows, columns=["reaction", "topology", "compartment", "proton", "change"]
        ).set_index("reaction")

    def to_string(self) -> str:
        """Return a plain text summary of the adjustment."""
        n_reactions = len(self.classifications)
        ph = "\n".join(
            f"{compartment}\t{self.target_ph[compartment]:g}"
            for compartment in self.compartments
        )
        unresolved = "\n".join(self.unresolved)
        return dedent(
            """\
            PH VALUES
            compartment\tpH
            {ph}
            METABOLITES
            {n_edits} metabolites changed protonation state, {n_fallbacks} kept their formula.
            {n_synthesized} protons were added.
            REACTIONS
            {n_analyzed} out of {n_reactions} reactions were analyzed and balanced if needed
            the following {n_unresolved} reactions were not, due to lack of chemical formula of one of the metabolites that participate in the reaction, or due to complex mass imbalances:
            """
        ).format(
            ph=ph,
            n_edits=len(self.formula_edits),
            n_fallbacks=len(self.fallbacks),
            n_synthesized=len(self.synthesized),
            n_analyzed=n_reactions - len(self.unresolved),
            n_reactions=n_reactions,
            n_unresolved=len(self.unresolved),
        ) + unresolved + self._charge_section()

    def _charge_section(self) -> str:
        """Return the text listing reactions out of charge balance, if any."""
        if not self.charge_imbalanced:
            return ""
        return (
            f"\nthe following {len(self.charge_imbalanced)} reactions are out of "
            f"charge balance and need to be fixed manually:\n"
            + "\n".join(self.charge_imbalanced)
        )

    def to_html(self) -> str:
        """Return the per-reaction data frame formatted as HTML."""
        return self.to_frame().to_html()

    def __str__(self) -> str:
        """Return a string representation of the report."""
        return self.to_string()

    def _repr_html_(self) -> str:
        """Return a rich HTML representation of the report."""
        return self.to_html()
