"""Define global fixtures."""

from typing import Callable, Dict, List, Optional, Tuple

import numpy as np
import pandas as pd
import pytest

from autopad import Metabolite, Model, Reaction


def build_model(
    metabolites: List[Tuple[str, Optional[str], Optional[int]]],
    reactions: Dict[str, Dict[str, float]],
    compartments: Optional[Dict[str, str]] = None,
    model_id: str = "toy",
) -> Model:
    """Return a model from (id, formula, charge) triples and reaction dicts.

    Parameters
    ----------
    metabolites : list of tuple
        The metabolite identifier, formula and charge.
    reactions : dict
        Reaction identifier mapped to metabolite identifier and coefficient.
    compartments : dict, optional
        The declared compartment vocabulary, if any.
    model_id : str
        The model identifier.

    """
    model = Model(model_id)
    model.add_metabolites(
        [
            Metabolite(met_id, formula=formula, charge=charge)
            for met_id, formula, charge in metabolites
        ]
    )
    for rxn_id, stoichiometry in reactions.items():
        reaction = Reaction(rxn_id)
        reaction.add_metabolites(
            {model.metabolites.get_by_id(m): c for m, c in stoichiometry.items()}
        )
        model.add_reactions([reaction])
    if compartments:
        model.compartments = compartments
    return model


TOY_METABOLITES = [
    ("atp[c]", "C10H12N5O13P3", -4),
    ("adp[c]", "C10H12N5O10P2", -3),
    ("pi[c]", "HO4P", -2),
    ("h2o[c]", "H2O", 0),
    ("h[c]", "H", 1),
    ("h[e]", "H", 1),
    ("ac[c]", "C2H3O2", -1),
    ("ac[e]", "C2H3O2", -1),
    ("glc[e]", "C6H12O6", 0),
    ("glc[c]", "C6H12O6", 0),
    ("unk[c]", None, 0),
]

TOY_REACTIONS = {
    "ATPM": {"atp[c]": -1, "h2o[c]": -1, "adp[c]": 1, "pi[c]": 1, "h[c]": 1},
    "ACt": {"ac[e]": -1, "h[e]": -1, "ac[c]": 1, "h[c]": 1},
    "EX_glc": {"glc[e]": -1},
    "GLCt": {"glc[e]": -1, "glc[c]": 1},
    "UNK": {"unk[c]": -1, "ac[c]": 1},
}


@pytest.fixture(scope="function")
def model() -> Model:
    """Provide a small two-compartment model in bracket notation."""
    return build_model(
        TOY_METABOLITES,
        TOY_REACTIONS,
        compartments={"c": "cytosol", "e": "extracellular"},
    )


@pytest.fixture(scope="function")
def undeclared_model() -> Model:
    """Provide the toy model without a declared compartment vocabulary."""
    return build_model(TOY_METABOLITES, TOY_REACTIONS)


@pytest.fixture(scope="function")
def pka() -> pd.DataFrame:
    """Provide pKa values for the toy model, acetate only."""
    return pd.DataFrame({"pKa_1": [4.76, 4.76]}, index=["ac[c]", "ac[e]"])


@pytest.fixture(scope="session")
def atp_pka() -> np.ndarray:
    """Provide the pKa row of ATP, sorted descending."""
    return np.array([12.3, 6.5, 4.0])


@pytest.fixture(scope="session")
def model_builder() -> Callable[..., Model]:
    """Provide the function building small models from plain data."""
    return build_model
