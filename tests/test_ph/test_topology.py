"""Test functions of ph/topology.py ."""

import os
from typing import Callable, Dict, Tuple

import pandas as pd
import pytest

from autopad import Model
from autopad.manipulation import mass_charge_imbalance
from autopad.ph import (
    DECISION_TABLE,
    ReactionProfile,
    Topology,
    classify,
    classify_reactions,
    complex_imbalance_flags,
    resolve_compartments,
)


ANTIPORT_METABOLITES = [
    ("a[c]", "C2H4O2", 0),
    ("b[e]", "C3H6O3", 0),
    ("a[e]", "C2H4O2", 0),
    ("b[c]", "C3H6O3", 0),
    ("h[c]", "H", 1),
    ("h[e]", "H", 1),
]


def profile(
    substrates: Tuple[int, ...],
    products: Tuple[int, ...],
    complex_imbalance: bool = False,
    missing_formula: bool = False,
    reverse: bool = False,
) -> ReactionProfile:
    """Return a profile of a reaction named R."""
    return ReactionProfile(
        "R", substrates, products, complex_imbalance, missing_formula, reverse
    )


@pytest.mark.parametrize(
    ["substrates", "products", "topology", "compartment", "reversed_compartment"],
    [
        [(0, 0), (0, 0), Topology.SAME_COMPARTMENT, 0, 0],
        [(0, 0), (1, 1), Topology.SYMPORT, 1, 0],
        [(0, 1), (0, 0, 0), Topology.ABC, 0, 0],
        [(0, 0), (1, 0), Topology.MEMBRANE_BOUND, 0, 1],
        [(0, 1), (1, 0), Topology.ANTIPORT, 0, 1],
    ],
)
def test_classify(
    substrates: Tuple[int, ...],
    products: Tuple[int, ...],
    topology: Topology,
    compartment: int,
    reversed_compartment: int,
) -> None:
    """Test every row of the decision table, in both directions."""
    target_ph = [7.0, 7.4]
    result = classify(profile(substrates, products), target_ph)
    assert result.topology is topology
    assert result.compartment == compartment
    result = classify(profile(substrates, products, reverse=True), target_ph)
    assert result.topology is topology
    assert result.compartment == reversed_compartment


def test_decision_table_complete() -> None:
    """Test that every reachable key has a rule."""
    assert set(DECISION_TABLE) == {
        (True, True, True),
        (True, True, False),
        (False, True, False),
        (True, False, False),
        (False, False, False),
    }


@pytest.mark.parametrize(["substrates", "products"], [[(), (0,)], [(0,), ()], [(), ()]])
def test_classify_exchange(
    substrates: Tuple[int, ...], products: Tuple[int, ...]
) -> None:
    """Test that one-sided reactions are exchanges."""
    result = classify(profile(substrates, products, missing_formula=True), [7.0])
    assert result.topology is Topology.EXCHANGE
    assert result.compartment is None


@pytest.mark.parametrize(
    "flags", [{"complex_imbalance": True}, {"missing_formula": True}]
)
def test_classify_unanalyzable(flags: Dict[str, bool]) -> None:
    """Test that complex imbalances and missing formulae stop the analysis."""
    result = classify(profile((0,), (0,), **flags), [7.0])
    assert result.topology is Topology.UNANALYZABLE
    assert result.compartment is None


def test_antiport_tie() -> None:
    """Test that equal pH values go to the lowest compartment index."""
    result = classify(profile((1, 0), (0, 1)), [7.0, 7.0])
    assert result.compartment == 0
    result = classify(profile((1, 0), (0, 1), reverse=True), [7.0, 7.0])
    assert result.compartment == 0


def test_antiport_three_compartments() -> None:
    """Test that only substrate compartments are candidates."""
    result = classify(profile((1, 2), (2, 0)), [5.0, 7.0, 7.4])
    assert result.topology is Topology.ANTIPORT
    assert result.compartment == 1


def test_complex_imbalance_flags() -> None:
    """Test that only elements other than hydrogen count."""
    imbalance = pd.DataFrame(
        {"H": [1.0, 0.0, 0.0], "C": [0.0, 1e-12, 2.0], "charge": [1.0, 0.0, 0.0]},
        index=["R1", "R2", "R3"],
    )
    flags = complex_imbalance_flags(imbalance)
    assert flags.to_dict() == {"R1": False, "R2": False, "R3": True}


@pytest.fixture(scope="function")
def antiport_model(model_builder: Callable[..., Model]) -> Model:
    """Provide a model with a single antiport reaction."""
    return model_builder(
        ANTIPORT_METABOLITES,
        {"ANTI": {"a[c]": -1, "b[e]": -1, "a[e]": 1, "b[c]": 1}},
        compartments={"c": "cytosol", "e": "extracellular"},
    )


def test_classify_antiport_model(antiport_model: Model) -> None:
    """Test that the antiport is balanced in the more acidic compartment."""
    (result,) = classify_reactions(
        antiport_model, resolve_compartments(antiport_model), [7.0, 7.4], processes=1
    )
    assert result.topology is Topology.ANTIPORT
    assert result.compartment == 0


def test_classify_antiport_reversed(antiport_model: Model) -> None:
    """Test that reversed antiports go to the less acidic compartment."""
    (result,) = classify_reactions(
        antiport_model,
        resolve_compartments(antiport_model),
        [7.0, 7.4],
        reverse=pd.Series({"ANTI": True}),
        processes=1,
    )
    assert result.compartment == 1


def test_classify_reactions(model: Model) -> None:
    """Test the classification of the toy model."""
    imbalance = mass_charge_imbalance(model)
    results = classify_reactions(
        model,
        resolve_compartments(model),
        [7.0, 7.0],
        complex_imbalance=complex_imbalance_flags(imbalance),
        processes=1,
    )
    assert [r.reaction_id for r in results] == [rxn.id for rxn in model.reactions]
    topologies = {r.reaction_id: r.topology for r in results}
    assert topologies == {
        "ATPM": Topology.SAME_COMPARTMENT,
        "ACt": Topology.SYMPORT,
        "EX_glc": Topology.EXCHANGE,
        "GLCt": Topology.SYMPORT,
        "UNK": Topology.UNANALYZABLE,
    }


@pytest.mark.skipif("SKIP_MP" in os.environ, reason="unsafe for parallel execution")
def test_classify_reactions_parallel(model: Model) -> None:
    """Test that parallel classification gives the serial result."""
    assignment = resolve_compartments(model)
    serial = classify_reactions(model, assignment, [7.0, 6.0], processes=1)
    parallel = classify_reactions(model, assignment, [7.0, 6.0], processes=2)
    assert parallel == serial
