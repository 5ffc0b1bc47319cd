"""Test functions of metabolite.py ."""

import pytest

from autopad import Metabolite, Model
from autopad.core.formula import ELEMENTS


def test_metabolite_init() -> None:
    """Test initialization."""
    met = Metabolite("atp[c]", formula="C10H12N5O13P3", name="ATP", charge=-4)
    assert met.id == "atp[c]"
    assert met.name == "ATP"
    assert met.charge == -4
    assert met.model is None
    assert len(met.reactions) == 0
    assert str(met) == "atp[c]"


def test_elements() -> None:
    """Test reading and setting the element composition."""
    met = Metabolite("h2o[c]", formula="H2O")
    assert met.elements == {"H": 2, "O": 1}
    met.elements = {"H": 1, "O": 1}
    assert met.formula == "HO"


def test_element_vector() -> None:
    """Test the element vector of a metabolite."""
    met = Metabolite("pi[c]", formula="HO4P", charge=-2)
    vector = met.element_vector
    assert vector[ELEMENTS.index("H")] == 1
    assert vector[ELEMENTS.index("O")] == 4
    assert vector[ELEMENTS.index("P")] == 1
    assert vector.sum() == 6


def test_has_formula() -> None:
    """Test detection of missing formulae."""
    assert Metabolite("a[c]", formula="C").has_formula
    assert not Metabolite("b[c]").has_formula
    assert not Metabolite("c[c]", formula="").has_formula


def test_change_id_in_model(model: Model) -> None:
    """Test that renaming keeps the model index in sync."""
    met = model.metabolites.get_by_id("glc[e]")
    met.id = "glucose[e]"
    assert model.metabolites.get_by_id("glucose[e]") is met
    assert "glc[e]" not in model.metabolites
    with pytest.raises(ValueError):
        met.id = "glc[c]"


def test_id_must_be_string() -> None:
    """Test that identifiers are strings."""
    met = Metabolite("a[c]")
    with pytest.raises(TypeError):
        met.id = 5


def test_copy(model: Model) -> None:
    """Test that a copy is detached from model and reactions."""
    met = model.metabolites.get_by_id("atp[c]")
    copied = met.copy()
    assert copied is not met
    assert copied.id == met.id
    assert copied.formula == met.formula
    assert copied.model is None
    assert len(copied.reactions) == 0
    assert len(met.reactions) == 1
