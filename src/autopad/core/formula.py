"""Translate chemical formulae to and from fixed-order element vectors."""

import re
from typing import Dict, Optional, Union
from warnings import warn

import numpy as np


__all__ = (
    "ELEMENTS",
    "element_re",
    "parse_composition",
    "formula_to_vector",
    "vector_to_formula",
)


# The closed element vocabulary. X, R and Y are generic residues used by
# metabolic reconstructions and FULLR marks a full residue.
ELEMENTS = (
    "H",
    "C",
    "O",
    "P",
    "S",
    "N",
    "Mg",
    "X",
    "Fe",
    "Zn",
    "Co",
    "R",
    "K",
    "Cl",
    "Cd",
    "Na",
    "Ni",
    "Mn",
    "Cu",
    "Ca",
    "Y",
    "I",
    "F",
    "Ag",
    "FULLR",
)

HYDROGEN = ELEMENTS.index("H")

# Numbers are not required because of the |(?=[A-Z])? block, a bare symbol
# counts once.
element_re = re.compile("(FULLR|[A-Z][a-z]?)([0-9.]+[0-9.]?|(?=[A-Z])?)")


def parse_composition(formula: Optional[str]) -> Optional[Dict[str, Union[int, float]]]:
    """Break a chemical formula down by element.

    Parameters
    ----------
    formula : str or None
        A formula such as "C10H12N5O13P3".

    Returns
    -------
    dict or None
        Element symbols mapped to their counts. An empty dict for a missing
        formula and None for a formula that could not be parsed.

    """
    if formula is None:
        return {}
    tmp_formula = str(formula)
    # commonly occurring characters in incorrectly constructed formulas
    if "*" in tmp_formula:
        warn(f"invalid character '*' found in formula '{formula}'")
        tmp_formula = tmp_formula.replace("*", "")
    if "(" in tmp_formula or ")" in tmp_formula:
        warn(f"invalid formula (has parenthesis) in '{formula}'")
        return None
    composition = {}
    for element, count in element_re.findall(tmp_formula):
        if count == "":
            count = 1
        else:
            try:
                count = float(count)
                int_count = int(count)
                if count == int_count:
                    count = int_count
                else:
                    warn(f"{count} is not an integer (in formula {formula})")
            except ValueError:
                warn(f"failed to parse {count} (in formula {formula})")
                return None
        composition[element] = composition.get(element, 0) + count
    return composition


def formula_to_vector(formula: Optional[str]) -> np.ndarray:
    """Return the element vector of `formula` over `ELEMENTS`.

    Formulas that are missing, unparseable, carry fractional counts or use
    an element outside the vocabulary cannot be represented and give an
    all-zero vector.

    """
    vector = np.zeros(len(ELEMENTS), dtype=np.int64)
    composition = parse_composition(formula)
    if not composition:
        return vector
    # letters the parser skipped, e.g. lower case garbage, also disqualify
    if "".join(
        f"{e}{c}" for e, c in element_re.findall(str(formula).replace("*", ""))
    ) != str(formula).replace("*", ""):
        return vector
    for element, count in composition.items():
        if element not in ELEMENTS or not isinstance(count, int):
            vector[:] = 0
            return vector
        vector[ELEMENTS.index(element)] += count
    return vector


def vector_to_formula(vector: np.ndarray) -> str:
    """Serialize an element vector, omitting non-positive counts.

    Each element symbol is followed by its count, in vocabulary order.

    """
    return "".join(
        f"{element}{int(count)}"
        for element, count in zip(ELEMENTS, vector)
        if count > 0
    )
