"""Build model-aligned pKa tables from a reference lookup."""

import logging
from pathlib import Path
from typing import (
    TYPE_CHECKING,
    Iterable,
    Iterator,
    List,
    Mapping,
    Optional,
    Sequence,
    Tuple,
    Union,
)

import numpy as np
import pandas as pd


if TYPE_CHECKING:
    from autopad import Metabolite, Model


__all__ = ("PKaLookup", "build_pka_table")


logger = logging.getLogger(__name__)


class PKaLookup(Mapping):
    """A read-only mapping of compound keys to their pKa values.

    The lookup is built once, typically from a reference table keyed by KEGG
    compound identifiers, and passed explicitly to `build_pka_table`. It is
    never modified afterwards, so it can be shared between models.

    Parameters
    ----------
    values : mapping
        Compound key mapped to a sequence of pKa values. Missing values may
        be given as NaN or None.
    width : int, optional
        The number of pKa columns. Defaults to the longest sequence.

    """

    def __init__(
        self,
        values: Mapping[str, Sequence[Optional[float]]],
        width: Optional[int] = None,
    ) -> None:
        self._values = {
            str(key): tuple(
                np.nan if value is None else float(value) for value in pka
            )
            for key, pka in values.items()
        }
        longest = max((len(pka) for pka in self._values.values()), default=0)
        if width is None:
            width = longest
        elif width < longest:
            raise ValueError(
                f"A width of {width} cannot hold compounds with {longest} pKa values."
            )
        self._width = width

    @classmethod
    def from_frame(
        cls,
        frame: pd.DataFrame,
        key_column: Optional[str] = None,
        pka_columns: Optional[List[str]] = None,
    ) -> "PKaLookup":
        """Build a lookup from a table with one row per compound.

        Parameters
        ----------
        frame : pandas.DataFrame
            The reference table.
        key_column : str, optional
            The column with the compound keys. Defaults to the index.
        pka_columns : list of str, optional
            The columns with pKa values. Defaults to every other column.

        """
        if key_column is not None:
            frame = frame.set_index(key_column)
        if pka_columns is None:
            pka_columns = list(frame.columns)
        numeric = frame[pka_columns].apply(pd.to_numeric, errors="coerce")
        numeric = numeric[numeric.index.notna()]
        return cls(
            {str(key): row.to_numpy(dtype=float) for key, row in numeric.iterrows()},
            width=len(pka_columns),
        )

    @classmethod
    def from_csv(
        cls,
        path: Union[str, Path],
        key_column: Optional[str] = None,
        pka_columns: Optional[List[str]] = None,
        **kwargs,
    ) -> "PKaLookup":
        """Build a lookup from a local delimited file read with pandas.

        Additional keyword arguments are passed to `pandas.read_csv`.
        """
        frame = pd.read_csv(path, **kwargs)
        if key_column is None:
            key_column = frame.columns[0]
        return cls.from_frame(frame, key_column=key_column, pka_columns=pka_columns)

    @property
    def width(self) -> int:
        """The number of pKa columns."""
        return self._width

    def __getitem__(self, key: str) -> Tuple[float, ...]:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return (
            f"<{self.__class__.__name__} with {len(self)} compounds and "
            f"{self.width} pKa columns at {id(self):#x}>"
        )


def _annotation_keys(metabolite: "Metabolite", annotation: str) -> Iterable[str]:
    """Yield the compound keys a metabolite is annotated with."""
    value = metabolite.annotation.get(annotation)
    if value is None:
        return
    if isinstance(value, str):
        value = [value]
    for entry in value:
        for key in str(entry).split(";"):
            key = key.strip()
            if key:
                yield key


def build_pka_table(
    model: "Model", lookup: PKaLookup, annotation: str = "kegg.compound"
) -> Tuple[pd.DataFrame, pd.Series]:
    """Assign pKa values to the metabolites of `model`.

    Each metabolite is matched through the compound keys in its annotation
    under `annotation`. Annotations may be a string, a list of strings or a
    ";" separated string and the first key present in the lookup wins.

    Parameters
    ----------
    model : autopad.Model
        The model whose metabolites get pKa values.
    lookup : PKaLookup
        The reference pKa values.
    annotation : str
        The annotation key holding compound identifiers (default
        "kegg.compound").

    Returns
    -------
    tuple of (pandas.DataFrame, pandas.Series)
        The pKa table indexed by metabolite identifier with columns
        "pKa_1" ... "pKa_n", NaN where unknown, and a boolean series telling
        which metabolites were found in the lookup.

    """
    width = max(lookup.width, 1)
    table = np.full((len(model.metabolites), width), np.nan)
    found = np.zeros(len(model.metabolites), dtype=bool)
    for i, met in enumerate(model.metabolites):
        for key in _annotation_keys(met, annotation):
            if key in lookup:
                values = lookup[key]
                table[i, : len(values)] = values
                found[i] = True
                break

    met_ids = [met.id for met in model.metabolites]
    logger.info(
        f"{found.sum()} out of {len(met_ids)} metabolites were found in the pKa lookup."
    )
    return (
        pd.DataFrame(
            table, index=met_ids, columns=[f"pKa_{i + 1}" for i in range(width)]
        ),
        pd.Series(found, index=met_ids, name="found"),
    )
