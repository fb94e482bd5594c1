"""In-memory dataset description.

A dataset is an ordered attribute schema plus a row-indexed frame. Readers in
:mod:`predeval.io.readers` build these; the evaluation core only needs to locate
the class attribute and pull its true values.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Mapping, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from predeval.contracts.choices import AttributeKind
from predeval.core.errors import SchemaError


def label_text(value) -> Optional[str]:
    """Canonical text of a nominal label; None for missing.

    Integral floats lose their fraction, so a label column that pandas read as
    float64 (because of a missing cell) still matches ``"0"``, ``"1"``, ...
    """
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return None
    if isinstance(value, (float, np.floating)) and float(value).is_integer():
        return str(int(value))
    return str(value)


@dataclass(frozen=True)
class Attribute:
    name: str
    kind: AttributeKind
    values: Tuple[str, ...] = ()

    @property
    def is_nominal(self) -> bool:
        return self.kind == "nominal"

    @property
    def is_numeric(self) -> bool:
        return self.kind == "numeric"


@dataclass
class Dataset:
    attributes: List[Attribute]
    frame: pd.DataFrame
    name: str = "dataset"
    _by_name: dict = field(default_factory=dict, init=False, repr=False)

    def __post_init__(self) -> None:
        self._by_name = {a.name: a for a in self.attributes}

    @property
    def n_rows(self) -> int:
        return int(self.frame.shape[0])

    def attribute(self, name: str) -> Optional[Attribute]:
        return self._by_name.get(name)

    def target_values(self, attribute: Attribute) -> np.ndarray:
        """True values of ``attribute`` as floats.

        Nominal values become class indices in the attribute's declared order;
        missing values become NaN. A label outside the declared values is a
        :class:`SchemaError`.
        """
        col = self.frame[attribute.name]
        if attribute.is_nominal:
            index = {v: i for i, v in enumerate(attribute.values)}
            labels = [label_text(v) for v in col.tolist()]
            unknown = sorted({lab for lab in labels if lab is not None and lab not in index})
            if unknown:
                raise SchemaError(
                    f"Class attribute ({attribute.name}) has values {unknown[:5]} "
                    f"not among the declared values {list(attribute.values)}"
                )
            return np.array(
                [np.nan if lab is None else float(index[lab]) for lab in labels], dtype=float
            )
        return pd.to_numeric(col, errors="coerce").to_numpy(dtype=float)

    @classmethod
    def from_frame(
        cls,
        frame: pd.DataFrame,
        *,
        nominal: Optional[Mapping[str, Sequence[str]]] = None,
        name: str = "dataset",
    ) -> "Dataset":
        """Infer an attribute schema from a frame.

        Columns listed in ``nominal`` keep the given class order. Other
        non-numeric columns are nominal with their sorted distinct values;
        numeric columns are numeric.
        """
        nominal = dict(nominal or {})
        attributes: List[Attribute] = []
        for col in frame.columns:
            col_name = str(col)
            if col_name in nominal:
                attributes.append(
                    Attribute(col_name, "nominal", tuple(label_text(v) for v in nominal[col_name]))
                )
                continue

            series = frame[col]
            if isinstance(series.dtype, pd.CategoricalDtype):
                values = tuple(label_text(v) for v in series.cat.categories)
                attributes.append(Attribute(col_name, "nominal", values))
            elif pd.api.types.is_numeric_dtype(series) and not pd.api.types.is_bool_dtype(series):
                attributes.append(Attribute(col_name, "numeric"))
            else:
                values = tuple(sorted({label_text(v) for v in series.dropna().tolist()}))
                attributes.append(Attribute(col_name, "nominal", values))

        return cls(attributes=attributes, frame=frame.reset_index(drop=True), name=name)
