"""ARFF reader backed by :func:`scipy.io.arff.loadarff`.

Nominal attributes keep their declared value order, which is the class order
used for confidence vectors and per-class score arrays.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Union

import numpy as np
import pandas as pd
from scipy.io import arff

from predeval.components.evaluation.dataset import Attribute
from predeval.core.errors import ReaderError

from .base import LoadedTable, require_file


def _decode(series: pd.Series) -> pd.Series:
    out = series.map(lambda v: v.decode("utf-8") if isinstance(v, bytes) else v)
    return out.replace("?", np.nan)


def load_arff_table(file_path: Union[str, Path]) -> LoadedTable:
    path = require_file(file_path)

    try:
        data, meta = arff.loadarff(path.as_posix())
    except (arff.ParseArffError, ValueError, NotImplementedError) as e:
        raise ReaderError(f"{path.name}: could not parse ARFF: {e}") from e

    df = pd.DataFrame(data)
    attributes: List[Attribute] = []
    for name in meta.names():
        kind, values = meta[name]
        if kind == "nominal":
            df[name] = _decode(df[name])
            attributes.append(Attribute(name, "nominal", tuple(str(v) for v in values)))
        elif kind == "numeric":
            attributes.append(Attribute(name, "numeric"))
        else:
            df[name] = _decode(df[name])
            attributes.append(Attribute(name, "string"))

    return LoadedTable(frame=df, attributes=attributes, name=str(meta.name))


@dataclass
class ArffReader:
    def read(self, path: Union[str, Path], **kwargs) -> LoadedTable:
        return load_arff_table(path)
