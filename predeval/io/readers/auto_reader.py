"""Suffix-dispatching loaders for datasets, split tables and prediction tables."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional, Sequence, Union

import pandas as pd

from predeval.components.evaluation.dataset import Dataset
from predeval.components.evaluation.partitions import SplitAssignment
from predeval.core.errors import ReaderError

from .arff_reader import load_arff_table
from .base import LoadedTable
from .tabular_reader import load_delimited_table

TABULAR_SUFFIXES = {".csv", ".tsv", ".txt"}
ARFF_SUFFIXES = {".arff"}


def read_table(path: Union[str, Path], *, delimiter: Optional[str] = None) -> LoadedTable:
    """Read any supported table by file extension."""

    p = Path(path)
    ext = p.suffix.lower()
    if ext in ARFF_SUFFIXES:
        return load_arff_table(p)
    if ext in TABULAR_SUFFIXES:
        return load_delimited_table(p, delimiter=delimiter)
    raise ReaderError(f"Unsupported table extension: {ext or '(none)'} for {p.name}")


def load_dataset(
    path: Union[str, Path],
    *,
    nominal: Optional[Mapping[str, Sequence[str]]] = None,
    name: Optional[str] = None,
) -> Dataset:
    """Load a dataset with its attribute schema.

    ARFF files declare the schema; for delimited files it is inferred, with
    ``nominal`` pinning the class order of selected columns.
    """

    table = read_table(path)
    label = name or table.name or Path(path).stem
    if table.attributes is not None and not nominal:
        return Dataset(attributes=table.attributes, frame=table.frame, name=label)
    return Dataset.from_frame(table.frame, nominal=nominal, name=label)


def load_splits(path: Union[str, Path]) -> SplitAssignment:
    table = read_table(path)
    try:
        return SplitAssignment.from_frame(table.frame)
    except ValueError as e:
        raise ReaderError(f"{Path(path).name}: {e}") from e


def load_predictions(path: Union[str, Path]) -> pd.DataFrame:
    return read_table(path).frame


@dataclass
class AutoReader:
    delimiter: Optional[str] = None

    def read(self, path: Union[str, Path], **kwargs) -> LoadedTable:
        return read_table(path, delimiter=kwargs.get("delimiter", self.delimiter))
