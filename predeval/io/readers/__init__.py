"""Readers for evaluation inputs.

- ``.arff``: :func:`load_arff_table` (schema declared by the file)
- ``.csv`` / ``.tsv`` / ``.txt``: :func:`load_delimited_table` (schema inferred)
"""

from .arff_reader import ArffReader, load_arff_table
from .auto_reader import AutoReader, load_dataset, load_predictions, load_splits, read_table
from .base import LoadedTable, Reader
from .tabular_reader import TabularReader, load_delimited_table

__all__ = [
    "ArffReader",
    "AutoReader",
    "LoadedTable",
    "Reader",
    "TabularReader",
    "load_arff_table",
    "load_dataset",
    "load_delimited_table",
    "load_predictions",
    "load_splits",
    "read_table",
]
