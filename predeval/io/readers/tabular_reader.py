"""Delimited text table reader (CSV/TSV/TXT)."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

import pandas as pd

from predeval.core.errors import ReaderError

from .base import LoadedTable, require_file


def _read_first_line(path: Path, encoding: Optional[str] = None) -> str:
    with path.open("r", encoding=encoding or "utf-8", errors="replace") as f:
        return f.readline().strip("\n")


def _infer_delimiter(sample_line: str) -> str:
    if "\t" in sample_line:
        return "\t"
    if "," in sample_line:
        return ","
    if ";" in sample_line:
        return ";"
    return "whitespace"


def load_delimited_table(
    file_path: Union[str, Path],
    *,
    delimiter: Optional[str] = None,
    encoding: Optional[str] = None,
) -> LoadedTable:
    """Load a table with a header row from CSV/TSV/TXT.

    - If delimiter is None, it is inferred from the header line.
    - ``?`` cells are read as missing, as in ARFF files.
    """

    path = require_file(file_path)

    delim = delimiter
    if delim is None:
        delim = _infer_delimiter(_read_first_line(path, encoding))
    if delim == "\\t":
        delim = "\t"
    sep = r"\s+" if delim == "whitespace" else delim

    try:
        df = pd.read_csv(
            path.as_posix(),
            sep=sep,
            header=0,
            na_values=["?"],
            skipinitialspace=True,
            encoding=encoding or "utf-8",
            engine="python",
        )
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
        raise ReaderError(f"{path.name}: could not parse table: {e}") from e

    df.columns = [str(c).strip() for c in df.columns]
    return LoadedTable(frame=df, attributes=None, name=path.stem)


@dataclass
class TabularReader:
    delimiter: Optional[str] = None
    encoding: Optional[str] = None

    def read(self, path: Union[str, Path], **kwargs) -> LoadedTable:
        return load_delimited_table(
            path,
            delimiter=kwargs.get("delimiter", self.delimiter),
            encoding=kwargs.get("encoding", self.encoding),
        )
