"""Reader base contracts and shared helpers."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Protocol, Union

import pandas as pd

from predeval.components.evaluation.dataset import Attribute


@dataclass
class LoadedTable:
    """Parsed table, optionally with the attribute schema the file declares."""

    frame: pd.DataFrame
    attributes: Optional[List[Attribute]] = None
    name: Optional[str] = None


class Reader(Protocol):
    """Protocol for parsing adapters."""

    def read(self, path: Union[str, Path], **kwargs) -> LoadedTable: ...


def require_file(path: Union[str, Path], *, what: str = "Table") -> Path:
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"{what} file not found: {p}")
    return p
