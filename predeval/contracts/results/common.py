"""Result contracts.

Evaluation outputs are plain pydantic models so callers can serialize them
with ``model_dump`` / ``model_dump_json`` and store or upload them as-is.
Unknown fields are rejected so a renamed field fails loudly instead of being
silently dropped.
"""

from __future__ import annotations

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict


class ResultModel(BaseModel):
    """Base class for evaluation results (strict by default)."""

    model_config = ConfigDict(extra="forbid")


JSONDict = Dict[str, Any]
