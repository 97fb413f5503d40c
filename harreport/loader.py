"""Load saved analysis responses from disk."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from harreport.errors import AnalysisFailure
from harreport.schemas import AnalysisEnvelope


def load_analysis(path: str | Path) -> AnalysisEnvelope:
    """Load a saved analysis as a response envelope.

    The file may hold a full ``{success, data, ...}`` envelope or a bare
    analysis result; JSON and YAML are both accepted. A bare result is
    wrapped as a successful, non-cached envelope.
    """
    with open(path, encoding="utf-8") as f:
        try:
            payload: Any = yaml.safe_load(f)
        except (yaml.YAMLError, UnicodeDecodeError) as exc:
            raise AnalysisFailure(f"Could not parse {path}: {exc}") from exc

    if not isinstance(payload, dict):
        raise AnalysisFailure(f"{path} does not contain an analysis object")
    if "success" not in payload:
        return AnalysisEnvelope(success=True, data=payload, cached=False)
    try:
        return AnalysisEnvelope.model_validate(payload)
    except ValidationError as exc:
        raise AnalysisFailure(f"{path} is not a valid analysis response") from exc
