"""Pydantic schemas for report endpoints."""

from __future__ import annotations

from pydantic import BaseModel


class ReportRequest(BaseModel):
    file_path: str | None = None
    resort: bool | None = None
