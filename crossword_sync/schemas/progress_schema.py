from pydantic import field_validator
from typing import Optional, List
from datetime import datetime

from crossword_sync.schemas.base_schema import CamelModel


class ProgressSave(CamelModel):
    grid: List[List[str]]

    @field_validator("grid")
    @classmethod
    def normalise_cells(cls, grid):
        """Cells hold a single letter or nothing; letters are stored uppercase"""
        for row in grid:
            for index, value in enumerate(row):
                if value == "":
                    continue
                if len(value) != 1 or not value.isalpha():
                    raise ValueError(f"invalid cell value: {value!r}")
                row[index] = value.upper()
        return grid


class ProgressRead(CamelModel):
    id: str
    session_id: str
    grid: List[List[str]]
    updated_at: Optional[datetime] = None
    updated_by: Optional[str] = None
    submitted_at: Optional[datetime] = None
