from pydantic import BaseModel
from typing import Literal, List

class ConflictDetail(BaseModel):
    id: str
    conflict_type: Literal[
        "professor_conflict",
        "weekend",
        "invalid_slot",
        "holiday",
        "vacation",
        "daily_cap",
        "prerequisite_order",
        "unknown_subject",
        "professor_mismatch",
        "hour_mismatch",
    ]
    description: str
    severity: Literal["hard", "soft"]
    affected_entries: List[str]  # List of schedule entry IDs involved

class ResolutionAction(BaseModel):
    action_type: Literal["move_entry", "change_professor", "adjust_hours"]
    description: str
    target_entry_id: str | None = None
    parameters: dict  # e.g. {"subject_id": "s1", "expected_hours": 3}

class ConflictReport(BaseModel):
    conflicts: List[ConflictDetail]
    suggested_resolutions: List[ResolutionAction]
