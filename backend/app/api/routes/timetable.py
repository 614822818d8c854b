from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status

from app.core.config import get_settings
from app.core.exceptions import SchedulerError
from app.schemas.conflict import ConflictReport
from app.schemas.timetable import (
    GenerateTimetableRequest,
    GenerateTimetableResponse,
    TimeSlotOut,
    ValidateTimetableRequest,
)
from app.services.calendar_walker import TIME_SLOTS
from app.services.conflict_service import ConflictService
from app.services.timetable_generator import generate_timetable

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/slots", response_model=list[TimeSlotOut])
def list_time_slots() -> list[TimeSlotOut]:
    return [TimeSlotOut(start=slot.start, end=slot.end) for slot in TIME_SLOTS]


@router.post("/generate", response_model=GenerateTimetableResponse)
def generate(payload: GenerateTimetableRequest) -> GenerateTimetableResponse:
    settings = get_settings()
    span_days = (payload.end_date - payload.start_date).days + 1
    if span_days > settings.max_generation_days:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Date range spans {span_days} days; the maximum is {settings.max_generation_days}",
        )

    logger.info(
        "Generating timetable %s..%s for %d subject(s) and %d professor(s)",
        payload.start_date.isoformat(),
        payload.end_date.isoformat(),
        len(payload.subjects),
        len(payload.professors),
    )
    result = generate_timetable(
        payload.start_date,
        payload.end_date,
        payload.subjects,
        payload.professors,
        payload.holidays,
        daily_cap=settings.daily_subject_hour_cap,
    )
    if not result.succeeded:
        raise SchedulerError(
            message=result.message,
            kind=result.error.value,
            details=result.details,
        )
    return GenerateTimetableResponse(entries=result.entries, slot_count=len(result.entries))


@router.post("/validate", response_model=ConflictReport)
def validate(payload: ValidateTimetableRequest) -> ConflictReport:
    service = ConflictService(
        payload.subjects,
        payload.professors,
        payload.holidays,
        payload.entries,
        daily_cap=get_settings().daily_subject_hour_cap,
    )
    report = service.detect_conflicts()
    if report.conflicts:
        logger.info("Timetable validation found %d conflict(s)", len(report.conflicts))
    return report
