import re
from datetime import date

from pydantic import BaseModel, Field, field_validator, model_validator

TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def parse_time_to_minutes(value: str) -> int:
    if not TIME_PATTERN.match(value):
        raise ValueError("Time must be in HH:MM 24-hour format")
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


class Vacation(BaseModel):
    id: str | None = Field(default=None, max_length=64)
    start_date: date = Field(alias="startDate")
    end_date: date = Field(alias="endDate")

    model_config = {"populate_by_name": True}

    @model_validator(mode="after")
    def validate_date_order(self) -> "Vacation":
        if self.end_date < self.start_date:
            raise ValueError("endDate must not be before startDate")
        return self

    def covers(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date


class Professor(BaseModel):
    id: str = Field(min_length=1, max_length=64)
    name: str = Field(min_length=1, max_length=200)
    vacations: list[Vacation] = Field(default_factory=list)


class Subject(BaseModel):
    id: str = Field(min_length=1, max_length=64)
    name: str = Field(min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=2000)
    total_hours: int = Field(alias="totalHours", ge=1, le=10_000)
    professor_id: str | None = Field(default=None, alias="professorId", max_length=64)
    prerequisite_ids: list[str] = Field(default_factory=list, alias="prerequisiteIds")

    model_config = {"populate_by_name": True}

    @field_validator("prerequisite_ids", mode="before")
    @classmethod
    def default_prerequisites(cls, value: list[str] | None) -> list[str]:
        return [] if value is None else value


class Holiday(BaseModel):
    """An institute-wide block. Without both bounds the whole date is blocked."""

    id: str = Field(min_length=1, max_length=64)
    name: str = Field(min_length=1, max_length=200)
    date: date
    start_time: str | None = Field(default=None, alias="startTime")
    end_time: str | None = Field(default=None, alias="endTime")

    model_config = {"populate_by_name": True}

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def blank_time_to_none(cls, value):
        return None if value == "" else value

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time(cls, value: str | None) -> str | None:
        if value is None:
            return None
        if not TIME_PATTERN.match(value):
            raise ValueError("Time must be in HH:MM 24-hour format")
        return value

    @model_validator(mode="after")
    def validate_time_order(self) -> "Holiday":
        if self.start_time and self.end_time:
            if parse_time_to_minutes(self.end_time) <= parse_time_to_minutes(self.start_time):
                raise ValueError("endTime must be after startTime")
        return self

    @property
    def is_full_day(self) -> bool:
        return not self.start_time or not self.end_time


class ScheduleEntry(BaseModel):
    id: str = Field(min_length=1, max_length=200)
    subject_id: str = Field(alias="subjectId")
    professor_id: str | None = Field(default=None, alias="professorId")
    date: date
    start_time: str = Field(alias="startTime")
    end_time: str = Field(alias="endTime")

    model_config = {"populate_by_name": True}

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time(cls, value: str) -> str:
        if not TIME_PATTERN.match(value):
            raise ValueError("Time must be in HH:MM 24-hour format")
        return value


class TimeSlotOut(BaseModel):
    start: str
    end: str


def _duplicates(values: list[str]) -> list[str]:
    seen: set[str] = set()
    duplicates: set[str] = set()
    for value in values:
        if value in seen:
            duplicates.add(value)
        else:
            seen.add(value)
    return sorted(duplicates)


class SchedulingInputs(BaseModel):
    subjects: list[Subject] = Field(default_factory=list)
    professors: list[Professor] = Field(default_factory=list)
    holidays: list[Holiday] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_unique_ids(self) -> "SchedulingInputs":
        duplicate_subjects = _duplicates([subject.id for subject in self.subjects])
        if duplicate_subjects:
            raise ValueError(f"Duplicate subject ids: {', '.join(duplicate_subjects)}")
        duplicate_professors = _duplicates([professor.id for professor in self.professors])
        if duplicate_professors:
            raise ValueError(f"Duplicate professor ids: {', '.join(duplicate_professors)}")
        return self


class GenerateTimetableRequest(SchedulingInputs):
    start_date: date = Field(alias="startDate")
    end_date: date = Field(alias="endDate")

    model_config = {"populate_by_name": True}

    @model_validator(mode="after")
    def validate_date_range(self) -> "GenerateTimetableRequest":
        if self.start_date >= self.end_date:
            raise ValueError("endDate must be after startDate")
        return self


class GenerateTimetableResponse(BaseModel):
    entries: list[ScheduleEntry]
    slot_count: int = Field(alias="slotCount")

    model_config = {"populate_by_name": True}


class ValidateTimetableRequest(SchedulingInputs):
    entries: list[ScheduleEntry] = Field(default_factory=list)
