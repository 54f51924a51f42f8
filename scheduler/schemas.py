"""Result, view and field-update models shared by the services and routes."""

from datetime import datetime
from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field


class ErrorKind(str, Enum):
    NOT_FOUND = 'not_found'
    CONFLICT = 'conflict'
    INVALID_TRANSITION = 'invalid_transition'
    VALIDATION_FAILURE = 'validation_failure'


class OperationResult(BaseModel):
    """Uniform outcome of a write operation.

    Business-rule failures come back as ``success=False`` with an ``error``
    kind; storage faults are raised instead.
    """

    success: bool
    message: str
    error: ErrorKind | None = None
    availability_id: int | None = None
    appointment_id: int | None = None
    representative_id: int | None = None
    created: bool | None = None

    @classmethod
    def ok(cls, message: str, **ids) -> 'OperationResult':
        return cls(success=True, message=message, **ids)

    @classmethod
    def fail(cls, error: ErrorKind, message: str) -> 'OperationResult':
        return cls(success=False, message=message, error=error)


class BreakTime(BaseModel):
    start: str
    end: str


class AvailabilityResponse(BaseModel):
    id: int
    representative_id: int
    day_of_week: int
    start_time: str
    end_time: str
    slot_duration: int
    break_times: list[BreakTime]

    class Config:
        from_attributes = True


class DayState(str, Enum):
    UNAVAILABLE = 'unavailable'
    AVAILABLE = 'available'
    FULLY_BOOKED = 'fully_booked'


class DaySlotsResponse(BaseModel):
    date: str
    state: DayState
    slots: list[str]


class UserSummary(BaseModel):
    full_name: str
    email: str


class UserContact(BaseModel):
    id: int
    full_name: str
    email: str
    phone: str
    nationality: str


class RepresentativeSummary(BaseModel):
    id: int
    department: str
    title: str
    user: UserSummary


class AppointmentView(BaseModel):
    id: int
    user_id: int
    representative_id: int
    requested_date: str
    requested_time: str
    purpose: str
    description: str
    status: str
    rejection_reason: str | None = None
    notes: str | None = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class RequesterAppointmentView(AppointmentView):
    representative: RepresentativeSummary


class ProviderAppointmentView(AppointmentView):
    user: UserContact


class RepresentativeProfile(BaseModel):
    id: int
    user_id: int
    department: str
    title: str
    specializations: list[str]
    max_appointments_per_day: int

    class Config:
        from_attributes = True


class WeeklyHours(BaseModel):
    day_of_week: int
    start_time: str
    end_time: str
    slot_duration: int


class RepresentativeDirectoryEntry(BaseModel):
    id: int
    department: str
    title: str
    specializations: list[str]
    max_appointments_per_day: int
    user: UserSummary
    availability: list[WeeklyHours]


# Each permitted mutation is its own tagged variant so that callers cannot
# assemble arbitrary column patches.

class DepartmentUpdate(BaseModel):
    field: Literal['department'] = 'department'
    value: str


class TitleUpdate(BaseModel):
    field: Literal['title'] = 'title'
    value: str


class SpecializationsUpdate(BaseModel):
    field: Literal['specializations'] = 'specializations'
    value: list[str]


class MaxAppointmentsPerDayUpdate(BaseModel):
    field: Literal['max_appointments_per_day'] = 'max_appointments_per_day'
    value: int = Field(ge=1)


ProfileFieldUpdate = Annotated[
    Union[DepartmentUpdate, TitleUpdate, SpecializationsUpdate, MaxAppointmentsPerDayUpdate],
    Field(discriminator='field'),
]


class StatusUpdate(BaseModel):
    field: Literal['status'] = 'status'
    value: str


class RejectionReasonUpdate(BaseModel):
    field: Literal['rejection_reason'] = 'rejection_reason'
    value: str


class NotesUpdate(BaseModel):
    field: Literal['notes'] = 'notes'
    value: str


AppointmentFieldUpdate = Annotated[
    Union[StatusUpdate, RejectionReasonUpdate, NotesUpdate],
    Field(discriminator='field'),
]
