"""Core domain models for applications and interviews.

These are read-only snapshots handed in by the caller (the route layer owns
persistence):
- Candidate, JobPosting, Application: the data a status email is built from
- InterviewRequest, InterviewUpdate: inputs for calendar scheduling
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator

APPLICANT_PLACEHOLDER = "Applicant"


class ApplicationStatus(str, Enum):
    """Pipeline stages an application can be in."""

    APPLIED = "applied"
    IN_REVIEW = "in_review"
    SCREENING = "screening"
    INTERVIEW = "interview"
    INTERVIEWED = "interviewed"
    OFFERED = "offered"
    HIRED = "hired"
    REJECTED = "rejected"


def _strip_optional(v: Optional[str]) -> Optional[str]:
    if v is None:
        return None
    stripped = v.strip()
    return stripped or None


class Candidate(BaseModel):
    """Candidate fields used for email personalization."""

    first_name: Optional[str] = Field(None, description="Given name")
    last_name: Optional[str] = Field(None, description="Family name")
    name: Optional[str] = Field(None, description="Free-form full name, if stored that way")
    email: Optional[str] = Field(None, description="Contact address")

    @field_validator("first_name", "last_name", "name", "email")
    @classmethod
    def strip_fields(cls, v: Optional[str]) -> Optional[str]:
        """Strip whitespace; blank strings become None."""
        return _strip_optional(v)

    @property
    def display_name(self) -> str:
        """Name used in the greeting line.

        First and last name when a first name is known, then the free-form
        name, then a generic placeholder.
        """
        if self.first_name:
            return " ".join(part for part in (self.first_name, self.last_name) if part)
        if self.name:
            return self.name
        return APPLICANT_PLACEHOLDER


class JobPosting(BaseModel):
    """Job posting fields used for email personalization."""

    title: Optional[str] = Field(None, description="Position title")
    location_name: Optional[str] = Field(None, description="Work location, if any")

    @field_validator("title", "location_name")
    @classmethod
    def strip_fields(cls, v: Optional[str]) -> Optional[str]:
        """Strip whitespace; blank strings become None."""
        return _strip_optional(v)


class Application(BaseModel):
    """Snapshot of an application with its candidate and job denormalized.

    ``status`` is kept as a plain string so legacy or intermediate values
    coming from storage are accepted and simply have no template.
    """

    id: Optional[int] = Field(None, description="Application id, for log correlation")
    status: str = Field(..., description="Current pipeline stage")
    candidate: Optional[Candidate] = None
    job_posting: Optional[JobPosting] = None

    @field_validator("status", mode="before")
    @classmethod
    def normalize_status(cls, v):
        """Accept enum members and normalize case/whitespace."""
        if isinstance(v, ApplicationStatus):
            return v.value
        if isinstance(v, str):
            return v.strip().lower()
        return v


class InterviewRequest(BaseModel):
    """Everything needed to book an interview on the calendar."""

    candidate_name: str = Field(..., min_length=1)
    candidate_email: EmailStr
    interviewer_name: str = Field(..., min_length=1)
    interviewer_email: EmailStr
    position: str = Field(..., min_length=1)
    start: datetime = Field(..., description="Start time; naive values use the calendar timezone")
    end: Optional[datetime] = Field(None, description="End time; defaults to start + 45 minutes")
    location: Optional[str] = None
    is_video_interview: bool = False
    notes: Optional[str] = None
    candidate_id: Optional[int] = None
    application_id: Optional[int] = None

    @field_validator("candidate_name", "interviewer_name", "position")
    @classmethod
    def strip_required(cls, v: str) -> str:
        """Strip whitespace from required text fields."""
        stripped = v.strip()
        if not stripped:
            raise ValueError("Field cannot be empty or whitespace-only")
        return stripped

    @field_validator("location", "notes")
    @classmethod
    def strip_optional(cls, v: Optional[str]) -> Optional[str]:
        """Strip whitespace; blank strings become None."""
        return _strip_optional(v)

    @model_validator(mode="after")
    def validate_time_range(self):
        """End must come after start when given."""
        if self.end is not None and _comparable(self.end, self.start) <= 0:
            raise ValueError("end must be after start")
        return self


class InterviewUpdate(BaseModel):
    """Partial changes to an existing interview event. Unset fields are left alone."""

    start: Optional[datetime] = None
    end: Optional[datetime] = None
    notes: Optional[str] = None
    position: Optional[str] = None
    location: Optional[str] = None
    is_video_interview: Optional[bool] = None

    @field_validator("notes", "position", "location")
    @classmethod
    def strip_optional(cls, v: Optional[str]) -> Optional[str]:
        """Strip whitespace; blank strings become None."""
        return _strip_optional(v)

    @model_validator(mode="after")
    def validate_time_range(self):
        """End must come after start when both are given."""
        if self.start is not None and self.end is not None:
            if _comparable(self.end, self.start) <= 0:
                raise ValueError("end must be after start")
        return self

    def is_empty(self) -> bool:
        """True when no field was provided."""
        return not self.model_dump(exclude_none=True)


def _comparable(a: datetime, b: datetime) -> float:
    # Mixed naive/aware pairs are compared on wall-clock time
    if (a.tzinfo is None) != (b.tzinfo is None):
        a = a.replace(tzinfo=None)
        b = b.replace(tzinfo=None)
    return (a - b).total_seconds()
