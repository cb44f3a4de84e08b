"""Domain models for applications and interviews."""

from .models import (
    APPLICANT_PLACEHOLDER,
    Application,
    ApplicationStatus,
    Candidate,
    InterviewRequest,
    InterviewUpdate,
    JobPosting,
)

__all__ = [
    "APPLICANT_PLACEHOLDER",
    "Application",
    "ApplicationStatus",
    "Candidate",
    "InterviewRequest",
    "InterviewUpdate",
    "JobPosting",
]
