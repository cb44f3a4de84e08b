"""Template context builders."""

from typing import Any, Dict, Optional

from ats.config.models import OrganizationConfig
from ats.domain.models import Application


def build_branding_context(organization: OrganizationConfig) -> Dict[str, Any]:
    """Variables every template needs for the header and signature."""
    return {
        "organization_name": organization.name,
        "team_signature": organization.team_signature,
        "brand_color": organization.brand_color,
    }


def build_status_context(
    application: Application,
    organization: OrganizationConfig,
) -> Dict[str, Any]:
    """Build the context for a status email.

    The caller must have checked that the candidate email and job title are
    present.

    Returns:
        Dictionary with:
        - candidate_name: display name, or "Applicant"
        - position: job title, verbatim
        - location: job location name or None
        - status: application status
        - organization_name, team_signature, brand_color: branding
    """
    job = application.job_posting
    location: Optional[str] = job.location_name if job else None

    return {
        **build_branding_context(organization),
        "candidate_name": application.candidate.display_name,
        "position": job.title,
        "location": location,
        "status": application.status,
    }
