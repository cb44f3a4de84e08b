"""ATS notifications: candidate status emails and interview scheduling."""

__version__ = "0.1.0"
