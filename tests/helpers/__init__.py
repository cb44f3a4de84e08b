"""Test helper utilities for ATS notification tests."""

from .http import make_response

__all__ = ["make_response"]
