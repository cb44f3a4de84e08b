"""Soft checks on raw configuration that produce warnings, not errors."""

import warnings
from typing import Any, Dict, List


def check_for_warnings(config_dict: Dict[str, Any]) -> List[str]:
    """
    Check configuration for potential issues and return warnings.

    Args:
        config_dict: Raw configuration dictionary

    Returns:
        List of warning messages
    """
    warning_messages = []

    known_sections = {"organization", "email", "calendar", "logging", "advanced"}
    for key in config_dict:
        if key not in known_sections:
            warning_messages.append(f"Unknown configuration section '{key}' will be ignored")

    email = config_dict.get("email", {})
    if isinstance(email, dict):
        port = email.get("smtp_port")
        if port == 465 and email.get("use_tls") is False:
            warning_messages.append(
                "smtp_port 465 always uses implicit TLS; use_tls=false has no effect"
            )
        elif isinstance(port, int) and port not in (465, 587) and email.get("use_tls", True):
            warning_messages.append(
                f"smtp_port {port} is unusual for STARTTLS; Gmail expects 587 or 465"
            )

    advanced = config_dict.get("advanced", {})
    if isinstance(advanced, dict):
        timeout = advanced.get("http_request_timeout")
        if isinstance(timeout, int) and timeout > 60:
            warning_messages.append(
                f"Long http_request_timeout ({timeout}s) may exceed the caller's request deadline"
            )

    return warning_messages


def emit_warnings(warning_messages: List[str]) -> None:
    """
    Emit warning messages using Python's warnings module.

    Args:
        warning_messages: List of warning messages to emit
    """
    for message in warning_messages:
        warnings.warn(message, UserWarning, stacklevel=2)
