"""Configuration errors."""

from typing import List, Optional, Sequence


class ConfigurationError(Exception):
    """Raised when settings from YAML or the environment cannot be used.

    Attributes:
        message: One-line summary
        errors: Individual problems, e.g. one per invalid field
        suggestions: Hints shown to the operator below the errors
    """

    def __init__(
        self,
        message: str,
        errors: Optional[Sequence[str]] = None,
        suggestions: Optional[Sequence[str]] = None,
    ):
        self.message = message
        self.errors: List[str] = list(errors or [])
        self.suggestions: List[str] = list(suggestions or [])
        super().__init__(self.describe())

    def describe(self) -> str:
        """Render the summary, numbered errors and suggestions as one block."""
        lines = [self.message]
        if self.errors:
            lines += ["", "Validation Errors:"]
            lines += [f"  {n}. {text}" for n, text in enumerate(self.errors, start=1)]
        if self.suggestions:
            lines += ["", "Suggestions:"]
            lines += [f"  - {text}" for text in self.suggestions]
        return "\n".join(lines)
