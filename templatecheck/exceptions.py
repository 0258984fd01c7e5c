"""Custom exceptions for the template validation engine.

Validation findings are never raised; they are returned as issues inside a
report. The exceptions here cover operational failures only: a repository
that could not be read, or a validation run that could not finish.
"""

from __future__ import annotations


class TemplateCheckError(Exception):
    """Base exception for templatecheck errors."""


class EntryNotFoundError(TemplateCheckError):
    """Raised by an accessor when a path does not exist at the given ref."""

    def __init__(self, path: str, ref: str | None = None) -> None:
        where = f" at {ref}" if ref else ""
        super().__init__(f"Entry not found: {path}{where}")
        self.path = path
        self.ref = ref


class AccessorError(TemplateCheckError):
    """Raised when the repository accessor fails for any reason other than absence."""

    def __init__(self, message: str, path: str | None = None, retryable: bool = False) -> None:
        super().__init__(message)
        self.path = path
        self.retryable = retryable


class ValidationRunError(TemplateCheckError):
    """Raised when a validation run cannot complete (distinct from an invalid template)."""

    def __init__(
        self,
        message: str,
        stage: str,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.stage = stage
        self.cause = cause

    @property
    def retryable(self) -> bool:
        return isinstance(self.cause, AccessorError) and self.cause.retryable
