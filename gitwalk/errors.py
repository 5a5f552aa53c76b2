"""Centralized exception hierarchy for gitwalk.

This module defines all custom exceptions used throughout gitwalk,
organized in a hierarchy so the CLI can tell fatal environment problems
apart from recoverable command failures.
"""

from __future__ import annotations

from typing import Any, Optional


class GitwalkError(Exception):
    """Base exception for all gitwalk errors.

    Attributes:
        message: Human-readable error message.
        code: Optional error code for programmatic handling.
        details: Optional dictionary with additional error context.
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for logging."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "code": self.code,
            "details": self.details,
        }


# =============================================================================
# Configuration Errors
# =============================================================================

class ConfigurationError(GitwalkError):
    """Raised when there's a configuration problem."""
    pass


class InvalidConfigError(ConfigurationError):
    """Raised when configuration values are invalid."""

    def __init__(self, field: str, value: Any, reason: str):
        super().__init__(
            message=f"Invalid configuration for '{field}': {reason}",
            code="INVALID_CONFIG",
            details={"field": field, "value": str(value)[:100], "reason": reason},
        )


# =============================================================================
# Environment Errors
# =============================================================================

class EnvironmentCheckError(GitwalkError):
    """Raised by pre-flight checks. Always fatal."""
    pass


class GitNotInstalledError(EnvironmentCheckError):
    """Raised when the git executable cannot be found."""

    def __init__(self, executable: str = "git"):
        super().__init__(
            message=f"{executable} is not installed. Please install git first.",
            code="GIT_NOT_INSTALLED",
            details={"executable": executable},
        )


class NotARepositoryError(EnvironmentCheckError):
    """Raised when the working directory is not inside a git repository."""

    def __init__(self, path: str):
        super().__init__(
            message=f"Not in a git repository: {path}",
            code="NOT_A_REPOSITORY",
            details={"path": path},
        )


# =============================================================================
# Git Errors
# =============================================================================

class GitError(GitwalkError):
    """Raised when a git query fails."""

    def __init__(
        self,
        message: str,
        returncode: Optional[int] = None,
        stderr: Optional[str] = None,
    ):
        details = {}
        if returncode is not None:
            details["returncode"] = returncode
        if stderr:
            details["stderr"] = stderr[:500]
        super().__init__(message, "GIT_ERROR", details)
        self.returncode = returncode
        self.stderr = stderr


class StatusParseError(GitwalkError):
    """Raised when a status line carries an unrecognized two-character code.

    Never recovered from: guessing the state could lead to an unintended
    commit or push.
    """

    def __init__(self, line: str, reason: str = "unrecognized status code"):
        super().__init__(
            message=f"Unrecognized git status line {line!r}: {reason}",
            code="STATUS_PARSE_ERROR",
            details={"line": line[:200], "reason": reason},
        )
        self.line = line


ParseError = StatusParseError


# =============================================================================
# Commit Message Generator Errors
# =============================================================================

class GeneratorError(GitwalkError):
    """Raised when the commit message generator fails."""

    def __init__(self, command: str, reason: str, stderr: Optional[str] = None):
        details = {"command": command, "reason": reason}
        if stderr:
            details["stderr"] = stderr[:500]
        super().__init__(
            message=f"{command} failed: {reason}",
            code="GENERATOR_ERROR",
            details=details,
        )
        self.stderr = stderr


class GeneratorUnavailableError(GeneratorError):
    """Raised when the commit message generator is not installed."""

    def __init__(self, command: str, install_hint: Optional[str] = None):
        super().__init__(command, "not installed")
        self.message = f"{command} is not installed."
        if install_hint:
            self.message += f" Please install it first, see: {install_hint}"
        self.code = "GENERATOR_UNAVAILABLE"
        self.args = (self.message,)


# =============================================================================
# Flow Errors
# =============================================================================

class FlowError(GitwalkError):
    """Base exception for interactive flow errors."""
    pass


class MenuDefinitionError(FlowError):
    """Raised when a menu is built with invalid or colliding keys.

    This is a programming error in a menu definition, never a user error.
    """

    def __init__(self, key: str, reason: str):
        super().__init__(
            message=f"Invalid menu key {key!r}: {reason}",
            code="MENU_DEFINITION_ERROR",
            details={"key": key, "reason": reason},
        )


class InputAbortedError(FlowError):
    """Raised when the user aborts input with Ctrl-C or end of file."""

    def __init__(self):
        super().__init__(message="Aborted.", code="INPUT_ABORTED")


class QuitRequested(FlowError):
    """Raised when the user picks quit inside a nested selection."""

    def __init__(self):
        super().__init__(message="Quit requested.", code="QUIT_REQUESTED")
