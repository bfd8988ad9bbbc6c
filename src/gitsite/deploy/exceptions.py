"""
Deployment exceptions.

Custom exceptions for site deployment failures with actionable error messages.
Everything that fails a deploy derives from DeploymentError, so callers can
catch one type; unsupported operations are deliberately outside that tree.
"""

from typing import Optional

from ..utils.paths import redact_credentials


class DeploymentError(Exception):
    """
    Raised when a deploy fails at any step.

    Examples:
        - git init / remote / commit / push failed
        - Nothing could be staged for a new destination
        - Filesystem copy into the scratch checkout failed
    """
    pass


class TransportSetupError(DeploymentError):
    """
    Raised before any git command runs when the transport cannot be set up.

    Examples:
        - Repository URL is empty or uses an unsupported provider (scm:svn:...)
        - git executable not found on PATH
    """
    pass


class ConnectionStateError(DeploymentError):
    """Raised when an operation is called in the wrong connection state."""
    pass


class CommandFailedError(DeploymentError):
    """
    Raised when a git command exits non-zero and the step cannot continue.

    Attributes:
        step: Pipeline step that failed (e.g. "git-commit")
        outcome: CommandOutcome with argv, exit code and captured output
    """

    def __init__(self, step: str, outcome, message: Optional[str] = None):
        self.step = step
        self.outcome = outcome
        stderr = redact_credentials((outcome.stderr or "").strip()) if outcome is not None else ""
        text = message or f"The {step} command failed."
        if outcome is not None:
            text += f" (exit code {outcome.exit_code})"
        if stderr:
            text += f"\n{stderr}"
        super().__init__(text)


class NothingStagedError(DeploymentError):
    """
    Raised when a new destination was copied but git staged zero files.

    The add commands themselves reported success, so this is kept distinct
    from CommandFailedError.
    """
    pass


class ResourceDoesNotExistError(DeploymentError):
    """Raised when a listed path has no tracked files on the remote branch."""
    pass


class UnsupportedOperationError(NotImplementedError):
    """Raised by get/get_if_newer: the transport only deploys, never fetches."""
    pass


class ConfigError(ValueError):
    """Raised when a configuration file is malformed."""
    pass
