"""
Transport Protocol - interface a site deployer exposes to its caller.

The lifecycle mirrors a build tool's upload transport: connect, one or more
puts, close. Fetch operations are part of the interface only so they can
fail loudly.
"""

from enum import Enum
from pathlib import Path
from typing import Protocol, Optional, Union, runtime_checkable
from dataclasses import dataclass, field


class ConnectionState(Enum):
    """Linear lifecycle of one connection."""
    DISCONNECTED = "disconnected"
    CONNECTED = "connected"
    CHECKED_OUT = "checked_out"
    MERGED = "merged"
    COMMITTED_PUSHED = "committed_pushed"


@dataclass
class DeploymentResult:
    """
    Result of a successful put.

    Attributes:
        success: Whether deployment succeeded
        remote_url: Clone URL that was pushed to (credentials redacted)
        branch: Remote branch that received the push
        destination: Repository-relative path the content landed at
        staged_files: Number of files explicitly staged with git add
        committed_files: Paths reported by git status before the commit
        branch_created: True when the branch did not exist before this push
        metadata: Scratch directory, commit message, etc.
    """
    success: bool
    remote_url: str
    branch: str
    destination: str
    staged_files: int
    committed_files: list[str] = field(default_factory=list)
    branch_created: bool = False
    metadata: dict[str, object] = field(default_factory=dict)


@dataclass
class CleanupResult:
    """
    Result of cleanup operation.

    Attributes:
        success: Whether cleanup succeeded
        errors: List of non-fatal issues encountered during cleanup
    """
    success: bool
    errors: list[str]


@dataclass(frozen=True)
class AuthenticationInfo:
    """Credentials supplied on connect. All fields optional."""
    username: Optional[str] = None
    password: Optional[str] = None
    private_key: Optional[str] = None
    passphrase: Optional[str] = None


@runtime_checkable
class Transport(Protocol):
    """
    Interface for site deployment transports.

    Implementations:
        - GitSiteDeployer: scratch clone + git push to a pages branch
    """

    def connect(self, repository_url: str, credentials: Optional[AuthenticationInfo] = None) -> None:
        """
        Parse the repository URL and allocate the scratch checkout.

        Raises:
            TransportSetupError: If the URL has no matching provider
        """
        ...

    def put(self, source: Union[str, Path], destination: str) -> DeploymentResult:
        """Deploy a single file to destination (a repository-relative file path)."""
        ...

    def put_directory(self, source: Union[str, Path], destination: str) -> DeploymentResult:
        """Deploy a directory tree into destination (a repository-relative directory)."""
        ...

    def get_file_list(self, path: str) -> list[str]:
        """List tracked paths under path on the remote branch (no content fetched)."""
        ...

    def get(self, resource: str, destination: Union[str, Path]) -> None:
        """Not supported; always raises UnsupportedOperationError."""
        ...

    def get_if_newer(self, resource: str, destination: Union[str, Path], timestamp: float) -> bool:
        """Not supported; always raises UnsupportedOperationError."""
        ...

    def close(self) -> CleanupResult:
        """
        Remove the scratch checkout.

        Note:
            Must not raise exceptions (errors go in CleanupResult.errors)
        """
        ...
