"""
Site deployment subsystem.

Provides a protocol-based transport that publishes generated site
documentation to a git pages branch:
    - GitSiteDeployer: scratch clone + git add/commit/push

Public API:
    - Transport: Protocol interface
    - DeployerFactory: Parse repository URLs
    - DeploymentResult, CleanupResult, ConnectionState: Result/state types
    - DeploymentError and subclasses, UnsupportedOperationError: Exceptions
    - GitSiteDeployer: git implementation
"""

from .base import (
    Transport,
    AuthenticationInfo,
    ConnectionState,
    DeploymentResult,
    CleanupResult,
)
from .factory import DeployerFactory, RemoteDescriptor, parse_repository_url
from .exceptions import (
    DeploymentError,
    TransportSetupError,
    ConnectionStateError,
    CommandFailedError,
    NothingStagedError,
    ResourceDoesNotExistError,
    UnsupportedOperationError,
    ConfigError,
)
from .git_site import GitSiteDeployer

__all__ = [
    # Protocol and types
    "Transport",
    "AuthenticationInfo",
    "ConnectionState",
    "DeploymentResult",
    "CleanupResult",
    "RemoteDescriptor",

    # Factory
    "DeployerFactory",
    "parse_repository_url",

    # Exceptions
    "DeploymentError",
    "TransportSetupError",
    "ConnectionStateError",
    "CommandFailedError",
    "NothingStagedError",
    "ResourceDoesNotExistError",
    "UnsupportedOperationError",
    "ConfigError",

    # Implementations
    "GitSiteDeployer",
]
