"""Core dependency injection infrastructure for gitsite.

Protocol-based abstractions for every external dependency (filesystem,
subprocess, randomness, configuration, console output) together with their
production implementations.
"""

from gitsite.core.protocols import (
    Logger,
    FileSystemService,
    ProcessExecutor,
    ProcessResult,
    EntropySource,
    ConfigLoader,
)

from gitsite.core.implementations import (
    ConsoleLogger,
    RealFileSystemService,
    SubprocessExecutor,
    SystemEntropySource,
    YamlConfigLoader,
)

__all__ = [
    # Protocols
    "Logger",
    "FileSystemService",
    "ProcessExecutor",
    "ProcessResult",
    "EntropySource",
    "ConfigLoader",
    # Implementations
    "ConsoleLogger",
    "RealFileSystemService",
    "SubprocessExecutor",
    "SystemEntropySource",
    "YamlConfigLoader",
]
