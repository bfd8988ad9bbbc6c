"""Protocol definitions for dependency injection.

Every external dependency of the deploy pipeline (filesystem, git
subprocesses, configuration files, randomness, console output) is expressed
as a Protocol. Any class implementing the methods satisfies the Protocol
without explicit inheritance, so tests can pass a Mock(spec=...) or a small
fake instead of touching the real system.
"""

from typing import Protocol, Dict, Any, Optional, List, Union, Iterator
from pathlib import Path


class Logger(Protocol):
    """Abstraction for logging operations."""

    def info(self, message: str) -> None:
        """Log informational message."""
        ...

    def warning(self, message: str) -> None:
        """Log warning message."""
        ...

    def error(self, message: str) -> None:
        """Log error message."""
        ...

    def debug(self, message: str) -> None:
        """Log debug message."""
        ...


class FileSystemService(Protocol):
    """Abstraction for filesystem operations used by the scratch checkout."""

    def exists(self, path: Union[str, Path]) -> bool:
        """Check if path exists."""
        ...

    def is_file(self, path: Union[str, Path]) -> bool:
        """Check if path is a file."""
        ...

    def is_dir(self, path: Union[str, Path]) -> bool:
        """Check if path is a directory."""
        ...

    def read_file(self, path: Union[str, Path]) -> str:
        """Read entire file as string."""
        ...

    def write_temp_file(self, content: str, prefix: str, suffix: str) -> str:
        """Write content to a new temporary file and return its path."""
        ...

    def remove(self, path: Union[str, Path]) -> None:
        """Remove a single file."""
        ...

    def mkdir(self, path: Union[str, Path], parents: bool = True, exist_ok: bool = True) -> None:
        """Create directory (with parents if specified)."""
        ...

    def rmtree(self, path: Union[str, Path]) -> None:
        """Recursively remove directory tree."""
        ...

    def clean_directory(self, path: Union[str, Path]) -> None:
        """Remove everything inside a directory, keeping the directory."""
        ...

    def copy_file(self, source: Union[str, Path], destination: Union[str, Path]) -> None:
        """Copy a single file, creating the destination's parent."""
        ...

    def copy_tree(self, source: Union[str, Path], destination: Union[str, Path]) -> None:
        """Copy a directory tree, merging into an existing destination."""
        ...

    def iterdir(self, path: Union[str, Path]) -> Iterator[Path]:
        """Iterate over directory contents."""
        ...

    def glob(self, path: Union[str, Path], pattern: str) -> List[Path]:
        """Find all entries matching glob pattern."""
        ...

    def same_path(self, first: Union[str, Path], second: Union[str, Path]) -> bool:
        """Check whether two paths resolve to the same location."""
        ...


class ProcessResult(Protocol):
    """Abstraction for a finished subprocess (subprocess.CompletedProcess)."""

    returncode: int
    stdout: str
    stderr: str


class ProcessExecutor(Protocol):
    """Abstraction for blocking process execution.

    Wraps subprocess.run so the git pipeline can be tested without
    spawning real processes.
    """

    def run(
        self,
        cmd: List[str],
        cwd: Optional[str] = None,
        env: Optional[Dict[str, str]] = None
    ) -> ProcessResult:
        """Run command to completion, capturing stdout/stderr as text."""
        ...


class EntropySource(Protocol):
    """Abstraction for randomness used when naming scratch directories."""

    def next_int(self) -> int:
        """Return a non-negative random integer."""
        ...


class ConfigLoader(Protocol):
    """Abstraction for configuration file loading."""

    def load_yaml(self, path: str) -> Dict[str, Any]:
        """Load YAML file and return parsed dictionary."""
        ...
