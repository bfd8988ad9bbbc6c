"""Production implementations of dependency injection protocols.

These wrap the real filesystem, subprocess, random and YAML modules.
Tests use mocks or the real classes against a temporary directory.
"""

import os
import random
import shutil
import subprocess
import sys
import tempfile
import yaml
from pathlib import Path
from typing import Dict, Any, Optional, List, Union, Iterator


class ConsoleLogger:
    """Production logger that prints to console (stdout/stderr)."""

    def __init__(self, verbose: bool = False):
        self.verbose = verbose

    def info(self, message: str) -> None:
        """Print info message to stdout."""
        print(message)

    def warning(self, message: str) -> None:
        """Print warning message to stdout."""
        print(f"Warning: {message}")

    def error(self, message: str) -> None:
        """Print error message to stderr."""
        print(f"Error: {message}", file=sys.stderr)

    def debug(self, message: str) -> None:
        """Print debug message to stdout when verbose."""
        if self.verbose:
            print(f"Debug: {message}")


class RealFileSystemService:
    """Production filesystem service using real pathlib and shutil operations."""

    def exists(self, path: Union[str, Path]) -> bool:
        return Path(path).exists()

    def is_file(self, path: Union[str, Path]) -> bool:
        return Path(path).is_file()

    def is_dir(self, path: Union[str, Path]) -> bool:
        return Path(path).is_dir()

    def read_file(self, path: Union[str, Path]) -> str:
        with open(path, 'r') as f:
            return f.read()

    def write_temp_file(self, content: str, prefix: str, suffix: str) -> str:
        """Write content to a NamedTemporaryFile that outlives the handle."""
        with tempfile.NamedTemporaryFile(
            mode='w',
            prefix=prefix,
            suffix=suffix,
            delete=False
        ) as f:
            f.write(content)
            return f.name

    def remove(self, path: Union[str, Path]) -> None:
        os.remove(path)

    def mkdir(self, path: Union[str, Path], parents: bool = True, exist_ok: bool = True) -> None:
        Path(path).mkdir(parents=parents, exist_ok=exist_ok)

    def rmtree(self, path: Union[str, Path]) -> None:
        shutil.rmtree(path)

    def clean_directory(self, path: Union[str, Path]) -> None:
        for entry in Path(path).iterdir():
            if entry.is_dir() and not entry.is_symlink():
                shutil.rmtree(entry)
            else:
                entry.unlink()

    def copy_file(self, source: Union[str, Path], destination: Union[str, Path]) -> None:
        Path(destination).parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(source, destination)

    def copy_tree(self, source: Union[str, Path], destination: Union[str, Path]) -> None:
        shutil.copytree(source, destination, dirs_exist_ok=True)

    def iterdir(self, path: Union[str, Path]) -> Iterator[Path]:
        return Path(path).iterdir()

    def glob(self, path: Union[str, Path], pattern: str) -> List[Path]:
        return list(Path(path).glob(pattern))

    def same_path(self, first: Union[str, Path], second: Union[str, Path]) -> bool:
        return Path(first).resolve() == Path(second).resolve()


class SubprocessExecutor:
    """Production process executor using real subprocess.run."""

    def run(
        self,
        cmd: List[str],
        cwd: Optional[str] = None,
        env: Optional[Dict[str, str]] = None
    ) -> subprocess.CompletedProcess:
        """Run command, never raising on a non-zero exit code."""
        return subprocess.run(
            cmd,
            cwd=cwd,
            env=env,
            check=False,
            capture_output=True,
            text=True
        )


class SystemEntropySource:
    """Production entropy source backed by random.Random."""

    def __init__(self, seed: Optional[int] = None):
        self._random = random.Random(seed)

    def next_int(self) -> int:
        return self._random.randrange(0, 2**31)


class YamlConfigLoader:
    """Production config loader using real YAML parser."""

    def __init__(self, filesystem: RealFileSystemService):
        """Initialize with filesystem service for reading files."""
        self.fs = filesystem

    def load_yaml(self, path: str) -> Dict[str, Any]:
        """Load YAML file and return parsed dictionary (empty file -> {})."""
        content = self.fs.read_file(path)
        return yaml.safe_load(content) or {}
