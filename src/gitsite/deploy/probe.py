"""
Existence probe: find the deepest ancestor of a destination that already
exists on the remote branch, and the segments that still have to be created.
"""

from dataclasses import dataclass, field
from typing import Callable, Iterable

from ..utils.paths import get_dirname, get_filename, join_relpath, normalize_relpath


@dataclass
class ProbeResult:
    """
    Attributes:
        existing: Deepest existing ancestor ("" means the repository root)
        pending: Segments to create below existing, outermost first
        checks: Number of existence queries issued
    """
    existing: str
    pending: list[str] = field(default_factory=list)
    checks: int = 0

    @property
    def destination(self) -> str:
        return join_relpath(self.existing, *self.pending)


def probe_destination(path: str, exists: Callable[[str], bool]) -> ProbeResult:
    """
    Walk path upwards until exists() says yes or the path is empty.

    The empty path is the repository root and always counts as existing.
    At most depth(path) + 1 queries are made.
    """
    target = normalize_relpath(path)
    stack: list[str] = []
    checks = 0

    while target:
        checks += 1
        if exists(target):
            break
        stack.append(get_filename(target))
        target = get_dirname(target)
    else:
        # the repository root
        checks += 1

    return ProbeResult(existing=target, pending=list(reversed(stack)), checks=checks)


def tracked_path_exists(tracked_files: Iterable[str], prefix: str = "") -> Callable[[str], bool]:
    """
    Existence predicate over a `git ls-files` listing.

    A path exists if it is a tracked file or has tracked files beneath it.
    Paths are interpreted relative to prefix (the module sub-path).
    """
    tracked = set(tracked_files)
    directories = set()
    for name in tracked:
        parent = get_dirname(name)
        while parent and parent not in directories:
            directories.add(parent)
            parent = get_dirname(parent)

    def exists(path: str) -> bool:
        full = join_relpath(prefix, path)
        if not full:
            return True
        return full in tracked or full in directories

    return exists
