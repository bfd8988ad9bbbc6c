"""Path and URL helpers for the deploy pipeline.

All repository-relative paths are git-style (forward slashes, no leading
slash). Nothing here touches the filesystem directly: existence checks and
randomness are passed in so the helpers stay deterministic under test.
"""

import re
from pathlib import Path
from typing import Callable, Tuple, Union

SCRATCH_PREFIX = "gitsite-scm"
SCRATCH_SUFFIX = ".checkout"
SCRATCH_GLOB = f"{SCRATCH_PREFIX}*{SCRATCH_SUFFIX}"

_GIT_SEGMENT_RE = re.compile(r'\.git(?=/|$)')

_CREDENTIALS_RE = re.compile(r'(?P<scheme>[a-zA-Z][a-zA-Z0-9+.-]*://)(?P<userinfo>[^/@\s]+)@')


def normalize_relpath(path: str) -> str:
    """Convert to forward slashes and strip leading/trailing separators."""
    return path.replace("\\", "/").strip("/")


def get_filename(path: str) -> str:
    """Last segment of a repository-relative path ("a/b/c.html" -> "c.html")."""
    path = normalize_relpath(path)
    return path.rsplit("/", 1)[-1] if path else ""


def get_dirname(path: str) -> str:
    """Parent of a repository-relative path ("a/b/c.html" -> "a/b", "c" -> "")."""
    path = normalize_relpath(path)
    if "/" not in path:
        return ""
    return path.rsplit("/", 1)[0]


def join_relpath(*parts: str) -> str:
    """Join repository-relative fragments, dropping empty ones."""
    return "/".join(p for p in (normalize_relpath(part) for part in parts) if p)


def strip_module_suffix(url: str) -> Tuple[str, str]:
    """Split a module URL at its last ``.git`` path segment.

    A module URL encodes a sub-path after the repository's clone URL::

        ssh://github.com/auser/project.git/module -> ("ssh://github.com/auser/project.git", "module/")

    Only a ``.git`` that ends the URL or is followed by ``/`` counts, so
    names such as ``me.github.io`` are left alone.

    Returns:
        (clone_url, prefix) where prefix is "" or ends with "/".
        URLs without a ``.git`` segment, or ending exactly at it, are
        returned unchanged with an empty prefix.
    """
    matches = list(_GIT_SEGMENT_RE.finditer(url))
    if not matches or matches[-1].start() == 0:
        return url, ""

    end = matches[-1].end()
    if end == len(url):
        return url, ""

    remainder = normalize_relpath(url[end:])
    return url[:end], (remainder + "/") if remainder else ""


def make_scratch_path(
    root: Union[str, Path],
    next_int: Callable[[], int],
    exists: Callable[[Path], bool]
) -> Path:
    """Pick a scratch checkout path under root that does not exist yet.

    Args:
        root: Parent directory (normally the process temp dir)
        next_int: Entropy source returning non-negative integers
        exists: Existence check for candidate paths

    Returns:
        root/gitsite-scm<digits>.checkout, guaranteed absent when checked
    """
    while True:
        candidate = Path(root) / f"{SCRATCH_PREFIX}{abs(next_int()):05d}{SCRATCH_SUFFIX}"
        if not exists(candidate):
            return candidate


def redact_credentials(text: str) -> str:
    """Mask user:password@ sections of any URLs embedded in text."""
    return _CREDENTIALS_RE.sub(lambda m: f"{m.group('scheme')}***@", text)
