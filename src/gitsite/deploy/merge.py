"""
Content merge: copy site content into the scratch checkout and stage it.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional, Union

from ..core.protocols import FileSystemService, Logger
from ..utils.paths import join_relpath
from .exceptions import CommandFailedError, DeploymentError, NothingStagedError
from .git import GitCommandRunner, add_args

# git's metadata directory; never copied over or staged
RESERVED_NAME = ".git"


@dataclass
class MergeResult:
    """
    Attributes:
        target: Absolute path of the merged file/directory in the checkout
        relative_path: Same, relative to the checkout root
        already_existed: Whether target was present before the copy
        staged_files: Files staged with git add
    """
    target: Path
    relative_path: str
    already_existed: bool
    staged_files: int


class ContentMerger:
    """Copies sources into the checkout and stages them file by file."""

    def __init__(self, runner: GitCommandRunner, filesystem: FileSystemService, logger: Logger):
        self.git = runner
        self.fs = filesystem
        self.log = logger

    def create_directories(self, scratch_dir: Path, base: str, pending: Iterable[str]) -> str:
        """
        Create and stage each pending segment below base inside the checkout.

        Staging an empty directory is a no-op for git; the files copied into
        it later are staged by merge().

        Returns:
            Relative path of the innermost directory
        """
        rel_path = base
        try:
            self.fs.mkdir(scratch_dir / rel_path if rel_path else scratch_dir)
        except OSError as e:
            raise DeploymentError(f"Failed to create directory {scratch_dir / rel_path}: {e}") from e

        for segment in pending:
            rel_path = join_relpath(rel_path, segment)
            self.log.debug(f"Creating directory {rel_path}/")
            try:
                self.fs.mkdir(scratch_dir / rel_path)
            except OSError as e:
                raise DeploymentError(
                    f"Failed to create directory {scratch_dir / rel_path}; parent should exist: {scratch_dir}\n{e}"
                ) from e
            self._add(scratch_dir, rel_path)
        return rel_path

    def _add(self, scratch_dir: Path, path: str) -> None:
        cwd = str(scratch_dir)
        outcome = self.git.execute(cwd, add_args(path))
        if not outcome.success:
            # second attempt: files still being normalized by git on first add
            self.log.debug(f"git add {path} failed, retrying once")
            outcome = self.git.execute(cwd, add_args(path))
            if not outcome.success:
                raise CommandFailedError("git-add", outcome)

    def stage(
        self,
        scratch_dir: Path,
        base: str,
        path: str = "",
        source_root: Optional[Union[str, Path]] = None
    ) -> int:
        """
        Stage base/path and everything beneath it.

        Uses an explicit stack instead of recursion. The entry equal to base
        itself ("" path) is not added, only its children.

        Args:
            scratch_dir: Checkout root
            base: Directory inside the checkout the walk starts from
            path: Entry below base to stage ("" for all of base)
            source_root: Tree whose entries are walked instead of the
                checkout's, so content already on the branch under base
                is neither re-added nor counted

        Returns:
            Number of files staged
        """
        staged = 0
        stack = [path]
        if source_root is not None:
            listing_root = Path(source_root)
        else:
            listing_root = scratch_dir / base if base else scratch_dir

        while stack:
            current = stack.pop()
            rel_path = join_relpath(base, current)
            local = listing_root / current if current else listing_root

            if current:
                self._add(scratch_dir, rel_path)
                if self.fs.is_file(local):
                    staged += 1

            if self.fs.is_dir(local):
                children = sorted(
                    (child.name for child in self.fs.iterdir(local) if child.name != RESERVED_NAME),
                    reverse=True
                )
                stack.extend(join_relpath(current, name) for name in children)

        return staged

    def merge(
        self,
        source: Union[str, Path],
        scratch_dir: Union[str, Path],
        relative_dir: str,
        filename: str = ""
    ) -> MergeResult:
        """
        Copy source into the checkout and stage it.

        Args:
            source: File or directory to deploy
            scratch_dir: Checkout root
            relative_dir: Directory inside the checkout receiving the content
            filename: Target file name when source is a file

        Raises:
            NothingStagedError: If a new destination ended up with zero staged files
            CommandFailedError: If git add fails twice for one path
            DeploymentError: If copying fails
        """
        source = Path(source)
        scratch_dir = Path(scratch_dir)
        is_dir = self.fs.is_dir(source)

        relative_path = relative_dir if is_dir else join_relpath(relative_dir, filename)
        target = scratch_dir / relative_path if relative_path else scratch_dir
        already_existed = self.fs.exists(target)

        try:
            if not self.fs.same_path(source, target):
                if is_dir:
                    self.fs.copy_tree(source, target)
                else:
                    self.fs.copy_file(source, target)
        except OSError as e:
            raise DeploymentError(f"Failed to copy {source} to {target}: {e}") from e

        staged = 0
        if not already_existed or is_dir:
            if is_dir:
                staged = self.stage(scratch_dir, relative_dir, source_root=source)
            else:
                staged = self.stage(scratch_dir, relative_dir, filename)

            if not already_existed and staged == 0:
                raise NothingStagedError(
                    f"Unable to add file to repository: {target}; "
                    f"see error messages above for more information"
                )

        self.log.debug(f"Staged {staged} file(s) under {relative_path or '.'}")
        return MergeResult(
            target=target,
            relative_path=relative_path,
            already_existed=already_existed,
            staged_files=staged,
        )
