"""
Checkout step: turn an empty scratch directory into a clone of the pages branch.

    git init
    git symbolic-ref HEAD refs/heads/<local_branch>
    git remote add origin <url>
    git pull origin refs/heads/<branch>     # may fail: branch not created yet
    git ls-files -z
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Union
from urllib.parse import unquote, urlsplit

from ..core.protocols import FileSystemService, Logger
from .exceptions import CommandFailedError, DeploymentError
from .factory import RemoteDescriptor
from .git import (
    CommandOutcome,
    GitCommandRunner,
    init_args,
    ls_files_args,
    parse_ls_files,
    pull_args,
    remote_add_args,
    symbolic_ref_args,
)

# stderr fragments git prints when the requested ref is absent on the remote
BRANCH_MISSING_MARKERS = (
    "couldn't find remote ref",
    "could not find remote ref",
)


@dataclass
class CheckoutResult:
    """
    Attributes:
        tracked_files: Paths tracked on the remote branch after the pull
        branch_missing: True when the pull failed because the branch does not exist
    """
    tracked_files: list[str] = field(default_factory=list)
    branch_missing: bool = False


def is_branch_missing(outcome: CommandOutcome) -> bool:
    """Whether a failed pull means "no such branch" rather than a real error."""
    stderr = outcome.stderr.lower()
    return any(marker in stderr for marker in BRANCH_MISSING_MARKERS)


class CheckoutStep:
    """Initializes the scratch checkout and pulls the pages branch into it."""

    def __init__(self, runner: GitCommandRunner, filesystem: FileSystemService, logger: Logger):
        self.git = runner
        self.fs = filesystem
        self.log = logger

    def _check_not_working_directory(self, remote: RemoteDescriptor, scratch_dir: Path) -> None:
        if not remote.url.startswith("file://"):
            return
        remote_path = Path(unquote(urlsplit(remote.url).path))
        if remote_path == scratch_dir or scratch_dir in remote_path.parents:
            raise DeploymentError(
                f"Remote repository must not be the working directory: {remote.url}"
            )

    def _prepare_directory(self, scratch_dir: Path) -> None:
        try:
            if self.fs.exists(scratch_dir):
                self.fs.clean_directory(scratch_dir)
            else:
                self.fs.mkdir(scratch_dir)
        except OSError as e:
            raise DeploymentError(f"Could not prepare checkout directory {scratch_dir}: {e}") from e

    def run(
        self,
        remote: RemoteDescriptor,
        scratch_dir: Union[str, Path],
        local_branch: str = "master"
    ) -> CheckoutResult:
        """
        Check the pages branch out into scratch_dir.

        Returns:
            CheckoutResult with tracked files and branch_missing flag

        Raises:
            CommandFailedError: If init, remote add, ls-files or a non-advisory pull fails
        """
        scratch_dir = Path(scratch_dir)
        self._check_not_working_directory(remote, scratch_dir)
        self._prepare_directory(scratch_dir)
        cwd = str(scratch_dir)

        outcome = self.git.execute(cwd, init_args())
        if not outcome.success:
            raise CommandFailedError("git-init", outcome)

        outcome = self.git.execute(cwd, symbolic_ref_args(local_branch))
        if not outcome.success:
            raise CommandFailedError("git-symbolic-ref", outcome)

        outcome = self.git.execute(cwd, remote_add_args(remote.url))
        if not outcome.success:
            raise CommandFailedError("git-remote", outcome)

        branch_missing = False
        outcome = self.git.execute(cwd, pull_args(remote.branch))
        if not outcome.success:
            if not is_branch_missing(outcome):
                raise CommandFailedError("git-pull", outcome)
            branch_missing = True
            self.log.info(f"Branch '{remote.branch}' does not exist yet; it will be created on push")

        outcome = self.git.execute(cwd, ls_files_args())
        if not outcome.success:
            raise CommandFailedError("git-ls-files", outcome)

        tracked = parse_ls_files(outcome.stdout)
        self.log.debug(f"Checked out {len(tracked)} tracked file(s) from {remote.display_url} ({remote.branch})")
        return CheckoutResult(tracked_files=tracked, branch_missing=branch_missing)
