"""
Check-in step: commit everything in the scratch checkout and push it to the
pages branch.

    git status --porcelain
    git commit --verbose --allow-empty -F <message file> -a
    git push origin <local_branch>:<branch>
"""

from pathlib import Path
from typing import Optional, Sequence, Union

from ..core.protocols import FileSystemService, Logger
from .exceptions import CommandFailedError, DeploymentError
from .git import GitCommandRunner, commit_args, parse_status, push_args, status_args

DEFAULT_MESSAGE = "Wagon: Deploying {name} to repository"


def commit_message(source_name: str, template: Optional[str] = None) -> str:
    """Render the commit message for a deploy of source_name."""
    return (template or DEFAULT_MESSAGE).replace("{name}", source_name)


class CheckInStep:
    """Commits the checkout and pushes the local branch to the remote pages branch."""

    def __init__(self, runner: GitCommandRunner, filesystem: FileSystemService, logger: Logger):
        self.git = runner
        self.fs = filesystem
        self.log = logger

    def run(
        self,
        scratch_dir: Union[str, Path],
        message: str,
        branch: str,
        local_branch: str = "master",
        paths: Optional[Sequence[str]] = None
    ) -> list[str]:
        """
        Commit and push.

        Args:
            scratch_dir: Checkout root
            message: Commit message
            branch: Remote branch to push to
            local_branch: Local branch holding the commit
            paths: Explicit paths to commit; all tracked changes (-a) when empty

        Returns:
            Paths reported as changed by git status before the commit

        Raises:
            CommandFailedError: If commit or push exits non-zero
        """
        cwd = str(scratch_dir)

        try:
            message_file = self.fs.write_temp_file(message, prefix="gitsite-", suffix=".commit")
        except OSError as e:
            raise DeploymentError(f"Error while making a temporary file for the commit message: {e}") from e

        try:
            status = self.git.execute(cwd, status_args())
            changed = parse_status(status.stdout) if status.success else []
            if not status.success:
                self.log.info("git status failed; committing without a change list")
            elif not changed:
                self.log.info("Nothing changed; creating an empty commit")

            outcome = self.git.execute(cwd, commit_args(message_file, paths))
            if not outcome.success:
                raise CommandFailedError("git-commit", outcome)
        finally:
            try:
                self.fs.remove(message_file)
            except OSError as e:
                self.log.warning(f"Could not delete commit message file {message_file}: {e}")

        outcome = self.git.execute(cwd, push_args(local_branch, branch))
        if not outcome.success:
            raise CommandFailedError("git-push", outcome)

        if paths:
            wanted = set(paths)
            changed = [p for p in changed if p in wanted]
        return changed
