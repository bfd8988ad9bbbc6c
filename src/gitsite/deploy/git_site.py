"""
GitSiteDeployer - Deploy site documentation to a git pages branch.

Targets: GitHub Pages (gh-pages), any git remote reachable by the git CLI
Strategy: scratch clone → probe destination → copy + stage → commit → push

Roughly equivalent to:

    mkdir $SCRATCH && cd $SCRATCH
    git init
    git remote add origin $URL
    git pull origin refs/heads/gh-pages
    <copy site into $SCRATCH/<destination>>
    git add <each new file>
    git commit -a -m "Wagon: Deploying site to repository"
    git push origin master:gh-pages
    rm -rf $SCRATCH
"""

import dataclasses
import tempfile
from pathlib import Path
from typing import Optional, Union

from ..core.implementations import (
    ConsoleLogger,
    RealFileSystemService,
    SubprocessExecutor,
    SystemEntropySource,
)
from ..core.protocols import EntropySource, FileSystemService, Logger, ProcessExecutor
from ..utils.paths import (
    get_dirname,
    get_filename,
    join_relpath,
    make_scratch_path,
    normalize_relpath,
)
from .base import AuthenticationInfo, CleanupResult, ConnectionState, DeploymentResult
from .checkin import CheckInStep, commit_message
from .checkout import CheckoutResult, CheckoutStep
from .exceptions import (
    ConnectionStateError,
    DeploymentError,
    ResourceDoesNotExistError,
    UnsupportedOperationError,
)
from .factory import RemoteDescriptor, apply_credentials, parse_repository_url
from .git import GitCommandRunner
from .merge import ContentMerger
from .probe import probe_destination, tracked_path_exists

# States from which a new put or listing may start
READY_STATES = (
    ConnectionState.CONNECTED,
    ConnectionState.CHECKED_OUT,
    ConnectionState.COMMITTED_PUSHED,
)


class GitSiteDeployer:
    """
    Deploys files and directory trees to a branch of a git repository.

    One instance owns one scratch checkout between connect() and close().
    Not safe to share between threads.
    """

    def __init__(
        self,
        filesystem: Optional[FileSystemService] = None,
        process_executor: Optional[ProcessExecutor] = None,
        entropy: Optional[EntropySource] = None,
        logger: Optional[Logger] = None,
        branch: Optional[str] = None,
        local_branch: str = "master",
        git_executable: str = "git",
        identity: Optional[tuple[str, str]] = None,
        message_template: Optional[str] = None,
        scratch_root: Optional[Union[str, Path]] = None
    ):
        """
        Initialize deployer.

        Args:
            filesystem: Filesystem abstraction (default: real filesystem)
            process_executor: Subprocess abstraction (default: subprocess.run)
            entropy: Randomness for scratch directory names
            logger: Logging abstraction (default: ConsoleLogger)
            branch: Remote branch, overriding any branch in the URL
            local_branch: Local branch name inside the scratch checkout
            git_executable: git binary name or path
            identity: Optional (name, email) committer identity
            message_template: Commit message with a {name} placeholder
            scratch_root: Parent of scratch checkouts (default: temp dir)
        """
        self.fs = filesystem or RealFileSystemService()
        self.process = process_executor or SubprocessExecutor()
        self.entropy = entropy or SystemEntropySource()
        self.log = logger or ConsoleLogger()
        self.branch = branch
        self.local_branch = local_branch
        self.git_executable = git_executable
        self.identity = identity
        self.message_template = message_template
        self.scratch_root = Path(scratch_root) if scratch_root else Path(tempfile.gettempdir())

        self.state = ConnectionState.DISCONNECTED
        self.remote: Optional[RemoteDescriptor] = None
        self.scratch_dir: Optional[Path] = None
        self.git: Optional[GitCommandRunner] = None

    def __enter__(self) -> 'GitSiteDeployer':
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        self.close()
        return False

    def supports_directory_copy(self) -> bool:
        return True

    def _require_ready(self, operation: str) -> None:
        if self.state not in READY_STATES:
            raise ConnectionStateError(
                f"Cannot {operation} while {self.state.value}; call connect() first"
            )

    def connect(self, repository_url: str, credentials: Optional[AuthenticationInfo] = None) -> None:
        """
        Parse repository_url and create the scratch checkout directory.

        Raises:
            TransportSetupError: If the URL has no matching provider (no git command runs)
            ConnectionStateError: If already connected
        """
        if self.state != ConnectionState.DISCONNECTED:
            raise ConnectionStateError("Already connected; call close() first")

        remote = parse_repository_url(repository_url, branch=self.branch)
        url, extra_env = apply_credentials(remote.url, credentials, self.log)
        self.remote = dataclasses.replace(remote, url=url)
        self.git = GitCommandRunner(
            self.process,
            self.log,
            git_executable=self.git_executable,
            identity=self.identity,
            extra_env=extra_env,
        )

        self.scratch_dir = make_scratch_path(self.scratch_root, self.entropy.next_int, self.fs.exists)
        try:
            self.fs.mkdir(self.scratch_dir)
        except OSError as e:
            self.scratch_dir = None
            raise DeploymentError(f"Could not create checkout directory: {e}") from e

        self.state = ConnectionState.CONNECTED
        self.log.debug(f"Connected to {self.remote.display_url} (branch {self.remote.branch}), "
                       f"checkout directory {self.scratch_dir}")

    def _checkout(self) -> CheckoutResult:
        self.log.info(f"Checking out {self.remote.branch} from {self.remote.display_url}...")
        result = CheckoutStep(self.git, self.fs, self.log).run(
            self.remote, self.scratch_dir, self.local_branch
        )
        self.state = ConnectionState.CHECKED_OUT
        return result

    def _abort(self) -> None:
        """Best-effort cleanup after a failed operation; never masks the failure."""
        cleanup = self._remove_scratch()
        for error in cleanup.errors:
            self.log.warning(error)
        self.state = ConnectionState.DISCONNECTED

    def put(self, source: Union[str, Path], destination: str) -> DeploymentResult:
        """
        Deploy source to destination (a repository-relative file path).

        Raises:
            DeploymentError: If any step fails (connection is closed afterwards)
        """
        return self._put_resource(Path(source), destination)

    def put_directory(self, source: Union[str, Path], destination: str) -> DeploymentResult:
        """
        Deploy the tree under source into destination (a repository-relative directory).

        Raises:
            ValueError: If source is not a directory
            DeploymentError: If any step fails (connection is closed afterwards)
        """
        source = Path(source)
        if not self.fs.is_dir(source):
            raise ValueError(f"Source is not a directory: {source}")
        return self._put_resource(source, destination)

    def _put_resource(self, source: Path, destination: str) -> DeploymentResult:
        self._require_ready("put")

        is_dir = self.fs.is_dir(source)
        destination = normalize_relpath(destination)
        if is_dir:
            target_dir, filename = destination, ""
        else:
            target_dir = get_dirname(destination)
            filename = get_filename(destination) or source.name

        try:
            if not self.fs.exists(source):
                raise DeploymentError(f"Source does not exist: {source}")

            checkout = self._checkout()

            probe = probe_destination(target_dir, tracked_path_exists(checkout.tracked_files, self.remote.prefix))
            self.log.debug(f"Destination probe: '{probe.destination}' existing='{probe.existing}' pending={probe.pending} "
                           f"({probe.checks} check(s))")

            merger = ContentMerger(self.git, self.fs, self.log)
            relative_dir = merger.create_directories(
                self.scratch_dir,
                join_relpath(self.remote.prefix, probe.existing),
                probe.pending
            )

            self.log.info(f"Copying {source} to {join_relpath(relative_dir, filename) or '/'}...")
            merged = merger.merge(source, self.scratch_dir, relative_dir, filename)
            self.state = ConnectionState.MERGED

            message = commit_message(source.name, self.message_template)
            self.log.info(f"Pushing to {self.remote.branch}...")
            committed = CheckInStep(self.git, self.fs, self.log).run(
                self.scratch_dir, message, self.remote.branch, self.local_branch
            )
            self.state = ConnectionState.COMMITTED_PUSHED
        except DeploymentError:
            self._abort()
            raise
        except OSError as e:
            self._abort()
            raise DeploymentError(f"Error interacting with the checkout: {e}") from e

        self.log.info(f"✓ Deployed {source.name} to {self.remote.display_url} ({self.remote.branch})")
        return DeploymentResult(
            success=True,
            remote_url=self.remote.display_url,
            branch=self.remote.branch,
            destination=merged.relative_path,
            staged_files=merged.staged_files,
            committed_files=committed,
            branch_created=checkout.branch_missing,
            metadata={
                "scratch_dir": str(self.scratch_dir),
                "message": message,
                "already_existed": merged.already_existed,
            },
        )

    def get_file_list(self, path: str = "") -> list[str]:
        """
        List tracked paths under path on the remote branch.

        Returns:
            Paths relative to the module root, sorted

        Raises:
            ResourceDoesNotExistError: If nothing is tracked under path
            DeploymentError: If the branch cannot be checked out
        """
        self._require_ready("list files")

        try:
            checkout = self._checkout()
        except DeploymentError:
            self._abort()
            raise

        prefix = self.remote.prefix
        full = join_relpath(prefix, path)
        files = [
            name[len(prefix):] for name in checkout.tracked_files
            if name.startswith(prefix) and (not full or name == full or name.startswith(full + "/"))
        ]
        if not files:
            raise ResourceDoesNotExistError(
                f"'{normalize_relpath(path) or '/'}' does not exist on branch {self.remote.branch}"
            )
        return sorted(files)

    def resource_exists(self, path: str) -> bool:
        try:
            self.get_file_list(path)
            return True
        except ResourceDoesNotExistError:
            return False

    def get(self, resource: str, destination: Union[str, Path]) -> None:
        raise UnsupportedOperationError("Not currently supported: get")

    def get_if_newer(self, resource: str, destination: Union[str, Path], timestamp: float) -> bool:
        raise UnsupportedOperationError("Not currently supported: get_if_newer")

    def _remove_scratch(self) -> CleanupResult:
        errors = []
        if self.scratch_dir is not None:
            try:
                if self.fs.exists(self.scratch_dir):
                    self.fs.rmtree(self.scratch_dir)
            except OSError as e:
                errors.append(f"Unable to clean up checkout directory {self.scratch_dir}: {e}")
            self.scratch_dir = None
        return CleanupResult(success=len(errors) == 0, errors=errors)

    def close(self) -> CleanupResult:
        """
        Remove the scratch checkout and disconnect.

        Returns:
            CleanupResult (never raises)
        """
        result = self._remove_scratch()
        for error in result.errors:
            self.log.warning(error)
        self.state = ConnectionState.DISCONNECTED
        return result
