"""
git command runner and command-line builders.

The runner executes one git subcommand per call and hands back a
CommandOutcome. A non-zero exit code is an ordinary outcome here (the
pages branch may simply not exist yet); each pipeline step decides
whether it is fatal.
"""

import os
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from ..core.protocols import Logger, ProcessExecutor
from ..utils.paths import redact_credentials
from .exceptions import TransportSetupError

# git messages are matched as text (missing remote ref), so keep them untranslated
MESSAGE_LOCALE = {"LC_ALL": "C", "LANGUAGE": "C"}


@dataclass(frozen=True)
class CommandOutcome:
    """Exit code and captured output of one git invocation."""
    argv: tuple[str, ...]
    working_directory: str
    exit_code: int
    stdout: str
    stderr: str

    @property
    def success(self) -> bool:
        return self.exit_code == 0

    @property
    def command_line(self) -> str:
        return redact_credentials(" ".join(self.argv))


# Command builders: argument lists following the git executable.

def init_args() -> List[str]:
    return ["init"]


def symbolic_ref_args(local_branch: str) -> List[str]:
    """Point HEAD at local_branch regardless of init.defaultBranch."""
    return ["symbolic-ref", "HEAD", f"refs/heads/{local_branch}"]


def remote_add_args(url: str) -> List[str]:
    return ["remote", "add", "origin", url]


def pull_args(branch: str) -> List[str]:
    return ["pull", "origin", f"refs/heads/{branch}"]


def ls_files_args() -> List[str]:
    return ["ls-files", "-z"]


def add_args(path: str) -> List[str]:
    return ["add", "--", path]


def status_args() -> List[str]:
    return ["status", "--porcelain"]


def commit_args(message_file: str, paths: Optional[Sequence[str]] = None) -> List[str]:
    """git commit --verbose --allow-empty -F <file> [-a | -- <paths>]"""
    args = ["commit", "--verbose", "--allow-empty", "-F", message_file]
    if paths:
        args += ["--", *paths]
    else:
        args.append("-a")
    return args


def push_args(local_branch: str, branch: str) -> List[str]:
    return ["push", "origin", f"{local_branch}:{branch}"]


def parse_ls_files(stdout: str) -> List[str]:
    """Split NUL-separated `git ls-files -z` output."""
    return [entry for entry in stdout.split("\0") if entry]


def parse_status(stdout: str) -> List[str]:
    """Paths from `git status --porcelain` lines ("XY path" / "R  old -> new")."""
    paths = []
    for line in stdout.splitlines():
        if len(line) < 4:
            continue
        path = line[3:]
        if " -> " in path:
            path = path.split(" -> ", 1)[1]
        paths.append(path.strip('"'))
    return paths


class GitCommandRunner:
    """
    Runs git subcommands in a working directory.

    Args:
        process_executor: Subprocess execution abstraction
        logger: Logging abstraction (command lines go to debug)
        git_executable: git binary name or path
        identity: Optional (name, email) passed as -c user.name/-c user.email
        extra_env: Variables layered over os.environ (e.g. GIT_SSH_COMMAND)
    """

    def __init__(
        self,
        process_executor: ProcessExecutor,
        logger: Logger,
        git_executable: str = "git",
        identity: Optional[tuple[str, str]] = None,
        extra_env: Optional[Dict[str, str]] = None
    ):
        self.process = process_executor
        self.log = logger
        self.git_executable = git_executable
        self.identity = identity
        self.extra_env = dict(extra_env or {})

    def _config_args(self) -> List[str]:
        if not self.identity:
            return []
        name, email = self.identity
        return ["-c", f"user.name={name}", "-c", f"user.email={email}"]

    def _env(self) -> Dict[str, str]:
        env = dict(os.environ)
        env.update(self.extra_env)
        env.update(MESSAGE_LOCALE)
        return env

    def execute(self, working_directory: str, args: Sequence[str]) -> CommandOutcome:
        """
        Run `git <args>` in working_directory.

        Returns:
            CommandOutcome (never raises for a non-zero exit code)

        Raises:
            TransportSetupError: If the git executable cannot be started
        """
        argv = [self.git_executable, *self._config_args(), *args]
        self.log.debug(f"Executing: {redact_credentials(' '.join(argv))} (in {working_directory})")

        try:
            result = self.process.run(argv, cwd=str(working_directory), env=self._env())
        except OSError as e:
            raise TransportSetupError(
                f"Could not run git executable '{self.git_executable}': {e}\n"
                f"Install git or set git_executable in the deploy configuration."
            ) from e

        outcome = CommandOutcome(
            argv=tuple(argv),
            working_directory=str(working_directory),
            exit_code=result.returncode,
            stdout=result.stdout or "",
            stderr=result.stderr or "",
        )
        if not outcome.success:
            self.log.debug(f"git {args[0] if args else ''} exited {outcome.exit_code}: {redact_credentials(outcome.stderr.strip())}")
        return outcome
