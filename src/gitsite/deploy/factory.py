"""
DeployerFactory - Parse repository URLs and route to the git site deployer.

Format-based routing:
    gitsite:github.com/user/repo.git             → ssh://github.com/user/repo.git, branch gh-pages
    gitsite:github.com/user/repo.git:docs        → ssh://github.com/user/repo.git, branch docs
    gitsite:git@github.com:user/repo.git         → git@github.com:user/repo.git (scp-like kept)
    gitsite:file:///srv/git/repo.git:pages       → file:///srv/git/repo.git, branch pages
    scm:git:https://host/user/repo.git           → https://host/user/repo.git
    https://host/user/repo.git/module            → https://host/user/repo.git, prefix module/
    scm:svn:... / anything else                  → TransportSetupError (no provider)
"""

import re
from dataclasses import dataclass
from typing import Dict, Optional, Tuple
from urllib.parse import quote, urlsplit, urlunsplit

from ..core.protocols import Logger
from ..utils.paths import redact_credentials, strip_module_suffix
from .base import AuthenticationInfo
from .exceptions import TransportSetupError

SCHEME_PREFIX = "gitsite:"
SCM_GIT_PREFIX = "scm:git:"
DEFAULT_BRANCH = "gh-pages"

_SCP_LIKE_RE = re.compile(r'^[^/:@]+@[^/:]+:')
_HAS_SCHEME_RE = re.compile(r'^[a-zA-Z][a-zA-Z0-9+.-]*://')


@dataclass(frozen=True)
class RemoteDescriptor:
    """
    Where a deploy goes.

    Attributes:
        original_url: git URL before module-suffix stripping
        url: Clone URL ending at the repository's .git boundary
        prefix: Relative path carried by the module suffix ("" or "dir/")
        branch: Remote branch receiving the site
    """
    original_url: str
    url: str
    prefix: str
    branch: str

    @property
    def display_url(self) -> str:
        return redact_credentials(self.url)


def _split_embedded_branch(rest: str) -> Tuple[str, Optional[str]]:
    """
    Split "host-url:branch".

    The suffix belongs to the URL when it contains '/', or when the colon is
    the host/path separator of an scp-like URL (git@host:repo.git).
    """
    index = rest.rfind(":")
    if index == -1:
        return rest, None
    suffix = rest[index + 1:]
    if "/" in suffix:
        return rest, None
    if _SCP_LIKE_RE.match(rest) and ":" not in rest[:index]:
        return rest, None
    if not suffix:
        return rest[:index], None
    return rest[:index], suffix


def _is_git_url(url: str) -> bool:
    return bool(_HAS_SCHEME_RE.match(url) or _SCP_LIKE_RE.match(url) or url.startswith("/"))


def parse_repository_url(
    repository_url: str,
    branch: Optional[str] = None,
    default_branch: str = DEFAULT_BRANCH
) -> RemoteDescriptor:
    """
    Turn a configured repository URL into a RemoteDescriptor.

    Args:
        repository_url: gitsite:, scm:git: or plain git URL
        branch: Explicit branch (overrides any branch embedded in the URL)
        default_branch: Branch used when neither is given

    Raises:
        TransportSetupError: If the URL is empty or no provider handles it
    """
    url = (repository_url or "").strip()
    if not url:
        raise TransportSetupError("Repository URL is empty")

    embedded_branch = None

    if url.startswith(SCHEME_PREFIX):
        host_url, embedded_branch = _split_embedded_branch(url[len(SCHEME_PREFIX):])
        if not host_url:
            raise TransportSetupError(f"Missing host URL in repository URL: {redact_credentials(url)}")
        if host_url.startswith("file://") or _HAS_SCHEME_RE.match(host_url) or _SCP_LIKE_RE.match(host_url):
            url = host_url
        else:
            url = "ssh://" + host_url
    elif url.startswith(SCM_GIT_PREFIX):
        url = url[len(SCM_GIT_PREFIX):]
    elif url.startswith("scm:"):
        provider = url[4:].split(":", 1)[0] or "(none)"
        raise TransportSetupError(
            f"No provider for SCM type '{provider}' in {redact_credentials(url)}\n"
            f"Only git repositories are supported (gitsite:, scm:git: or a plain git URL)."
        )

    if not _is_git_url(url):
        raise TransportSetupError(
            f"Unknown repository URL format: {redact_credentials(repository_url)}\n"
            f"Expected: gitsite:host/user/repo.git[:branch] | scm:git:<url> | "
            f"ssh://... | https://... | file:///... | user@host:path"
        )

    clone_url, prefix = strip_module_suffix(url)
    return RemoteDescriptor(
        original_url=url,
        url=clone_url,
        prefix=prefix,
        branch=branch or embedded_branch or default_branch,
    )


def apply_credentials(
    url: str,
    credentials: Optional[AuthenticationInfo],
    logger: Optional[Logger] = None
) -> Tuple[str, Dict[str, str]]:
    """
    Fold credentials into the clone URL and git environment.

    - username goes into ssh/http(s) URLs that do not carry one
    - password goes into http(s) URLs only
    - private_key becomes GIT_SSH_COMMAND
    - passphrase cannot be handed to git non-interactively and is ignored

    Returns:
        (url, extra_env)
    """
    extra_env: Dict[str, str] = {}
    if credentials is None:
        return url, extra_env

    parts = urlsplit(url)
    if parts.scheme in ("ssh", "http", "https") and credentials.username and "@" not in parts.netloc:
        userinfo = quote(credentials.username, safe="")
        if credentials.password and parts.scheme in ("http", "https"):
            userinfo += ":" + quote(credentials.password, safe="")
        url = urlunsplit(parts._replace(netloc=f"{userinfo}@{parts.netloc}"))

    if credentials.private_key:
        extra_env["GIT_SSH_COMMAND"] = f"ssh -i {credentials.private_key} -o IdentitiesOnly=yes"

    if credentials.passphrase and logger is not None:
        logger.warning("SSH key passphrases cannot be passed to git; use ssh-agent instead")

    return url, extra_env


class DeployerFactory:
    """Factory for turning repository URLs into connected deployers."""

    @staticmethod
    def provider_for_url(repository_url: str) -> str:
        """
        Name the provider that handles repository_url.

        Only the "git" variant exists; everything else is a setup error.
        """
        parse_repository_url(repository_url)
        return "git"

    @staticmethod
    def from_repository_url(
        repository_url: str,
        credentials: Optional[AuthenticationInfo] = None,
        **options
    ) -> 'GitSiteDeployer':
        """
        Build a GitSiteDeployer for repository_url and connect it.

        Args:
            repository_url: gitsite:, scm:git: or plain git URL
            credentials: Optional AuthenticationInfo
            **options: Forwarded to GitSiteDeployer (branch, local_branch,
                git_executable, identity, logger, ...)

        Raises:
            TransportSetupError: If the URL has no matching provider

        Example:
            with DeployerFactory.from_repository_url("gitsite:github.com/me/site.git") as deployer:
                deployer.put_directory("target/site", "")
        """
        # Lazy import to avoid circular dependencies
        from .git_site import GitSiteDeployer

        provider = DeployerFactory.provider_for_url(repository_url)
        if provider != "git":
            raise TransportSetupError(f"No deployer for provider '{provider}'")

        deployer = GitSiteDeployer(**options)
        deployer.connect(repository_url, credentials)
        return deployer
