"""Deploy configuration loaded from YAML with command-line overrides"""
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from gitsite.core import ConfigLoader, RealFileSystemService, YamlConfigLoader
from gitsite.deploy.base import AuthenticationInfo
from gitsite.deploy.exceptions import ConfigError

DEFAULT_CONFIG_PATH = "gitsite.yaml"


@dataclass
class DeploySettings:
    """Settings under the `deploy:` key of gitsite.yaml."""
    url: Optional[str] = None
    branch: Optional[str] = None
    destination: str = ""
    message: Optional[str] = None
    local_branch: str = "master"
    git_executable: str = "git"
    author_name: Optional[str] = None
    author_email: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    private_key: Optional[str] = None
    passphrase: Optional[str] = None

    @property
    def identity(self) -> Optional[tuple[str, str]]:
        if self.author_name and self.author_email:
            return (self.author_name, self.author_email)
        return None

    @property
    def credentials(self) -> Optional[AuthenticationInfo]:
        if not any((self.username, self.password, self.private_key, self.passphrase)):
            return None
        return AuthenticationInfo(
            username=self.username,
            password=self.password,
            private_key=self.private_key,
            passphrase=self.passphrase,
        )


def load_deploy_config(
    config_path: Optional[str] = None,
    overrides: Optional[Dict[str, Any]] = None,
    config_loader: Optional[ConfigLoader] = None
) -> DeploySettings:
    """Load deploy settings, then apply non-None overrides.

    Args:
        config_path: YAML file; the default gitsite.yaml is optional, an
            explicitly named file must exist
        overrides: Values from command-line flags (None values ignored)
        config_loader: YAML loader (default: YamlConfigLoader)

    Returns:
        DeploySettings

    Raises:
        ConfigError: If the file is missing, malformed or has unknown keys
    """
    path = config_path or DEFAULT_CONFIG_PATH
    values: Dict[str, Any] = {}

    if Path(path).exists():
        loader = config_loader or YamlConfigLoader(RealFileSystemService())
        try:
            config = loader.load_yaml(path)
        except (yaml.YAMLError, OSError) as e:
            raise ConfigError(f"Could not parse {path}: {e}") from e

        if not isinstance(config, dict):
            raise ConfigError(f"{path}: top level must be a mapping")
        section = config.get('deploy', {}) or {}
        if not isinstance(section, dict):
            raise ConfigError(f"{path}: 'deploy' must be a mapping")
        values.update(section)
    elif config_path:
        raise ConfigError(f"Config file not found: {config_path}")

    for key, value in (overrides or {}).items():
        if value is not None:
            values[key] = value

    known = {f.name for f in fields(DeploySettings)}
    unknown = sorted(set(values) - known)
    if unknown:
        raise ConfigError(f"Unknown deploy setting(s): {', '.join(unknown)}")

    if values.get('destination') is None:
        values['destination'] = ""

    return DeploySettings(**values)
