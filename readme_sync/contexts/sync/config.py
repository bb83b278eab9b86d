"""
Sync configuration.

Settings are resolved in layers, later layers winning:
    1. Dataclass defaults
    2. Optional YAML config file (loaded with OmegaConf)
    3. README_SYNC_* environment variables (.env supported via python-dotenv)
    4. Explicit overrides passed by the caller

Example config file:

    site_url: https://didtheyghost.me
    country: Singapore
    experience_level: Internship
    job_category: Tech
    github:
      repo: owner/sg-internships
      path: README.md
      branch: main
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional
from zoneinfo import ZoneInfo

from dotenv import load_dotenv
from omegaconf import OmegaConf

from readme_sync.contexts.sync.exceptions import SyncConfigError
from readme_sync.contexts.table.renderer import DEFAULT_SITE_URL, DEFAULT_UTM_PARAMS, RenderSettings

load_dotenv()

DEFAULT_COMMIT_MESSAGE_TEMPLATE = "sync(readme): update SG internship tech verified jobs ({count})"
DEFAULT_GITHUB_API_BASE_URL = "https://api.github.com"

# Environment variable -> SyncSettings field
SYNC_ENV_VARS = {
    "README_SYNC_SITE_URL": "site_url",
    "README_SYNC_JOBS_EXPORT_PATH": "export_path",
}

# Environment variable -> GitHubSettings field
GITHUB_ENV_VARS = {
    "README_SYNC_GITHUB_TOKEN": "token",
    "README_SYNC_REPO": "repo",
    "README_SYNC_PATH": "path",
    "README_SYNC_BRANCH": "branch",
    "README_SYNC_GITHUB_API_BASE_URL": "api_base_url",
}


@dataclass
class SyncSettings:
    """
    What to export and how to render it.

    Attributes:
        site_url: Public site root used in company and job links
        utm_params: Query string appended to site links
        button_dir: Badge image directory relative to the README
        button_width: Badge width attribute (None omits it)
        display_timezone: IANA timezone for the Date Added column
        job_status: Only postings with this status are exported
        country: Required country tag
        experience_level: Required experience level tag
        job_category: Required job category tag
        commit_message_template: Commit message, ``{count}`` is the exported count
        export_path: JSON dump read by the file exporter
    """

    site_url: str = DEFAULT_SITE_URL
    utm_params: str = DEFAULT_UTM_PARAMS
    button_dir: str = "readme-buttons"
    button_width: Optional[int] = 220
    display_timezone: str = "Asia/Singapore"
    job_status: str = "Verified"
    country: str = "Singapore"
    experience_level: str = "Internship"
    job_category: str = "Tech"
    commit_message_template: str = DEFAULT_COMMIT_MESSAGE_TEMPLATE
    export_path: Optional[str] = None

    def render_settings(self) -> RenderSettings:
        return RenderSettings(
            site_url=self.site_url.rstrip("/"),
            utm_params=self.utm_params,
            button_dir=self.button_dir,
            button_width=self.button_width,
            display_timezone=ZoneInfo(self.display_timezone),
        )

    def commit_message(self, count: int) -> str:
        return self.commit_message_template.format(count=count)


@dataclass
class GitHubSettings:
    """Location of the README in GitHub and the credentials to write it."""

    repo: Optional[str] = None
    path: str = "README.md"
    branch: Optional[str] = None
    api_base_url: str = DEFAULT_GITHUB_API_BASE_URL
    token: Optional[str] = None

    def require_token(self) -> str:
        if not self.token:
            raise SyncConfigError("README_SYNC_GITHUB_TOKEN")
        return self.token

    def require_repo(self) -> str:
        if not self.repo:
            raise SyncConfigError("README_SYNC_REPO", "expected: owner/repo")
        return self.repo

    @property
    def target(self) -> str:
        """Human-readable location for logs, e.g. ``owner/repo:README.md``."""
        return f"{self.repo or '<unset>'}:{self.path}"


def _env_layer(mapping: Dict[str, str]) -> Dict[str, Any]:
    return {field: os.environ[var] for var, field in mapping.items() if os.environ.get(var)}


def _load_config_file(config_path: Optional[Path]) -> Dict[str, Any]:
    if config_path is None:
        return {}
    return OmegaConf.to_container(OmegaConf.load(config_path), resolve=True) or {}


def load_sync_settings(
    config_path: Optional[Path] = None, overrides: Optional[Dict[str, Any]] = None
) -> SyncSettings:
    """
    Resolve SyncSettings from defaults, config file, environment and overrides.

    Unknown keys and wrongly-typed values are rejected by OmegaConf's
    structured config validation.
    """
    file_config = _load_config_file(config_path)
    file_config.pop("github", None)

    merged = OmegaConf.merge(
        OmegaConf.structured(SyncSettings),
        file_config,
        _env_layer(SYNC_ENV_VARS),
        overrides or {},
    )
    return OmegaConf.to_object(merged)


def load_github_settings(
    config_path: Optional[Path] = None, overrides: Optional[Dict[str, Any]] = None
) -> GitHubSettings:
    """
    Resolve GitHubSettings from the ``github`` config section, environment and overrides.

    The token is only read from the environment or overrides, never the file.
    """
    file_config = _load_config_file(config_path).get("github") or {}
    file_config.pop("token", None)

    merged = OmegaConf.merge(
        OmegaConf.structured(GitHubSettings),
        file_config,
        _env_layer(GITHUB_ENV_VARS),
        overrides or {},
    )
    return OmegaConf.to_object(merged)
