"""
Configuration management for the Obsidian GitHub MCP server.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import List, Mapping, Optional, Tuple
import logging
import os

import yaml
from platformdirs import user_config_dir

from .errors import ConfigurationError

APP_NAME = "obsidian-github-mcp"

TOKEN_ENV = "GITHUB_TOKEN"
OWNER_ENV = "GITHUB_OWNER"
REPO_ENV = "GITHUB_REPO"


@dataclass(frozen=True)
class GitHubConfig:
    """Identity of the single repository this server exposes."""

    token: str
    owner: str
    repo: str
    api_url: str = "https://api.github.com"

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"

    @property
    def html_url(self) -> str:
        return f"https://github.com/{self.owner}/{self.repo}"


@dataclass
class SearchConfig:
    # File extension used by the baseline probe that checks the search index
    baseline_extension: str = "md"
    large_repo_threshold_gb: float = 50
    max_file_index_kb: int = 384


@dataclass
class HistoryConfig:
    max_patch_length: int = 8000


@dataclass
class ServerConfig:
    github: GitHubConfig
    name: str = APP_NAME
    log_level: str = "info"
    host: str = "localhost"
    port: int = 3001
    search: SearchConfig = None
    history: HistoryConfig = None

    def __post_init__(self):
        if self.search is None:
            self.search = SearchConfig()
        if self.history is None:
            self.history = HistoryConfig()


def get_config_search_paths() -> List[str]:
    """Get list of paths to search for a config file."""
    return [
        "./config.yaml",
        str(Path(user_config_dir(APP_NAME)) / "config.yaml"),
    ]


def _read_yaml(config_path: Optional[str]) -> Tuple[dict, Optional[str]]:
    logger = logging.getLogger(__name__)

    search_paths = [config_path] if config_path else get_config_search_paths()
    for path in search_paths:
        abs_path = os.path.abspath(path)
        if not os.path.exists(abs_path):
            if config_path:
                raise ConfigurationError(f"Config file not found: {abs_path}")
            continue

        logger.info(f"Loading configuration from {abs_path}")
        with open(abs_path, "r") as f:
            config_data = yaml.safe_load(f)

        if not config_data:
            logger.warning(f"Config file {abs_path} is empty, trying next location")
            continue
        if not isinstance(config_data, dict):
            raise ConfigurationError(f"Config file {abs_path} must contain a mapping")
        return config_data, abs_path

    return {}, None


def load_config(
    config_path: Optional[str] = None, environ: Optional[Mapping[str, str]] = None
) -> ServerConfig:
    """Load configuration from an optional YAML file and the environment.

    The GitHub token, owner and repository come from GITHUB_TOKEN, GITHUB_OWNER
    and GITHUB_REPO. They may also be given under ``github:`` in the YAML file,
    but the environment always wins.

    Raises:
        ConfigurationError: if any of token, owner or repository is missing,
            or the YAML file contains unknown keys.
    """
    if environ is None:
        environ = os.environ

    yaml_data, source = _read_yaml(config_path)
    config_data = dict(yaml_data)

    github_data = config_data.pop("github", None) or {}
    token = environ.get(TOKEN_ENV) or github_data.get("token")
    owner = environ.get(OWNER_ENV) or github_data.get("owner")
    repo = environ.get(REPO_ENV) or github_data.get("repo")

    missing = [
        name
        for name, value in ((TOKEN_ENV, token), (OWNER_ENV, owner), (REPO_ENV, repo))
        if not value
    ]
    if missing:
        raise ConfigurationError(
            f"Missing required configuration: {', '.join(missing)}. "
            f"Environment variables {TOKEN_ENV}, {OWNER_ENV}, and {REPO_ENV} are required"
        )

    github = GitHubConfig(
        token=token,
        owner=owner,
        repo=repo,
        api_url=github_data.get("api_url", GitHubConfig.api_url),
    )

    try:
        if isinstance(config_data.get("search"), dict):
            config_data["search"] = SearchConfig(**config_data["search"])
        if isinstance(config_data.get("history"), dict):
            config_data["history"] = HistoryConfig(**config_data["history"])
        return ServerConfig(github=github, **config_data)
    except TypeError as e:
        raise ConfigurationError(f"Invalid configuration in {source}: {e}") from e
