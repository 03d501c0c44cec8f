"""
Build qualified GitHub code search queries.
"""

from enum import Enum

from ..config import GitHubConfig


class SearchMode(str, Enum):
    FILENAME = "filename"
    PATH = "path"
    CONTENT = "content"
    ALL = "all"


def repo_qualifier(config: GitHubConfig) -> str:
    return f"repo:{config.owner}/{config.repo}"


def build_search_query(raw_query: str, mode: SearchMode, config: GitHubConfig) -> str:
    """Combine a raw query with the qualifier for ``mode`` and the repo scope.

    An empty ``raw_query`` is allowed and matches everything in the repository.
    """
    mode = SearchMode(mode)
    scope = repo_qualifier(config)

    if mode is SearchMode.FILENAME:
        # Unquoted multi-word input is split into separate terms by GitHub
        token = f'"{raw_query}"' if " " in raw_query else raw_query
        return f"filename:{token} {scope}"
    if mode is SearchMode.PATH:
        return f"{raw_query} in:path {scope}"
    if mode is SearchMode.CONTENT:
        return f"{raw_query} {scope}"
    # No OR across qualifiers in a single request; content plus full path
    # (which includes the filename) is the widest single query.
    return f"{raw_query} in:file,path {scope}"
