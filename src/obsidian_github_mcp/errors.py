"""
Error types shared by the server, the GitHub client and the tool handlers.
"""

from typing import Optional


class ConfigurationError(Exception):
    """Raised when required startup configuration is missing."""


class ContentFormatError(Exception):
    """Raised when GitHub returns a response shape we cannot display."""


class GitHubAPIError(Exception):
    """Any failure talking to the GitHub REST API.

    The message is always prefixed with ``GitHub API error:`` so callers can
    tell upstream failures apart from local ones.
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(f"GitHub API error: {message}")
        self.upstream_message = message
        self.status_code = status_code


def search_failure_guidance(
    error: GitHubAPIError, qualified_query: str
) -> Optional[str]:
    """Targeted advice for a failed code search, or None if nothing applies.

    Recognizes bad query syntax, rate limiting and token permission problems.
    """
    lowered = error.upstream_message.lower()

    if error.status_code == 422 or "validation failed" in lowered:
        return (
            "GitHub rejected the search query syntax.\n"
            f"Query sent: `{qualified_query}`\n\n"
            "Try simplifying the query: remove special characters, "
            "balance any quotes, or switch `searchIn` mode."
        )

    if "rate limit" in lowered:
        return (
            "GitHub's search rate limit has been exhausted. Code search allows "
            "a small number of requests per minute; wait a minute and try again."
        )

    if (
        error.status_code in (401, 403)
        or "bad credentials" in lowered
        or "required scope" in lowered
        or "oauth scope" in lowered
    ):
        return (
            "The GitHub token was rejected or lacks permission for this repository. "
            "Check that GITHUB_TOKEN is valid and, for private repositories, "
            "that it has the `repo` scope."
        )

    return None
