import pytest

from obsidian_github_mcp.errors import GitHubAPIError, search_failure_guidance

QUERY = "x repo:test-owner/test-repo"


@pytest.mark.parametrize(
    "message, status_code",
    [
        ("Bad credentials", 401),
        ("Resource not accessible by integration", 403),
        ("Your token has not been granted the required scopes", None),
        ("The 'repo' OAuth scope is needed", None),
    ],
)
def test_token_problems_get_scope_advice(message, status_code):
    guidance = search_failure_guidance(GitHubAPIError(message, status_code), QUERY)
    assert "`repo` scope" in guidance


def test_unrelated_mention_of_scope_gets_no_advice():
    error = GitHubAPIError("500 Search scope could not be computed", 500)
    assert search_failure_guidance(error, QUERY) is None


def test_rate_limit_wins_over_forbidden_status():
    error = GitHubAPIError("403 API rate limit exceeded", 403)
    assert "rate limit" in search_failure_guidance(error, QUERY)


def test_syntax_error_quotes_the_query():
    error = GitHubAPIError("422 Validation Failed", 422)
    assert f"Query sent: `{QUERY}`" in search_failure_guidance(error, QUERY)
