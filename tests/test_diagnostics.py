from unittest.mock import AsyncMock

import pytest

from obsidian_github_mcp.config import SearchConfig
from obsidian_github_mcp.errors import GitHubAPIError
from obsidian_github_mcp.search import (
    DiagnosticReport,
    SearchDiagnosis,
    SearchDiagnostics,
    SearchMode,
)

SIXTY_GB_KB = 60 * 1024 * 1024


def make_client(repo=None, repo_error=None, baseline_count=0, baseline_error=None):
    client = AsyncMock()
    if repo_error is not None:
        client.get_repository.side_effect = repo_error
    else:
        client.get_repository.return_value = repo or {
            "size": 2048,
            "private": False,
            "default_branch": "main",
        }
    if baseline_error is not None:
        client.search_code.side_effect = baseline_error
    else:
        client.search_code.return_value = {"total_count": baseline_count, "items": []}
    return client


@pytest.fixture
def make_diagnostics(github_config):
    def _make(client, search_config=None):
        return SearchDiagnostics(client, github_config, search_config or SearchConfig())

    return _make


def test_sixty_gigabyte_repository_is_large():
    report = DiagnosticReport(repo_size_kb=SIXTY_GB_KB)
    assert report.repo_size_gb == 60
    assert report.is_large()
    assert not DiagnosticReport(repo_size_kb=50 * 1024 * 1024).is_large()


def test_classification():
    assert (
        DiagnosticReport(diagnostic_error="boom").diagnosis
        is SearchDiagnosis.SYSTEM_PROBE_FAILURE
    )
    assert DiagnosticReport().diagnosis is SearchDiagnosis.REPOSITORY_NOT_INDEXED
    assert (
        DiagnosticReport(baseline_search_worked=True, baseline_result_count=12).diagnosis
        is SearchDiagnosis.GENUINELY_NO_MATCH
    )


@pytest.mark.asyncio
async def test_repository_probe_failure_short_circuits(make_diagnostics):
    client = make_client(repo_error=GitHubAPIError("401 Bad credentials", 401))
    diagnostics = make_diagnostics(client)

    report = await diagnostics.run()

    assert report.diagnosis is SearchDiagnosis.SYSTEM_PROBE_FAILURE
    assert report.diagnostic_error == "GitHub API error: 401 Bad credentials"
    client.search_code.assert_not_called()

    text = diagnostics.explain(report, "x repo:test-owner/test-repo")
    assert "Unable to Diagnose Search" in text
    assert "401 Bad credentials" in text
    assert "Repository May Not Be Indexed" not in text


@pytest.mark.asyncio
async def test_baseline_probe_uses_fixed_query(make_diagnostics):
    client = make_client(baseline_count=3)
    report = await make_diagnostics(client).run()

    client.search_code.assert_awaited_once_with(
        "extension:md repo:test-owner/test-repo", page=1, per_page=1
    )
    assert report == DiagnosticReport(
        repo_size_kb=2048,
        is_private=False,
        default_branch="main",
        baseline_search_worked=True,
        baseline_result_count=3,
    )


@pytest.mark.asyncio
async def test_baseline_extension_is_configurable(make_diagnostics):
    client = make_client(baseline_count=1)
    await make_diagnostics(client, SearchConfig(baseline_extension="txt")).run()
    assert client.search_code.await_args.args[0] == "extension:txt repo:test-owner/test-repo"


@pytest.mark.asyncio
async def test_baseline_probe_error_is_recorded_not_raised(make_diagnostics):
    client = make_client(baseline_error=GitHubAPIError("403 API rate limit exceeded", 403))
    report = await make_diagnostics(client).run()

    assert report.diagnostic_error is None
    assert report.baseline_search_worked is False
    assert report.diagnosis is SearchDiagnosis.REPOSITORY_NOT_INDEXED


@pytest.mark.asyncio
async def test_not_indexed_report_mentions_size_ceiling_for_large_repos(make_diagnostics):
    client = make_client(
        repo={"size": SIXTY_GB_KB, "private": True, "default_branch": "main"}
    )
    diagnostics = make_diagnostics(client)
    report = await diagnostics.run()

    text = diagnostics.explain(report, "x repo:test-owner/test-repo")
    assert "Repository May Not Be Indexed" in text
    assert "60.00 GB" in text
    assert "50 GB indexing limit" in text
    assert "Private repositories" in text
    assert "diagnoseSearch" in text
    assert "https://github.com/search?q=x+repo%3Atest-owner%2Ftest-repo&type=code" in text
    assert "Search Tips" in text


@pytest.mark.asyncio
async def test_not_indexed_report_skips_causes_that_do_not_apply(make_diagnostics):
    diagnostics = make_diagnostics(make_client())
    text = diagnostics.explain(await diagnostics.run(), "x repo:test-owner/test-repo")
    assert "indexing limit" not in text
    assert "Private repositories" not in text


@pytest.mark.asyncio
async def test_searched_but_empty_report(make_diagnostics):
    diagnostics = make_diagnostics(
        make_client(
            repo={"size": 5120, "private": False, "default_branch": "trunk"},
            baseline_count=42,
        )
    )
    report = await diagnostics.run()
    text = diagnostics.render_empty_search(
        report, "needle", SearchMode.CONTENT, "needle repo:test-owner/test-repo"
    )

    assert text.startswith("Found 0 files searching in content for `needle`.")
    assert "Repository Is Indexed, But Nothing Matched" in text
    assert "Repository May Not Be Indexed" not in text
    assert "Visibility: public" in text
    assert "Size: 5.00 MB" in text
    assert "`trunk` (only the default branch is searchable)" in text
    assert "Baseline probe found 42" in text
    assert "Query used: `needle repo:test-owner/test-repo`" in text
    assert "384 KB" in text
    assert text.endswith("- Simplify the query to fewer or shorter terms")


@pytest.mark.asyncio
async def test_health_check_with_working_search(make_diagnostics):
    diagnostics = make_diagnostics(make_client(baseline_count=7))
    text = diagnostics.render_health_check(await diagnostics.run())

    assert text.startswith("# Search Diagnostics for test-owner/test-repo")
    assert "Search is working: 7 files found" in text
    assert "Empty results mean the term was not found" in text


@pytest.mark.asyncio
async def test_health_check_reports_access_failure(make_diagnostics):
    client = make_client(repo_error=GitHubAPIError("404 Not Found", 404))
    diagnostics = make_diagnostics(client)
    text = diagnostics.render_health_check(await diagnostics.run())

    assert "Repository Access Failed" in text
    assert "GitHub API error: 404 Not Found" in text
    client.search_code.assert_not_called()


@pytest.mark.asyncio
async def test_health_check_flags_large_unindexed_repo(make_diagnostics):
    diagnostics = make_diagnostics(
        make_client(repo={"size": SIXTY_GB_KB, "private": False, "default_branch": "main"})
    )
    text = diagnostics.render_health_check(await diagnostics.run())

    assert "exceeds the 50 GB indexing limit" in text
    assert "Baseline search returned no results" in text
    assert "does not appear to be indexed" in text
