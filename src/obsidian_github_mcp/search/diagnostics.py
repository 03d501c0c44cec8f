"""
Explain why a code search came back empty.

A zero-result search is ambiguous: the term may be absent, or GitHub may not
have indexed the repository at all. Two probes resolve it:

1. fetch repository metadata (size, visibility, default branch);
2. run a fixed baseline search (``extension:md repo:owner/name``, one result).

If the repository fetch fails the report carries the error and nothing else
is interpreted. A failed or empty baseline probe means the index is missing
or unusable; a working one means the user's query genuinely matched nothing.
Probe failures are reported as data and never raised.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional
from urllib.parse import quote_plus
import logging

from ..config import GitHubConfig, SearchConfig
from .query_builder import SearchMode, repo_qualifier

logger = logging.getLogger(__name__)

KB_PER_GB = 1024 * 1024

SEARCH_TIPS = (
    "💡 **Search Tips:**\n"
    '- Try `searchIn: "filename"` to search only filenames\n'
    '- Try `searchIn: "path"` to search file paths\n'
    '- Try `searchIn: "content"` to search file contents\n'
    '- Use quotes for exact phrases: "OKR 2025"\n'
    "- Use wildcards: `path:*.md` for markdown files\n"
    "- Simplify the query to fewer or shorter terms"
)


class SearchDiagnosis(str, Enum):
    SYSTEM_PROBE_FAILURE = "system_probe_failure"
    REPOSITORY_NOT_INDEXED = "repository_not_indexed"
    GENUINELY_NO_MATCH = "genuinely_no_match"


@dataclass(frozen=True)
class DiagnosticReport:
    repo_size_kb: float = 0
    is_private: bool = False
    default_branch: str = ""
    baseline_search_worked: bool = False
    baseline_result_count: int = 0
    diagnostic_error: Optional[str] = None

    @property
    def repo_size_gb(self) -> float:
        return self.repo_size_kb / KB_PER_GB

    def is_large(self, threshold_gb: float = 50) -> bool:
        return self.repo_size_gb > threshold_gb

    @property
    def diagnosis(self) -> SearchDiagnosis:
        if self.diagnostic_error is not None:
            return SearchDiagnosis.SYSTEM_PROBE_FAILURE
        if not self.baseline_search_worked or self.baseline_result_count == 0:
            return SearchDiagnosis.REPOSITORY_NOT_INDEXED
        return SearchDiagnosis.GENUINELY_NO_MATCH


def format_size(size_kb: float) -> str:
    """Human readable repository size from GitHub's KB figure."""
    if size_kb >= KB_PER_GB:
        return f"{size_kb / KB_PER_GB:.2f} GB"
    return f"{size_kb / 1024:.2f} MB"


class SearchDiagnostics:
    """Probe the repository and explain an empty search.

    ``client`` needs ``get_repository()`` and ``search_code(q, page, per_page)``.
    """

    def __init__(self, client, github_config: GitHubConfig, search_config: SearchConfig):
        self.client = client
        self.github_config = github_config
        self.search_config = search_config

    @property
    def baseline_query(self) -> str:
        return (
            f"extension:{self.search_config.baseline_extension} "
            f"{repo_qualifier(self.github_config)}"
        )

    async def run(self) -> DiagnosticReport:
        """Run both probes in order and return the combined report."""
        try:
            repo = await self.client.get_repository()
        except Exception as e:
            logger.warning(f"Repository probe failed: {e}")
            return DiagnosticReport(diagnostic_error=str(e))

        baseline_worked = False
        baseline_count = 0
        try:
            baseline = await self.client.search_code(self.baseline_query, page=1, per_page=1)
            baseline_count = int(baseline.get("total_count", 0))
            baseline_worked = baseline_count > 0
        except Exception as e:
            logger.warning(f"Baseline search probe failed: {e}")

        return DiagnosticReport(
            repo_size_kb=repo.get("size") or 0,
            is_private=bool(repo.get("private")),
            default_branch=repo.get("default_branch") or "",
            baseline_search_worked=baseline_worked,
            baseline_result_count=baseline_count,
        )

    def _verify_url(self, qualified_query: str) -> str:
        return f"https://github.com/search?q={quote_plus(qualified_query)}&type=code"

    def _not_indexed_section(self, report: DiagnosticReport, qualified_query: str) -> str:
        threshold = self.search_config.large_repo_threshold_gb
        lines = [
            "### ❌ Repository May Not Be Indexed",
            "",
            f"A baseline search for `{self.baseline_query}` also returned no results, "
            "so GitHub's code search index for this repository looks missing or empty.",
            "",
            "**Possible causes:**",
            "- The repository was created or made searchable recently; "
            "GitHub can take a while to index new repositories",
        ]
        if report.is_large(threshold):
            lines.append(
                f"- Repository size ({format_size(report.repo_size_kb)}) exceeds "
                f"GitHub's {threshold:g} GB indexing limit"
            )
        if report.is_private:
            lines.append(
                "- Private repositories are sometimes not indexed until someone "
                "searches them on github.com"
            )
        lines.append(
            f"- The repository contains no `.{self.search_config.baseline_extension}` "
            "files for the baseline probe to find"
        )
        lines += [
            "",
            "**Next steps:**",
            f"- Verify the search directly on GitHub: {self._verify_url(qualified_query)}",
            "- Run the `diagnoseSearch` tool for a full search health check",
        ]
        return "\n".join(lines)

    def _no_match_section(self, report: DiagnosticReport, qualified_query: str) -> str:
        visibility = "private" if report.is_private else "public"
        branch = report.default_branch or "unknown"
        return "\n".join(
            [
                "### 🔎 Repository Is Indexed, But Nothing Matched",
                "",
                f"- Visibility: {visibility}",
                f"- Size: {format_size(report.repo_size_kb)}",
                f"- Default branch: `{branch}` (only the default branch is searchable)",
                f"- Baseline probe found {report.baseline_result_count} "
                f"`.{self.search_config.baseline_extension}` files",
                f"- Query used: `{qualified_query}`",
                "",
                "**Likely reasons:**",
                "- The search term does not appear in the repository",
                f"- The content only exists on branches other than `{branch}`",
                f"- The matching files are larger than ~{self.search_config.max_file_index_kb} KB, "
                "which GitHub does not index",
            ]
        )

    def explain(self, report: DiagnosticReport, qualified_query: str) -> str:
        """Explanation for one empty search, followed by generic tips."""
        diagnosis = report.diagnosis
        if diagnosis is SearchDiagnosis.SYSTEM_PROBE_FAILURE:
            section = (
                "### ⚠️ Unable to Diagnose Search\n\n"
                f"Could not inspect the repository: {report.diagnostic_error}\n\n"
                "This usually points to an authentication or network problem "
                "rather than a missing match."
            )
        elif diagnosis is SearchDiagnosis.REPOSITORY_NOT_INDEXED:
            section = self._not_indexed_section(report, qualified_query)
        else:
            section = self._no_match_section(report, qualified_query)

        return f"## 🔍 Search Diagnostics\n\n{section}\n\n{SEARCH_TIPS}"

    def render_empty_search(
        self,
        report: DiagnosticReport,
        raw_query: str,
        mode: SearchMode,
        qualified_query: str,
    ) -> str:
        mode = SearchMode(mode)
        header = "Found 0 files"
        if mode is not SearchMode.ALL:
            header += f" searching in {mode.value}"
        header += f" for `{raw_query}`." if raw_query else "."
        return f"{header}\n\n{self.explain(report, qualified_query)}"

    def render_health_check(self, report: DiagnosticReport) -> str:
        """Standalone report used by the diagnoseSearch tool."""
        lines = [f"# Search Diagnostics for {self.github_config.full_name}", ""]

        if report.diagnosis is SearchDiagnosis.SYSTEM_PROBE_FAILURE:
            lines += [
                "## ❌ Repository Access Failed",
                "",
                f"Error: {report.diagnostic_error}",
                "",
                "**Check:**",
                "- GITHUB_TOKEN is valid and not expired",
                "- The token has the `repo` scope if the repository is private",
                f"- GITHUB_OWNER/GITHUB_REPO point at an existing repository "
                f"({self.github_config.full_name})",
            ]
            return "\n".join(lines)

        threshold = self.search_config.large_repo_threshold_gb
        size_line = f"- Size: {format_size(report.repo_size_kb)}"
        if report.is_large(threshold):
            size_line += f" ⚠️ exceeds the {threshold:g} GB indexing limit"

        lines += [
            "## Repository",
            "",
            f"- Visibility: {'private' if report.is_private else 'public'}",
            size_line,
            f"- Default branch: `{report.default_branch or 'unknown'}` "
            "(only the default branch is searchable)",
            "",
            "## Search Index",
            "",
            f"- Baseline query: `{self.baseline_query}`",
        ]
        if report.baseline_search_worked:
            lines.append(
                f"- ✅ Search is working: {report.baseline_result_count} files found"
            )
        else:
            lines.append("- ❌ Baseline search returned no results")

        lines += ["", "## Assessment", ""]
        if report.diagnosis is SearchDiagnosis.GENUINELY_NO_MATCH:
            lines.append(
                "Code search is available for this repository. Empty results mean "
                "the term was not found on the default branch."
            )
        else:
            lines.append(
                "Code search does not appear to be indexed for this repository."
            )
            if report.is_large(threshold):
                lines.append(
                    f"- The repository is larger than GitHub's {threshold:g} GB indexing limit"
                )
            if report.is_private:
                lines.append(
                    "- Private repositories may need a search on github.com before "
                    "they are indexed"
                )
            lines.append(
                "- New repositories can take some time to be indexed; try again later"
            )
            lines.append(
                f"- Verify on GitHub: {self._verify_url(self.baseline_query)}"
            )

        lines += ["", SEARCH_TIPS]
        return "\n".join(lines)
