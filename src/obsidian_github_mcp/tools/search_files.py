"""
Search files MCP tool implementation.
"""

import logging

from ..config import GitHubConfig
from ..errors import GitHubAPIError, search_failure_guidance
from ..github import GitHubClient
from ..search import (
    SearchDiagnostics,
    SearchMode,
    build_search_query,
    format_search_results,
)

logger = logging.getLogger(__name__)


class SearchFilesTool:
    """Tool for searching file names, paths and contents in the vault."""

    def __init__(
        self,
        client: GitHubClient,
        config: GitHubConfig,
        diagnostics: SearchDiagnostics,
    ):
        self.client = client
        self.config = config
        self.diagnostics = diagnostics

    async def __call__(
        self,
        query: str = "",
        search_in: SearchMode = SearchMode.ALL,
        page: int = 0,
        per_page: int = 100,
    ) -> str:
        """Search the repository and format the hits.

        An empty result always runs the diagnostics probes before returning.

        Raises:
            GitHubAPIError: with guidance attached for syntax, rate limit and
                permission failures
        """
        mode = SearchMode(search_in)
        qualified_query = build_search_query(query, mode, self.config)
        logger.debug(f"Code search: {qualified_query!r} page={page} per_page={per_page}")

        try:
            results = await self.client.search_code(
                qualified_query, page=page, per_page=per_page
            )
        except GitHubAPIError as e:
            guidance = search_failure_guidance(e, qualified_query)
            if guidance is None:
                raise
            raise GitHubAPIError(
                f"{e.upstream_message}\n\n{guidance}", status_code=e.status_code
            ) from e

        total_count = results.get("total_count", 0)
        if total_count == 0:
            report = await self.diagnostics.run()
            return self.diagnostics.render_empty_search(
                report, query, mode, qualified_query
            )

        return format_search_results(
            results.get("items", []), mode, query, total_count
        )
