"""
Search issues MCP tool implementation.
"""

from ..config import GitHubConfig
from ..github import GitHubClient
from ..search import repo_qualifier


class SearchIssuesTool:
    """Tool for searching issues in the vault repository."""

    def __init__(self, client: GitHubClient, config: GitHubConfig):
        self.client = client
        self.config = config

    async def __call__(self, query: str) -> str:
        qualified_query = f"{query} is:issue {repo_qualifier(self.config)}"
        results = await self.client.search_issues(qualified_query)
        formatted = "\n".join(
            f"- #{item['number']} {item['title']} ({item['html_url']})"
            for item in results.get("items", [])
        )
        return f"Found {results.get('total_count', 0)} issues:\n{formatted}"
