"""
Core MCP server implementation using FastMCP.
"""

import asyncio
import logging
import sys
from typing import Annotated, Awaitable, Literal, Optional, TypeVar

import click
from mcp.server.fastmcp import FastMCP
from mcp.server.fastmcp.exceptions import ToolError
from pydantic import Field

from obsidian_github_mcp.config import ServerConfig, load_config
from obsidian_github_mcp.errors import ConfigurationError
from obsidian_github_mcp.github import GitHubClient
from obsidian_github_mcp.search import SearchDiagnostics
from obsidian_github_mcp.tools import (
    DiagnoseSearchTool,
    GetCommitHistoryTool,
    GetFileContentsTool,
    SearchFilesTool,
    SearchIssuesTool,
)

logger = logging.getLogger("obsidian_github_mcp.mcp")

T = TypeVar("T")


def create_mcp_server(
    config: ServerConfig, client: Optional[GitHubClient] = None
) -> FastMCP:
    """Create and configure the MCP server instance"""
    server = FastMCP(name=config.name, host=config.host, port=config.port)

    if client is None:
        client = GitHubClient(config.github)
    diagnostics = SearchDiagnostics(client, config.github, config.search)

    register_tools(server, client, config, diagnostics)
    return server


async def _run_tool(name: str, call: Awaitable[T]) -> T:
    """Await a tool call and turn any failure into an MCP error result."""
    try:
        return await call
    except Exception as e:
        logger.error(f"Error in {name}: {e}", exc_info=True)
        raise ToolError(str(e)) from e


def register_tools(
    mcp_server: FastMCP,
    client: GitHubClient,
    config: ServerConfig,
    diagnostics: SearchDiagnostics,
) -> None:
    """Register all MCP tools with the server."""
    repo = config.github.full_name

    get_file_contents_tool = GetFileContentsTool(client)
    search_files_tool = SearchFilesTool(client, config.github, diagnostics)
    search_issues_tool = SearchIssuesTool(client, config.github)
    commit_history_tool = GetCommitHistoryTool(client, config.github, config.history)
    diagnose_search_tool = DiagnoseSearchTool(diagnostics)

    @mcp_server.tool(
        name="getFileContents",
        description=f"Retrieve the contents of a specific note, document, or file from your Obsidian vault stored in GitHub ({repo}). Perfect for accessing your knowledge base content.",
    )
    async def get_file_contents(
        filePath: Annotated[
            str, Field(min_length=1, description="Path to the file within the repository.")
        ],
    ) -> str:
        return await _run_tool("getFileContents", get_file_contents_tool(filePath))

    @mcp_server.tool(
        name="searchFiles",
        description=f"Search for notes, documents, and files within your Obsidian vault on GitHub ({repo}). Find specific knowledge base content using GitHub's powerful search syntax. Supports searching in filenames, paths, and content. Empty results include a diagnosis of why nothing was found.",
    )
    async def search_files(
        query: Annotated[
            str,
            Field(
                description="Search query - can be a simple term or use GitHub search qualifiers. May be empty to list files."
            ),
        ] = "",
        searchIn: Annotated[
            Literal["filename", "path", "content", "all"],
            Field(
                description="Where to search: 'filename' (exact filename match), 'path' (anywhere in file path), 'content' (file contents), or 'all' (comprehensive search)"
            ),
        ] = "all",
        page: Annotated[
            int, Field(ge=0, description="Page number to retrieve (0-indexed)")
        ] = 0,
        perPage: Annotated[
            int, Field(ge=1, description="Number of results per page")
        ] = 100,
    ) -> str:
        return await _run_tool(
            "searchFiles",
            search_files_tool(query, search_in=searchIn, page=page, per_page=perPage),
        )

    @mcp_server.tool(
        name="searchIssues",
        description=f"Search for issues and discussions in your Obsidian vault repository ({repo}). Great for tracking tasks, project management, and collaborative knowledge work.",
    )
    async def search_issues(
        query: Annotated[
            str,
            Field(min_length=1, description="Search query (uses GitHub Issue Search syntax)"),
        ],
    ) -> str:
        return await _run_tool("searchIssues", search_issues_tool(query))

    @mcp_server.tool(
        name="getCommitHistory",
        description=f"Track the evolution of your Obsidian vault knowledge base by retrieving commit history from GitHub ({repo}). See how your notes and ideas have developed over time with detailed diffs.",
    )
    async def get_commit_history(
        days: Annotated[
            int, Field(ge=1, le=365, description="Number of days to look back for commits")
        ],
        includeDiffs: Annotated[
            bool,
            Field(description="Whether to include actual file changes/diffs (default: true)"),
        ] = True,
        author: Annotated[
            Optional[str], Field(description="Filter commits by author username")
        ] = None,
        maxCommits: Annotated[
            int, Field(ge=1, le=50, description="Maximum number of commits to return")
        ] = 25,
        page: Annotated[
            int, Field(ge=0, description="Page number for pagination (0-indexed)")
        ] = 0,
    ) -> str:
        return await _run_tool(
            "getCommitHistory",
            commit_history_tool(
                days,
                include_diffs=includeDiffs,
                author=author,
                max_commits=maxCommits,
                page=page,
            ),
        )

    @mcp_server.tool(
        name="diagnoseSearch",
        description=f"Check whether GitHub code search works for your Obsidian vault repository ({repo}): repository size, visibility, default branch and whether the search index returns results. Use this when searches unexpectedly return nothing.",
    )
    async def diagnose_search() -> str:
        return await _run_tool("diagnoseSearch", diagnose_search_tool())


async def _serve(config: ServerConfig, transport: str) -> None:
    async with GitHubClient(config.github) as client:
        server = create_mcp_server(config, client)
        logger.info(f"MCP server started for {config.github.full_name} ({transport})")
        if transport == "stdio":
            await server.run_stdio_async()
        else:
            await server.run_sse_async()


@click.command()
@click.option("--config", "config_path", default=None, help="Path to a YAML config file")
@click.option("--port", default=None, type=int, help="Port to listen on for SSE")
@click.option(
    "--transport",
    type=click.Choice(["stdio", "sse"]),
    default="stdio",
    help="Transport type (stdio or sse)",
)
@click.option("--log-level", default=None, help="Override the configured log level")
def main(
    config_path: Optional[str], port: Optional[int], transport: str, log_level: Optional[str]
) -> int:
    """Run the server with specified transport."""
    logging.basicConfig(
        stream=sys.stderr,
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        config = load_config(config_path)
    except ConfigurationError as e:
        logger.error(f"Failed to start server: {e}")
        sys.exit(1)

    logging.getLogger().setLevel((log_level or config.log_level).upper())
    if port is not None:
        config.port = port

    try:
        asyncio.run(_serve(config, transport))
        return 0
    except KeyboardInterrupt:
        logger.info("Server stopped by user")
        return 0
    except Exception as e:
        logger.error(f"Failed to start server: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    sys.exit(main())
