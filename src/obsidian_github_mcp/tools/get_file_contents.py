"""
Get file contents MCP tool implementation.
"""

from ..errors import ContentFormatError
from ..github import GitHubClient


class GetFileContentsTool:
    """Tool for reading a single file from the vault repository."""

    def __init__(self, client: GitHubClient):
        self.client = client

    async def __call__(self, file_path: str) -> str:
        """Return the raw text of ``file_path``.

        Raises:
            ContentFormatError: if the path is a directory or otherwise not a file
        """
        content = await self.client.get_file_contents(file_path)
        if not isinstance(content, str):
            raise ContentFormatError(
                "Received unexpected content format from GitHub API."
            )
        return content
