"""
Async client for the parts of the GitHub REST API the tools need.
"""

import logging
from typing import Any, Dict, List, Optional, Union
from urllib.parse import quote

import httpx

from ..config import GitHubConfig
from ..errors import GitHubAPIError

logger = logging.getLogger(__name__)

API_VERSION = "2022-11-28"
JSON_MEDIA_TYPE = "application/vnd.github+json"
RAW_MEDIA_TYPE = "application/vnd.github.raw+json"


class GitHubClient:
    """Thin wrapper around ``httpx.AsyncClient`` scoped to one repository.

    Every request goes through :meth:`_request`, which converts transport
    failures and non-2xx responses into :class:`GitHubAPIError`. There is no
    retry or client-side timeout here.
    """

    def __init__(
        self,
        config: GitHubConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.config = config
        self._session = httpx.AsyncClient(
            base_url=config.api_url,
            headers={
                "Authorization": f"Bearer {config.token}",
                "Accept": JSON_MEDIA_TYPE,
                "X-GitHub-Api-Version": API_VERSION,
                "User-Agent": "obsidian-github-mcp",
            },
            timeout=None,
            follow_redirects=True,
            transport=transport,
        )

    @property
    def repo_path(self) -> str:
        return f"/repos/{self.config.owner}/{self.config.repo}"

    async def __aenter__(self) -> "GitHubClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._session.aclose()

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        """Extract GitHub's error message from a failed response."""
        detail = response.reason_phrase
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and body.get("message"):
            detail = body["message"]
            errors = body.get("errors")
            if isinstance(errors, list) and errors:
                first = errors[0]
                if isinstance(first, dict) and first.get("message"):
                    detail = f"{detail}: {first['message']}"
        return f"{response.status_code} {detail}"

    async def _request(
        self,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        accept: Optional[str] = None,
    ) -> httpx.Response:
        """Issue a GET request and normalize every failure to GitHubAPIError."""
        headers = {"Accept": accept} if accept else None
        logger.debug(f"GET {path} params={params}")
        try:
            response = await self._session.get(path, params=params, headers=headers)
        except httpx.HTTPError as e:
            raise GitHubAPIError(str(e) or e.__class__.__name__) from e

        if response.is_error:
            raise GitHubAPIError(
                self._error_message(response), status_code=response.status_code
            )
        return response

    async def _get_json(
        self, path: str, params: Optional[Dict[str, Any]] = None
    ) -> Any:
        response = await self._request(path, params=params)
        try:
            return response.json()
        except ValueError as e:
            raise GitHubAPIError(f"Invalid JSON in response from {path}") from e

    async def get_file_contents(self, file_path: str) -> Union[str, Any]:
        """Fetch a file using the raw media type.

        Files come back as text. Directories (and other non-file content) are
        answered with a JSON document instead, which is returned parsed so the
        caller can reject it.
        """
        # Encode each segment so "#", "?" and "%" in note names stay part of the path
        encoded = "/".join(
            quote(segment, safe="") for segment in file_path.lstrip("/").split("/")
        )
        path = f"{self.repo_path}/contents/{encoded}"
        response = await self._request(path, accept=RAW_MEDIA_TYPE)
        content_type = response.headers.get("content-type", "")
        if content_type.startswith("application/json"):
            try:
                return response.json()
            except ValueError:
                return response.text
        return response.text

    async def search_code(
        self, query: str, page: int = 0, per_page: int = 100
    ) -> Dict[str, Any]:
        return await self._get_json(
            "/search/code", params={"q": query, "page": page, "per_page": per_page}
        )

    async def search_issues(self, query: str) -> Dict[str, Any]:
        return await self._get_json("/search/issues", params={"q": query})

    async def get_repository(self) -> Dict[str, Any]:
        return await self._get_json(self.repo_path)

    async def list_commits(
        self,
        since: str,
        page: int = 0,
        per_page: int = 25,
        author: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        params: Dict[str, Any] = {"since": since, "page": page, "per_page": per_page}
        if author:
            params["author"] = author
        return await self._get_json(f"{self.repo_path}/commits", params=params)

    async def get_commit(self, sha: str) -> Dict[str, Any]:
        return await self._get_json(f"{self.repo_path}/commits/{sha}")
