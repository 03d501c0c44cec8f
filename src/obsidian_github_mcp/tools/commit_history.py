"""
Commit history MCP tool implementation.
"""

import asyncio
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from ..config import GitHubConfig, HistoryConfig
from ..github import GitHubClient

TRUNCATION_MARKER = "\n\n... (diff truncated for readability) ..."


def truncate_patch(patch: str, max_length: int = 8000) -> str:
    if len(patch) <= max_length:
        return patch
    return f"{patch[:max_length]}{TRUNCATION_MARKER}"


def iso_timestamp(moment: datetime) -> str:
    """UTC timestamp with millisecond precision and a ``Z`` suffix."""
    moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


class GetCommitHistoryTool:
    """Tool for tracking how the vault changed over a time window."""

    def __init__(
        self,
        client: GitHubClient,
        config: GitHubConfig,
        history_config: Optional[HistoryConfig] = None,
    ):
        self.client = client
        self.config = config
        self.history_config = history_config or HistoryConfig()

    def _commit_url(self, sha: str) -> str:
        return f"{self.config.html_url}/commit/{sha}"

    def _commit_header(self, commit: Dict[str, Any], with_full_sha: bool) -> str:
        sha = commit["sha"]
        details = commit.get("commit") or {}
        author = details.get("author") or {}
        title = (details.get("message") or "").split("\n")[0]

        heading = f"## Commit {sha[:7]}"
        if with_full_sha:
            heading += f" ({sha})"
        return (
            f"{heading}\n"
            f"**{title}**\n"
            f"Author: {author.get('name')} <{author.get('email')}>\n"
            f"Date: {author.get('date')}\n"
            f"URL: {self._commit_url(sha)}\n\n"
        )

    def _format_files(self, files: List[Dict[str, Any]]) -> str:
        if not files:
            return "No file changes detected.\n\n"

        output = f"### Files Changed ({len(files)}):\n"
        for file in files:
            additions = file.get("additions") or 0
            deletions = file.get("deletions") or 0
            output += f"- {file['filename']} (+{additions}, -{deletions})\n"
        output += "\n### File Changes:\n\n"

        for file in files:
            output += f"#### {file['filename']}\n"
            patch = file.get("patch")
            if patch:
                patch = truncate_patch(patch, self.history_config.max_patch_length)
                output += f"```diff\n{patch}\n```\n\n"
            else:
                output += "_No diff available (binary file or no changes to display)_\n\n"
        return output

    async def __call__(
        self,
        days: int,
        include_diffs: bool = True,
        author: Optional[str] = None,
        max_commits: int = 25,
        page: int = 0,
        now: Optional[datetime] = None,
    ) -> str:
        """List commits from the last ``days`` days, optionally with diffs.

        With diffs enabled the per-commit detail requests run concurrently;
        any failure fails the whole call.
        """
        since = (now or datetime.now(timezone.utc)) - timedelta(days=days)
        since_iso = iso_timestamp(since)

        commits = await self.client.list_commits(
            since_iso, page=page, per_page=max_commits, author=author
        )

        if not commits:
            from_author = f" from author {author}" if author else ""
            return f"No commits found in the last {days} days since {since_iso}{from_author}."

        output = f"Found {len(commits)} commits in the last {days} days"
        if author:
            output += f" from {author}"
        output += ":\n\n"

        if include_diffs:
            detailed = await asyncio.gather(
                *(self.client.get_commit(c["sha"]) for c in commits[:max_commits])
            )
            for commit in detailed:
                output += self._commit_header(commit, with_full_sha=True)
                output += self._format_files(commit.get("files") or [])
                output += "---\n\n"
        else:
            for commit in commits:
                output += self._commit_header(commit, with_full_sha=False)

        return output
