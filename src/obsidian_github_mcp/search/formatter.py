"""
Render code search results with a per-item match reason.
"""

from enum import Enum
from typing import Any, Iterable, Mapping

from .query_builder import SearchMode


class MatchReason(str, Enum):
    FILENAME = "filename"
    PATH = "path"
    CONTENT = "content"

    @property
    def icon(self) -> str:
        return _ICONS[self]

    @property
    def label(self) -> str:
        return f"{self.icon} {self.value} match"


_ICONS = {
    MatchReason.FILENAME: "📝",
    MatchReason.PATH: "📁",
    MatchReason.CONTENT: "📄",
}


def infer_match_reason(
    file_name: str, file_path: str, raw_query: str, mode: SearchMode
) -> MatchReason:
    """Guess why an item matched.

    GitHub does not say which qualifier produced a hit, so for ``all`` mode
    this is a best-effort guess: filename first, then path, else content.
    """
    mode = SearchMode(mode)
    if mode is not SearchMode.ALL:
        return MatchReason(mode.value)

    needle = raw_query.lower()
    if needle in file_name.lower():
        return MatchReason.FILENAME
    if needle in file_path.lower():
        return MatchReason.PATH
    return MatchReason.CONTENT


def format_search_results(
    items: Iterable[Mapping[str, Any]],
    mode: SearchMode,
    raw_query: str,
    total_count: int,
) -> str:
    """Format search hits in the order GitHub returned them."""
    mode = SearchMode(mode)

    lines = []
    for item in items:
        file_name = item["name"]
        file_path = item["path"]
        reason = infer_match_reason(file_name, file_path, raw_query, mode)
        lines.append(f"- **{file_name}** ({file_path}) {reason.label}")

    header = f"Found {total_count} files"
    if mode is not SearchMode.ALL:
        header += f" searching in {mode.value}"
    return f"{header}:\n\n" + "\n".join(lines)
