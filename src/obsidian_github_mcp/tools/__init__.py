"""
MCP tool implementations.
"""

from .get_file_contents import GetFileContentsTool
from .search_files import SearchFilesTool
from .search_issues import SearchIssuesTool
from .commit_history import GetCommitHistoryTool
from .diagnose_search import DiagnoseSearchTool

__all__ = [
    "GetFileContentsTool",
    "SearchFilesTool",
    "SearchIssuesTool",
    "GetCommitHistoryTool",
    "DiagnoseSearchTool",
]
