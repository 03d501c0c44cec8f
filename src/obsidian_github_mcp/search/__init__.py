"""
Code search: query construction, result formatting and zero-result diagnostics.
"""

from .query_builder import SearchMode, build_search_query, repo_qualifier
from .formatter import MatchReason, format_search_results, infer_match_reason
from .diagnostics import DiagnosticReport, SearchDiagnosis, SearchDiagnostics

__all__ = [
    "SearchMode",
    "build_search_query",
    "repo_qualifier",
    "MatchReason",
    "format_search_results",
    "infer_match_reason",
    "DiagnosticReport",
    "SearchDiagnosis",
    "SearchDiagnostics",
]
