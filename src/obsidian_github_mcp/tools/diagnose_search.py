"""
Diagnose search MCP tool implementation.
"""

from ..search import SearchDiagnostics


class DiagnoseSearchTool:
    """Tool for checking whether code search works for the repository."""

    def __init__(self, diagnostics: SearchDiagnostics):
        self.diagnostics = diagnostics

    async def __call__(self) -> str:
        report = await self.diagnostics.run()
        return self.diagnostics.render_health_check(report)
