"""
MCP protocol surface.
"""
