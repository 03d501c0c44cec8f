"""
Obsidian GitHub MCP Server - search, read and track an Obsidian vault stored on GitHub.
"""

__version__ = "0.5.0"
