"""
Entry point for the Obsidian GitHub MCP Server.
"""
import sys

from .mcp.server.app import main

if __name__ == "__main__":
    sys.exit(main())
