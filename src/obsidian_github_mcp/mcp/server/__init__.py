"""
FastMCP server and command line entry point.
"""
