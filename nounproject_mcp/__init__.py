"""
Noun Project MCP Server
Connects MCP clients to The Noun Project icon search API.
"""

__version__ = "1.0.0"
