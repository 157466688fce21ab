"""
GitHub Review Tools - MCP server for pull request review workflows.

Exposes GitHub pull request reviews, review comments and review threads
(fetch, reply, resolve, batch variants) as MCP tools, with a REST bridge
for non-MCP clients.
"""

__version__ = "0.1.0"
