"""
customer-review-mcp - an MCP server for the App Store Connect API.

Exposes app, user, TestFlight beta group and customer review operations
as MCP tools. Each tool call is signed with a fresh App Store Connect API
token and relayed to the REST API; responses are passed through as-is.
"""

__version__ = "1.0.8"
