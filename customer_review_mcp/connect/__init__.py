"""
App Store Connect API layer.

Token issuance (ES256 JWTs signed with the team's .p8 key) and the
authorized HTTP exchange that every tool call goes through.
"""

from customer_review_mcp.connect.client import ConnectClient
from customer_review_mcp.connect.credentials import TokenIssuer

__all__ = [
    "ConnectClient",
    "TokenIssuer",
]
