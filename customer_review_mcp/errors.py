"""
Exception hierarchy for the App Store Connect MCP server.

Every error carries a short string ``code`` so the MCP layer can map it to
a protocol error without inspecting messages:

    ReviewServerError
    ├── ConfigurationError      missing/invalid environment at startup
    ├── CredentialError         private key unreadable or unusable
    └── DispatchError
        ├── UnknownToolError    tool name not in the registry
        ├── InvalidParamsError  arguments failed validation (no network call)
        └── UpstreamError       App Store Connect returned an error, or the
                                transport failed
"""


class ReviewServerError(Exception):
    """Base exception for all server errors."""

    def __init__(self, message: str, *, code: str = "INTERNAL_ERROR") -> None:
        super().__init__(message)
        self.code = code


class ConfigurationError(ReviewServerError):
    """Required configuration is absent; the process must not start."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="CONFIGURATION_ERROR")


class CredentialError(ReviewServerError):
    """The signing key could not be read or used to sign a token."""

    def __init__(self, message: str, *, code: str = "KEY_UNREADABLE") -> None:
        super().__init__(message, code=code)


class DispatchError(ReviewServerError):
    """A single tool invocation failed."""

    def __init__(self, message: str, *, code: str = "DISPATCH_ERROR") -> None:
        super().__init__(message, code=code)


class UnknownToolError(DispatchError):
    def __init__(self, tool_name: str) -> None:
        super().__init__(f"Unknown tool: {tool_name}", code="UNKNOWN_TOOL")
        self.tool_name = tool_name


class InvalidParamsError(DispatchError):
    def __init__(self, message: str) -> None:
        super().__init__(message, code="INVALID_PARAMS")


class UpstreamError(DispatchError):
    """
    App Store Connect rejected the request, or it never got there.

    Attributes:
        detail: The first structured error detail from the response body,
                or the transport error message when there is none.
        status_code: HTTP status, or None for transport failures.
    """

    def __init__(self, detail: str, *, status_code: int | None = None) -> None:
        super().__init__(f"App Store Connect API error: {detail}", code="UPSTREAM_ERROR")
        self.detail = detail
        self.status_code = status_code
