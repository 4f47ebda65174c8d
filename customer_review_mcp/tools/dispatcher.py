"""
Request dispatcher: tool call in, App Store Connect result out.

Per invocation, with no state carried between calls:

    lookup     tool name → ToolDefinition          (UnknownToolError)
    validate   raw arguments → typed record         (InvalidParamsError)
    shape      record → method, path, query, body
    send       ConnectClient issues a token and performs the exchange
                                                    (CredentialError, UpstreamError)
    translate  JSON body passed through unmodified, or the tool's
               confirmation text for calls whose body is empty

Nothing is retried; every failure is terminal for that call.
"""

import json
from typing import Any

from pydantic import ValidationError

from customer_review_mcp.config.logging import get_logger
from customer_review_mcp.config.settings import ConnectSettings
from customer_review_mcp.connect import ConnectClient, TokenIssuer
from customer_review_mcp.errors import InvalidParamsError, UnknownToolError
from customer_review_mcp.tools.arguments import ToolArguments
from customer_review_mcp.tools.base import ToolAdapter
from customer_review_mcp.tools.registry import TOOLS, ToolDefinition

logger = get_logger(__name__)


def _describe_validation_error(tool_name: str, error: ValidationError) -> str:
    problems = []
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"]) or "arguments"
        problems.append(f"{location}: {item['msg']}")
    return f"Invalid arguments for {tool_name}: " + "; ".join(problems)


def render_result(result: Any) -> str:
    """Render a tool result as MCP text content."""
    if isinstance(result, str):
        return result
    return json.dumps(result, indent=2)


class RequestDispatcher(ToolAdapter):
    """
    Table-driven executor for the App Store Connect tools.

    Args:
        client: Authorized HTTP client shared by all calls
        registry: Tool definitions keyed by name (default: all nine tools)
    """

    def __init__(
        self,
        client: ConnectClient,
        registry: dict[str, ToolDefinition] | None = None,
    ):
        self._client = client
        self._registry = registry if registry is not None else TOOLS

    @classmethod
    def from_settings(cls, settings: ConnectSettings) -> "RequestDispatcher":
        """Build a dispatcher with its own issuer and HTTP client."""
        return cls(ConnectClient(settings, TokenIssuer(settings)))

    async def initialize(self) -> None:
        logger.debug(f"Dispatcher ready with {len(self._registry)} tools")

    async def shutdown(self) -> None:
        await self._client.aclose()

    def lookup(self, tool_name: str) -> ToolDefinition:
        definition = self._registry.get(tool_name)
        if definition is None:
            raise UnknownToolError(tool_name)
        return definition

    def validate(self, definition: ToolDefinition, arguments: dict[str, Any] | None) -> ToolArguments:
        if arguments is None:
            arguments = {}
        if not isinstance(arguments, dict):
            raise InvalidParamsError(
                f"Invalid arguments for {definition.name}: expected an object"
            )
        try:
            return definition.arguments.model_validate(arguments)
        except ValidationError as e:
            raise InvalidParamsError(_describe_validation_error(definition.name, e)) from e

    async def dispatch(self, tool_name: str, arguments: dict[str, Any] | None) -> Any:
        """
        Run one tool call.

        Returns:
            The decoded JSON body, or the tool's confirmation text

        Raises:
            UnknownToolError, InvalidParamsError, CredentialError, UpstreamError
        """
        definition = self.lookup(tool_name)
        record = self.validate(definition, arguments)
        request = definition.shape.build(record)

        logger.info(f"{tool_name} → {request.method} {request.path}")
        body = await self._client.request(
            request.method,
            request.path,
            params=request.params,
            json=request.json,
        )

        if definition.shape.confirmation is not None:
            return definition.shape.confirm(record)
        return body

    async def call(self, tool_name: str, arguments: dict[str, Any]) -> dict[str, Any]:
        result = await self.dispatch(tool_name, arguments)
        return {"text": render_result(result)}

    async def list_tools(self) -> list[dict[str, Any]]:
        return [
            {
                "name": definition.name,
                "description": definition.description,
                "input_schema": definition.input_schema(),
            }
            for definition in self._registry.values()
        ]
