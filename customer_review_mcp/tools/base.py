"""
Base class for tool adapters.

A tool adapter is whatever sits behind the MCP boundary and actually runs
tool calls. The server only talks to this interface, which keeps the MCP
wiring independent of how App Store Connect requests are built and sent.
"""

from abc import ABC, abstractmethod
from typing import Any


class ToolAdapter(ABC):
    """
    Abstract base class for tool adapters.

    Tool adapters provide a uniform interface for listing and calling tools,
    plus an explicit lifecycle for the connections they hold.
    """

    @abstractmethod
    async def initialize(self) -> None:
        """
        Initialize the tool adapter.

        Raises:
            ConfigurationError: If the adapter cannot be set up
        """
        pass

    @abstractmethod
    async def shutdown(self) -> None:
        """
        Cleanly shut down the tool adapter, releasing connections.
        """
        pass

    @abstractmethod
    async def call(self, tool_name: str, arguments: dict[str, Any]) -> dict[str, Any]:
        """
        Call a tool with the given arguments.

        Args:
            tool_name: Name of the tool to invoke
            arguments: Tool-specific arguments

        Returns:
            Tool execution result as a dictionary with a "text" key

        Raises:
            UnknownToolError: If tool_name is not registered
            InvalidParamsError: If arguments fail validation
            CredentialError: If no API token could be issued
            UpstreamError: If the API call fails
        """
        pass

    @abstractmethod
    async def list_tools(self) -> list[dict[str, Any]]:
        """
        List all available tools from this adapter.

        Returns:
            List of tool schemas. Each schema includes name, description,
            and input schema.

        Example:
            [
                {
                    "name": "get_app_info",
                    "description": "Get detailed information about a specific app",
                    "input_schema": {
                        "type": "object",
                        "properties": {"appId": {"type": "string", ...}},
                        "required": ["appId"]
                    }
                }
            ]
        """
        pass

    async def __aenter__(self):
        """Context manager entry - initialize the adapter."""
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit - shutdown the adapter."""
        await self.shutdown()
        return False
