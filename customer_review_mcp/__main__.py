"""
customer-review-mcp CLI entry point.

Runs the MCP server (default) and a few diagnostics commands. Anything
meant for a human goes to stdout only in the non-server commands; while
serving, stdout belongs to the MCP transport.
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path

from customer_review_mcp import __version__
from customer_review_mcp.config.logging import get_logger, setup_logging
from customer_review_mcp.config.settings import Settings, load_settings
from customer_review_mcp.connect import TokenIssuer
from customer_review_mcp.errors import ConfigurationError, ReviewServerError
from customer_review_mcp.tools import TOOLS, RequestDispatcher, render_result


def create_parser() -> argparse.ArgumentParser:
    """Create and configure argument parser."""
    parser = argparse.ArgumentParser(
        prog="customer-review-mcp",
        description="MCP server for the App Store Connect API (apps, users, "
                    "beta groups and customer reviews)",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"customer-review-mcp {__version__}",
    )

    parser.add_argument(
        "--env-file",
        type=Path,
        default=None,
        help="Path to .env file (default: .env in current directory)",
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=None,
        help="Override logging level from config",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser(
        "serve",
        help="Run the MCP server on stdio (default)",
    )

    subparsers.add_parser(
        "config",
        help="Show current configuration",
    )

    subparsers.add_parser(
        "tools",
        help="Print the tool registry as JSON",
    )

    call_parser = subparsers.add_parser(
        "call",
        help="Invoke one tool against App Store Connect and print the result",
    )
    call_parser.add_argument(
        "tool",
        choices=sorted(TOOLS),
        help="Tool name, e.g. list_apps",
    )
    call_parser.add_argument(
        "--args",
        dest="arguments",
        default="{}",
        help='Tool arguments as a JSON object, e.g. \'{"appId": "123"}\'',
    )

    subparsers.add_parser(
        "token",
        help="Issue one API token and print it (for debugging key setup)",
    )

    return parser


def cmd_config(settings: Settings) -> int:
    """Show current configuration."""
    logger = get_logger(__name__)

    connect = settings.connect
    logger.info("\n=== customer-review-mcp Configuration ===\n")
    logger.info(f"Log Level: {settings.log_level}")
    logger.info(f"Log File: {settings.log_file or 'None (console only)'}")
    logger.info(f"Server Name: {settings.server_name}")
    logger.info(f"\nAPI Base URL: {connect.base_url}")
    logger.info(f"Request Timeout: {connect.timeout}s")
    logger.info(f"Key ID: {connect.key_id}")
    logger.info(f"Issuer ID: {connect.issuer_id[:8]}...")
    key_state = "found" if connect.p8_path.is_file() else "NOT FOUND"
    logger.info(f"Private Key: {connect.p8_path} ({key_state})")

    return 0


def cmd_tools() -> int:
    """Print every registered tool with its input schema."""
    listing = [
        {
            "name": definition.name,
            "description": definition.description,
            "inputSchema": definition.input_schema(),
        }
        for definition in TOOLS.values()
    ]
    print(json.dumps(listing, indent=2))
    return 0


async def cmd_call(args, settings: Settings) -> int:
    """
    Dispatch a single tool call from the command line.

    Args:
        args: Parsed arguments (tool, arguments)
        settings: Application settings

    Returns:
        Exit code (0 for success, 1 for error)
    """
    logger = get_logger(__name__)

    try:
        arguments = json.loads(args.arguments)
    except json.JSONDecodeError as e:
        logger.error(f"--args is not valid JSON: {e}")
        return 1

    async with RequestDispatcher.from_settings(settings.connect) as dispatcher:
        try:
            result = await dispatcher.dispatch(args.tool, arguments)
        except ReviewServerError as e:
            logger.error(f"{args.tool} failed [{e.code}]: {e}")
            return 1

    print(render_result(result))
    return 0


async def cmd_token(settings: Settings) -> int:
    """Issue and print a token."""
    logger = get_logger(__name__)

    try:
        token = await TokenIssuer(settings.connect).issue_token()
    except ReviewServerError as e:
        logger.error(f"Token issuance failed: {e}")
        return 1

    print(token)
    return 0


def cmd_serve(settings: Settings) -> int:
    """Run the MCP server until stdin closes."""
    from customer_review_mcp.server import serve

    asyncio.run(serve(settings))
    return 0


def main() -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args()

    # Missing credentials are fatal before anything else happens
    try:
        settings = load_settings(env_file=args.env_file)
    except ConfigurationError as e:
        print(f"Error loading settings: {e}", file=sys.stderr)
        return 1

    if args.log_level:
        settings.log_level = args.log_level

    setup_logging(settings)

    if args.command == "config":
        return cmd_config(settings)
    elif args.command == "tools":
        return cmd_tools()
    elif args.command == "call":
        return asyncio.run(cmd_call(args, settings))
    elif args.command == "token":
        return asyncio.run(cmd_token(settings))
    else:
        return cmd_serve(settings)


if __name__ == "__main__":
    sys.exit(main())
