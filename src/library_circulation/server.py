"""Library Circulation MCP Server - FastMCP Implementation

Exposes the circulation tools (checkout, return, renewal, reservations,
catalog search) and the recommendation resources of one in-memory library.
Clients connect via stdio transport.
"""

import logging
import signal
import sys
from typing import Any

from fastmcp import FastMCP

from .config import get_config
from .library import get_library
from .resources import all_resources
from .tools import all_tools

# Initialize logging - stderr for logs, stdout for MCP protocol
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stderr)],
)

logger = logging.getLogger(__name__)

# Load configuration
config = get_config()
logging.getLogger().setLevel(config.log_level)

# Create the FastMCP server instance
mcp = FastMCP(
    name=config.server_name,
    version=config.server_version,
    instructions=(
        "Library Circulation MCP Server - an in-memory library that lends books, "
        "keeps first-come-first-served reservation queues and recommends books "
        "from borrowing history. Use tools to check out, return, renew and reserve "
        "books, and resources to read recommendations."
    ),
)

# Register all resources with the MCP server
for resource in all_resources:
    uri = resource.get("uri_template", resource.get("uri"))
    if not uri:
        logger.error("Resource missing URI: %s", resource)
        continue

    logger.debug("Registering resource: %s with URI: %s", resource["name"], uri)
    try:
        mcp.resource(
            uri=uri,
            name=resource["name"],
            description=resource["description"],
            mime_type=resource["mime_type"],
        )(resource["handler"])
    except Exception:
        logger.exception("Failed to register resource %s", resource["name"])
        raise

logger.info("Registered %d resources", len(all_resources))

# Register all tools with the MCP server
for tool in all_tools:
    logger.debug("Registering tool: %s", tool["name"])
    try:
        mcp.tool(
            name=tool["name"],
            description=tool["description"],
        )(tool["handler"])
    except Exception:
        logger.exception("Failed to register tool %s", tool["name"])
        raise

logger.info("Registered %d tools", len(all_tools))


def run_stdio_server() -> None:
    """Run the MCP server using stdio transport.

    Stdin receives JSON-RPC requests, stdout sends responses.
    """
    logger.info("Starting %s v%s on stdio transport", config.server_name, config.server_version)

    if config.debug:
        logging.getLogger().setLevel(logging.DEBUG)
        logger.debug("Debug mode enabled - verbose protocol logging active")
    else:
        logging.getLogger("fastmcp").setLevel(logging.WARNING)

    def signal_handler(signum: int, _frame: Any) -> None:
        logger.info("Received signal %s, initiating shutdown...", signum)
        sys.exit(0)

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    # Build the library before the first request arrives
    get_library()

    try:
        logger.info("MCP Server ready and waiting for connections...")
        mcp.run(transport="stdio")
    except Exception:
        logger.exception("Fatal error in MCP server")
        sys.exit(1)


def main() -> None:
    """Entry point for the ``library-circulation`` command."""
    try:
        logger.info("=" * 60)
        logger.info("Library Circulation MCP Server")
        logger.info("Version: %s", config.server_version)
        logger.info("Transport: %s", config.transport)
        logger.info("Debug Mode: %s", config.debug)
        logger.info("=" * 60)

        if config.transport == "stdio":
            run_stdio_server()
        else:
            logger.error("Unsupported transport: %s", config.transport)
            sys.exit(1)

    except KeyboardInterrupt:
        logger.info("Server stopped by user")
    except Exception:
        logger.exception("Failed to start MCP server")
        sys.exit(1)


if __name__ == "__main__":
    main()
