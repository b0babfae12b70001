"""HTTP transport for the Azure MCP Server.

Defines the FastAPI application with:
- Tool discovery endpoint (/api/tools)
- Tool execution endpoint (/api/tools/{tool_name}/execute)
- Health check endpoint (/health)
"""

from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from . import __version__
from .commands.factory import CommandFactory, build_command_factory
from .logging_config import get_logger

logger = get_logger(__name__)

TOOLS_LIST_COMMAND = "tools_list"


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    version: str
    read_only: bool


def create_app(factory: Optional[CommandFactory] = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        factory: Command factory to serve; defaults to all built-in areas

    Returns:
        Configured FastAPI instance
    """
    factory = factory or build_command_factory()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        await factory.aclose()

    app = FastAPI(
        title="Azure MCP Server",
        description="Azure resource operations exposed as uniformly-shaped commands",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.factory = factory

    @app.get("/health", response_model=HealthResponse)
    async def health_check() -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse(status="healthy", version=__version__, read_only=factory.read_only)

    @app.get("/api/tools")
    async def list_tools() -> List[Dict[str, Any]]:
        """List every visible command with its options."""
        response = await factory.dispatch(TOOLS_LIST_COMMAND)
        if not response.is_success:
            raise HTTPException(status_code=response.status, detail=response.message)
        return response.to_dict()["results"]

    @app.post("/api/tools/{tool_name}/execute")
    async def execute_tool(tool_name: str, request: Dict[str, Any]) -> JSONResponse:
        """Execute a command by tokenized name.

        Args:
            tool_name: Tokenized command name (e.g., "aks_cluster_list")
            request: Command parameters keyed by option name

        Returns:
            The ``{status, message, results}`` envelope; the HTTP status
            mirrors the envelope status

        Raises:
            HTTPException: If the command does not exist
        """
        if factory.find_command(tool_name) is None:
            logger.warning("Tool not found", extra={"tool": tool_name})
            raise HTTPException(status_code=404, detail=f"Tool '{tool_name}' not found")

        logger.info("Executing tool", extra={"tool": tool_name})
        response = await factory.dispatch(tool_name, request)
        return JSONResponse(status_code=response.status, content=response.to_dict())

    return app
