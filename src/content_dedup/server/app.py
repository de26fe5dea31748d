from fastapi import FastAPI, Request
from fastapi.responses import StreamingResponse, JSONResponse, Response
from typing import Dict, List, Any
from contextlib import asynccontextmanager
import time
import logging

from pydantic import ValidationError

from .models import JsonRpcRequest
from .handlers import (
    event_generator, handle_initialize, handle_tools_list, handle_tools_call,
    handle_unknown_method, handle_server_error
)
from .errors import MCPErrorCode, create_rpc_error


def create_app(server_config: dict) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        server_config: Server configuration dictionary

    Returns:
        Configured FastAPI application instance
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logging.info("FastAPI application starting up")
        yield
        logging.info("FastAPI application shutting down")

    app = FastAPI(
        title=server_config.get('title', 'Content Dedup Server'),
        version=server_config.get('version', '1.0.0'),
        lifespan=lifespan
    )

    @app.get("/health")
    async def health_check():
        """Health check endpoint for monitoring system status."""
        return {
            "status": "healthy",
            "timestamp": time.time(),
            "service": "Content Dedup Server",
            "version": server_config.get('version', '1.0.0')
        }

    return app


def setup_json_rpc_handler(app: FastAPI, tool_registry: Dict[str, Any], tool_definitions: List[dict], server_config: dict):
    """Setup the main JSON-RPC and SSE endpoint handler.

    Args:
        app: FastAPI application instance
        tool_registry: Dictionary mapping tool names to functions
        tool_definitions: List of tool definition dictionaries
        server_config: Server configuration dictionary
    """

    @app.api_route("/", methods=["GET", "POST"])
    async def json_rpc_handler(request: Request):
        if request.method == "GET":
            return StreamingResponse(event_generator(), media_type="text/event-stream")

        rpc_id = None
        try:
            try:
                body = await request.json()
            except ValueError as e:
                return JSONResponse(
                    content=create_rpc_error(None, MCPErrorCode.PARSE_ERROR, f"Invalid JSON: {str(e)}"),
                    status_code=400
                )

            if not isinstance(body, dict):
                return JSONResponse(
                    content=create_rpc_error(None, MCPErrorCode.INVALID_REQUEST, "Request must be a JSON object"),
                    status_code=400
                )

            try:
                rpc_request = JsonRpcRequest(**body)
            except ValidationError as e:
                return JSONResponse(
                    content=create_rpc_error(body.get("id"), MCPErrorCode.INVALID_REQUEST,
                                             f"Invalid request structure: {e.error_count()} validation errors"),
                    status_code=400
                )

            method = rpc_request.method
            rpc_id = rpc_request.id

            if rpc_id is None:
                # Notifications get no response body
                logging.debug(f"Received notification '{method}'")
                return Response(status_code=202)

            if method == "initialize":
                return await handle_initialize(rpc_id, server_config, tool_definitions)

            elif method == "tools/list":
                return await handle_tools_list(rpc_id, tool_definitions)

            elif method == "tools/call":
                return await handle_tools_call(rpc_id, rpc_request.params or {}, tool_registry)

            else:
                return handle_unknown_method(rpc_id, method)

        except Exception as e:
            return handle_server_error(rpc_id, e)
