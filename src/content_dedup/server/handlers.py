import asyncio
import logging
from typing import List, Dict, Any
from fastapi.responses import JSONResponse

from .models import JsonRpcResponse, JsonRpcError, RpcId
from .errors import MCPErrorCode, create_error_response, error_code_for


AVAILABLE_METHODS = ["initialize", "tools/list", "tools/call"]


def convert_to_mcp_format(tool_result: Dict[str, Any]) -> Dict[str, Any]:
    """Convert a tool response dict to MCP-compliant result format.

    Args:
        tool_result: Tool response dict with an optional 'success' flag

    Returns:
        MCP-compliant result dict
    """
    is_success = tool_result.get('success', True)

    if is_success:
        # Remove internal 'success' flag as it's not part of MCP spec
        result = tool_result.copy()
        result.pop('success', None)
        return result

    return create_error_response(
        code=error_code_for(tool_result.get('error_type')),
        message=tool_result.get('message', 'Tool execution failed'),
        data={key: value for key, value in tool_result.items() if key not in ('success', 'message')},
        log_error=False
    )


async def event_generator():
    """
    Handles the SSE connection for MCP clients.
    Sends the 'mcp-ready' event and then keeps the connection alive with heartbeats.
    """
    yield "event: mcp-ready\ndata: {}\n\n"

    try:
        while True:
            await asyncio.sleep(10)
            yield "data: heartbeat\n\n"
    except asyncio.CancelledError:
        pass


def _rpc_error(rpc_id: RpcId, code: MCPErrorCode, message: str, data: Dict[str, Any],
               status_code: int) -> JSONResponse:
    error_response = JsonRpcError(
        id=rpc_id,
        error={
            "code": int(code),
            "message": message,
            "data": data
        }
    )
    return JSONResponse(content=error_response.model_dump(), status_code=status_code)


async def handle_initialize(rpc_id: RpcId, server_config: dict, tool_definitions: List[dict]) -> JSONResponse:
    """Handle MCP initialize request."""
    response = JsonRpcResponse(
        id=rpc_id,
        result={
            "protocolVersion": server_config.get('protocol_version', '2025-06-18'),
            "capabilities": {
                "tools": {}
            },
            "serverInfo": {
                "name": server_config.get('title', 'Content Dedup Server'),
                "version": server_config.get('version', '1.0.0'),
                "serverURL": f"http://{server_config.get('host', '127.0.0.1')}:{server_config.get('port', 8080)}/"
            },
            "tools": tool_definitions
        }
    )
    return JSONResponse(content=response.model_dump(), media_type="application/json-rpc")


async def handle_tools_list(rpc_id: RpcId, tool_definitions: List[dict]) -> JSONResponse:
    """Handle tools/list request."""
    response = JsonRpcResponse(
        id=rpc_id,
        result={
            "tools": tool_definitions
        }
    )
    return JSONResponse(content=response.model_dump(), media_type="application/json-rpc")


async def handle_tools_call(rpc_id: RpcId, params: dict, tool_registry: Dict[str, Any]) -> JSONResponse:
    """Handle tools/call request with comprehensive error handling."""
    if not isinstance(params, dict):
        return _rpc_error(rpc_id, MCPErrorCode.INVALID_PARAMS, "Parameters must be an object",
                          {"provided_type": type(params).__name__}, 400)

    tool_name = params.get("name")
    if not tool_name:
        return _rpc_error(rpc_id, MCPErrorCode.INVALID_PARAMS, "Missing required parameter 'name'",
                          {"required_params": ["name"]}, 400)

    tool_args = params.get("arguments") or {}
    if not isinstance(tool_args, dict):
        return _rpc_error(rpc_id, MCPErrorCode.INVALID_PARAMS, "Tool arguments must be an object",
                          {"provided_type": type(tool_args).__name__}, 400)

    tool_func = tool_registry.get(tool_name)
    if not tool_func:
        return _rpc_error(rpc_id, MCPErrorCode.METHOD_NOT_FOUND, f"Tool '{tool_name}' not found",
                          {"available_tools": list(tool_registry.keys()), "requested_tool": tool_name}, 404)

    try:
        if asyncio.iscoroutinefunction(tool_func):
            result = await tool_func(**tool_args)
        else:
            result = tool_func(**tool_args)
    except TypeError as e:
        # Parameter validation error
        return _rpc_error(rpc_id, MCPErrorCode.INVALID_PARAMS,
                          f"Invalid parameters for tool '{tool_name}': {str(e)}",
                          {"tool_name": tool_name, "provided_args": list(tool_args.keys())}, 400)
    except Exception as e:
        logging.exception(f"Tool '{tool_name}' execution failed")
        return _rpc_error(rpc_id, MCPErrorCode.TOOL_EXECUTION_ERROR,
                          f"Tool '{tool_name}' execution failed: {str(e)}",
                          {"tool_name": tool_name, "error_type": type(e).__name__}, 500)

    response = JsonRpcResponse(id=rpc_id, result=convert_to_mcp_format(result))
    return JSONResponse(content=response.model_dump(), media_type="application/json-rpc")


def handle_unknown_method(rpc_id: RpcId, method: str) -> JSONResponse:
    """Handle unknown method requests."""
    return _rpc_error(rpc_id, MCPErrorCode.METHOD_NOT_FOUND, f"Method '{method}' not found",
                      {"requested_method": method, "available_methods": AVAILABLE_METHODS}, 404)


def handle_server_error(rpc_id: RpcId, error: Exception) -> JSONResponse:
    """Handle server errors."""
    logging.error(f"Unhandled JSON-RPC error: {error}")
    return _rpc_error(rpc_id, MCPErrorCode.INTERNAL_ERROR, f"Internal server error: {str(error)}",
                      {"error_type": type(error).__name__, "server_component": "json_rpc_handler"}, 500)
