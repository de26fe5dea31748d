"""
Standard error handling for the content dedup server with JSON-RPC 2.0 compliance.

This module provides standardized error codes and formatting functions so that
protocol errors and tool errors are reported consistently.
"""

from enum import IntEnum
from typing import Dict, Any, Optional, Union
import logging


class MCPErrorCode(IntEnum):
    """Standard error codes for server operations.

    Based on JSON-RPC 2.0 specification with implementation-defined extensions.
    """
    # JSON-RPC 2.0 standard errors
    PARSE_ERROR = -32700
    INVALID_REQUEST = -32600
    METHOD_NOT_FOUND = -32601
    INVALID_PARAMS = -32602
    INTERNAL_ERROR = -32603

    # Implementation-defined errors (-32000 to -32099)
    TOOL_EXECUTION_ERROR = -32000
    DEDUPLICATION_ERROR = -32003
    CONFIGURATION_ERROR = -32005
    VALIDATION_ERROR = -32006
    RESOURCE_NOT_FOUND = -32008


# Exception class names reported by tools, mapped to error codes
TOOL_ERROR_CODES = {
    'RecordValidationError': MCPErrorCode.VALIDATION_ERROR,
    'PolicyValidationError': MCPErrorCode.VALIDATION_ERROR,
    'RecordNotFoundError': MCPErrorCode.RESOURCE_NOT_FOUND,
    'ConfigurationError': MCPErrorCode.CONFIGURATION_ERROR,
    'DeduplicationError': MCPErrorCode.DEDUPLICATION_ERROR,
}


def error_code_for(error_type: Optional[str]) -> MCPErrorCode:
    """Map a reported exception class name to an error code."""
    return TOOL_ERROR_CODES.get(error_type or '', MCPErrorCode.TOOL_EXECUTION_ERROR)


def create_error_response(
    code: MCPErrorCode,
    message: str,
    data: Optional[Dict[str, Any]] = None,
    log_error: bool = True
) -> Dict[str, Any]:
    """Create a standardized MCP tool error result.

    Per MCP 2025-06-18 spec, tool errors should return a successful JSON-RPC
    response with isError=true in the result, not a JSON-RPC error object.

    Args:
        code: Standard error code from MCPErrorCode
        message: Human-readable error message
        data: Optional additional error data
        log_error: Whether to log the error

    Returns:
        Standardized MCP tool error result dictionary
    """
    if log_error:
        logging.error(f"Tool Error {int(code)}: {message}")
        if data:
            logging.debug(f"Error data: {data}")

    error_text = f"Error {int(code)}: {message}"

    meta = {
        "error_code": int(code),
        "error_message": message
    }
    if data:
        meta["error_data"] = data

    return {
        "content": [
            {
                "type": "text",
                "text": error_text
            }
        ],
        "isError": True,
        "_meta": meta
    }


def create_rpc_error(
    rpc_id: Optional[Union[int, str]],
    code: MCPErrorCode,
    message: str,
    data: Optional[Dict[str, Any]] = None
) -> Dict[str, Any]:
    """Create a JSON-RPC 2.0 error object for protocol-level failures.

    Args:
        rpc_id: Request id, None when it could not be determined
        code: Standard error code from MCPErrorCode
        message: Human-readable error message
        data: Optional additional error data

    Returns:
        JSON-RPC error response dictionary
    """
    error = {
        "code": int(code),
        "message": message
    }
    if data:
        error["data"] = data

    return {
        "jsonrpc": "2.0",
        "id": rpc_id,
        "error": error
    }
