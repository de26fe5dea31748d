from pydantic import BaseModel
from typing import Dict, Any, Optional, Union


RpcId = Optional[Union[int, str]]


class JsonRpcRequest(BaseModel):
    """JSON-RPC request model."""
    jsonrpc: str = "2.0"
    id: RpcId = None
    method: str
    params: Optional[Dict[str, Any]] = None


class JsonRpcResponse(BaseModel):
    """JSON-RPC response model."""
    jsonrpc: str = "2.0"
    id: RpcId
    result: Any


class JsonRpcError(BaseModel):
    """JSON-RPC error response model."""
    jsonrpc: str = "2.0"
    id: RpcId = None
    error: Dict[str, Any]
