__all__ = [
    # Client
    "GethClient",
    "RpcError",
    # Transport
    "HttpTransport",
    "JsonRpcTransport",
    "JSONRPCError",
    "TransportError",
    # Tracer configuration
    "LoggerConfig",
    "PrestateTracerConfig",
    # Result types
    "Block",
    "ExecTrace",
    "PrestateAccount",
    "ProofResponse",
    "StorageProof",
    "Transaction",
    # Schema
    "SchemaRegistry",
    "SchemaValidationError",
    # Config
    "Settings",
    "load_settings",
    # Helpers
    "BlockNumber",
    "to_padded_word",
]

from .conduit.client import GethClient, RpcError
from .conduit.tracer import LoggerConfig, PrestateTracerConfig
from .conduit.transport import HttpTransport, JSONRPCError, JsonRpcTransport, TransportError
from .config import Settings, load_settings
from .omens.schemas import SchemaRegistry, SchemaValidationError
from .omens.types import Block, ExecTrace, PrestateAccount, ProofResponse, StorageProof, Transaction
from .utils import BlockNumber, to_padded_word
