"""
Conduit - JSON-RPC layer between Augury and the node.

Provides the transport protocol, the httpx transport, tracer
configurations and the typed GethClient.
"""
