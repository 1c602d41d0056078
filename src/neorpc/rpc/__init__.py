"""
RPC - JSON-RPC access to a NEO 2.x full node.

Provides the node client, the declarative method table, typed response
models and the Success/Failure result types.

Uses httpx for HTTP; no node SDK is required.
"""
