"""
NEP5 - Fungible token standard helper built on the RPC client.
"""
