"""
SC - Smart contract invocation scripts.

Contract parameters and the NEO 2.x script builder used to encode a
contract call as VM bytecode.
"""
