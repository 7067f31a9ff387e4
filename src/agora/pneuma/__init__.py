"""
Pneuma - On-chain interaction layer for the Agora marketplace client.

Provides the JSON-RPC connection, the interface-driven ABI engine, the
signed client and the contract bindings.

Uses httpx + eth-account + eth-abi instead of the heavyweight web3.py.
"""
