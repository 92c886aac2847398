"""
RPC - On-chain interaction layer.

Provides the async JSON-RPC client, typed transaction/receipt lookups, the
send pipeline and revert-reason decoding for legacy transactions.

Uses httpx + eth-abi instead of the heavyweight web3.py.
"""
