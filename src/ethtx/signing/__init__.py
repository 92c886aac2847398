"""
Signing - private key handling and EIP-155 transaction signing.
"""
