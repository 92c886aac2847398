"""
Command implementations for the ethtx CLI.

- send:    Sign and broadcast value transfers / contract calls
- inspect: Look up transactions and receipts, explain reverts
"""
