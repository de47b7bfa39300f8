"""
Ethereum Receipts
^^^^^^^^^^^^^^^^^

Every transaction executed on the chain leaves behind a _receipt_: the gas
consumed by the block so far, the logs the transaction emitted, a bloom filter
summarising those logs, and, depending on the rules in force when the block was
built, either nothing, an intermediate state root, or a status code.

This package contains the receipt data types together with their Recursive
Length Prefix (RLP) encoding, the logs bloom calculation, and the adapters used
to store per-block trace blooms in a multi-resolution bloom index.
"""

__version__ = "0.1.0"
