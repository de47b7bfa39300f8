"""
Cryptographic primitives used to build receipts.
"""
