"""
Keccak Hashing
^^^^^^^^^^^^^^

.. contents:: Table of Contents
    :backlinks: none
    :local:

Introduction
------------

The logs bloom picks the bits it sets from the keccak-256 digest of each log
address and topic. Topics and state roots are themselves 32 byte digests,
hence the [`Hash32`] alias.

[`Hash32`]: ref:ethereum_receipts.crypto.hash.Hash32
"""

from Crypto.Hash import keccak
from ethereum_types.bytes import Bytes, Bytes32

Hash32 = Bytes32


def keccak256(buffer: Bytes) -> Hash32:
    """
    Original (pre-standard) Keccak digest of `buffer`, 32 bytes wide.

    This is not SHA3-256: the padding differs, and so does every digest.
    """
    return Hash32(keccak.new(digest_bits=256, data=buffer).digest())
