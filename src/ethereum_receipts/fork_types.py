"""
Receipt Types
^^^^^^^^^^^^^

.. contents:: Table of Contents
    :backlinks: none
    :local:

Introduction
------------

Byte string types re-used by receipts, logs and blooms, and the fixed widths
they are encoded with.
"""

from typing import Final

from ethereum_types.bytes import Bytes20, Bytes256

from .crypto.hash import Hash32

Address = Bytes20
Root = Hash32
Bloom = Bytes256

BLOOM_BYTE_LENGTH: Final[int] = Bloom.LENGTH
"""
Width of a logs bloom (2048 bits) both in memory and on the wire.
"""

STATE_ROOT_BYTE_LENGTH: Final[int] = Root.LENGTH
"""
Width of the post-transaction state root carried by receipts created before
[EIP-658].

[EIP-658]: https://eips.ethereum.org/EIPS/eip-658
"""

STATUS_CODE_MAX_BYTE_LENGTH: Final[int] = 1
"""
Largest encoded width of a status code. Anything wider in the first field of a
four field receipt is a state root.
"""

EMPTY_BLOOM: Final[Bloom] = Bloom(b"\x00" * BLOOM_BYTE_LENGTH)
"""
Bloom with no bits set.
"""
