"""
Ethereum Logs Bloom
^^^^^^^^^^^^^^^^^^^

.. contents:: Table of Contents
    :backlinks: none
    :local:

Introduction
------------

This modules defines functions for calculating bloom filters of logs. For the
general theory of bloom filters see e.g. `Wikipedia
<https://en.wikipedia.org/wiki/Bloom_filter>`_. Bloom filters are used to allow
for efficient searching of logs by address and/or topic, by rapidly
eliminating blocks and receipts from their search.

A receipt's bloom is the union of the blooms of its logs, so it can be built
either from the logs directly or by accruing each log's own bloom. Both give
the same result regardless of the order the logs are visited in.

Blooms crossing a storage or wire boundary go through [`bloom_from_bytes`],
which refuses anything that is not exactly 256 bytes wide.

[`bloom_from_bytes`]: ref:ethereum_receipts.bloom.bloom_from_bytes
"""

import logging
from typing import Iterable

from ethereum_types.bytes import Bytes
from ethereum_types.numeric import Uint

from .blocks import Log
from .crypto.hash import keccak256
from .exceptions import InvalidBloomWidth
from .fork_types import BLOOM_BYTE_LENGTH, EMPTY_BLOOM, Bloom

logger = logging.getLogger(__name__)


def add_to_bloom(bloom: bytearray, bloom_entry: Bytes) -> None:
    """
    Add a bloom entry to the bloom filter (`bloom`).

    The number of hash functions used is 3. They are calculated by taking the
    least significant 11 bits from the first 3 16-bit words of the
    `keccak_256()` hash of `bloom_entry`.

    Parameters
    ----------
    bloom :
        The bloom filter.
    bloom_entry :
        An entry which is to be added to bloom filter.
    """
    hash = keccak256(bloom_entry)

    for idx in (0, 2, 4):
        # Least significant 11 bits of the 16-bit word, counted from the
        # least significant bit of the whole filter.
        bit_to_set = int(Uint.from_be_bytes(hash[idx : idx + 2])) & 0x07FF
        # Byte 0 of the bytearray is the most significant byte.
        bit_index = 0x07FF - bit_to_set

        byte_index = bit_index // 8
        bit_value = 1 << (7 - (bit_index % 8))
        bloom[byte_index] = bloom[byte_index] | bit_value


def log_bloom(log: Log) -> Bloom:
    """
    Obtain the bloom of a single log entry. The address and each topic of the
    log are added to the filter; the data is not.

    Parameters
    ----------
    log :
        Log entry for which the bloom is to be obtained.

    Returns
    -------
    log_bloom : `Bloom`
        The bloom of `log`.
    """
    bloom = bytearray(EMPTY_BLOOM)

    add_to_bloom(bloom, log.address)
    for topic in log.topics:
        add_to_bloom(bloom, topic)

    return Bloom(bloom)


def accrue_bloom(bloom: bytearray, other: Bloom) -> None:
    """
    Set every bit of `bloom` that is set in `other`.

    Parameters
    ----------
    bloom :
        The bloom filter being accumulated into.
    other :
        The bloom filter to merge in.
    """
    for index, byte in enumerate(other):
        bloom[index] |= byte


def logs_bloom(logs: Iterable[Log]) -> Bloom:
    """
    Obtain the logs bloom from a list of log entries.

    Parameters
    ----------
    logs :
        List of logs for which the logs bloom is to be obtained.

    Returns
    -------
    logs_bloom : `Bloom`
        The bitwise OR of the blooms of every log, or [`EMPTY_BLOOM`] when
        there are no logs.

    [`EMPTY_BLOOM`]: ref:ethereum_receipts.fork_types.EMPTY_BLOOM
    """
    bloom = bytearray(EMPTY_BLOOM)

    for log in logs:
        accrue_bloom(bloom, log_bloom(log))

    return Bloom(bloom)


def bloom_from_bytes(raw: Bytes) -> Bloom:
    """
    Convert raw bytes read from the wire or from storage into a bloom.

    Parameters
    ----------
    raw :
        Exactly 256 bytes, copied into the bloom unchanged.

    Returns
    -------
    bloom : `Bloom`
        The bloom with the same bytes as `raw`.

    Raises
    ------
    InvalidBloomWidth
        If `raw` is not exactly 256 bytes long.
    """
    if len(raw) != BLOOM_BYTE_LENGTH:
        logger.debug("rejecting %d byte bloom", len(raw))
        raise InvalidBloomWidth(
            f"bloom must be {BLOOM_BYTE_LENGTH} bytes, got {len(raw)}"
        )
    return Bloom(raw)


def bloom_to_bytes(bloom: Bloom) -> Bytes:
    """
    Raw bytes of `bloom`, in the order they are written to the wire.
    """
    return bytes(bloom)
