"""
Trace Blooms
^^^^^^^^^^^^

.. contents:: Table of Contents
    :backlinks: none
    :local:

Introduction
------------

Blocks are searched for matching traces with a multi-resolution bloom index:
the bloom of each block is stored in a _group_ of consecutive blocks, and
groups are merged into coarser groups level by level. The index itself, and
the meaning of a group's position, belong to the index. This module only
adapts its values to the types used here:

- [`BlockTracesBloom`] pins a block's bloom to 256 bytes.
- [`BlockTracesBloomGroup`] is the ordered list of blooms in one group.
- [`TraceGroupPosition`] is the `(level, index)` key of a group.

[`BlockTracesBloom`]: ref:ethereum_receipts.trace.bloom.BlockTracesBloom
[`BlockTracesBloomGroup`]: ref:ethereum_receipts.trace.bloom.BlockTracesBloomGroup
[`TraceGroupPosition`]: ref:ethereum_receipts.trace.bloom.TraceGroupPosition
"""  # noqa: E501

import logging
from dataclasses import dataclass
from typing import Protocol, Sequence, Tuple

from ethereum_rlp import rlp
from ethereum_types.bytes import Bytes
from ethereum_types.frozen import slotted_freezable
from ethereum_types.numeric import U8, U32

from ..bloom import bloom_from_bytes, bloom_to_bytes
from ..exceptions import (
    GroupPositionOutOfRange,
    InvalidBloomGroup,
    InvalidBloomWidth,
)
from ..fork_types import Bloom

logger = logging.getLogger(__name__)


class BloomGroup(Protocol):
    """
    Group of consecutive blooms, as handed out by the bloom index.
    """

    @property
    def blooms(self) -> Sequence[Bytes]:
        """
        Blooms of the group, in block order.
        """
        ...


class GroupPosition(Protocol):
    """
    Position of a [`BloomGroup`] in the bloom index.

    [`BloomGroup`]: ref:ethereum_receipts.trace.bloom.BloomGroup
    """

    @property
    def level(self) -> int:
        """
        Resolution level; `0` holds the blooms of individual blocks.
        """
        ...

    @property
    def index(self) -> int:
        """
        Index of the group within its level.
        """
        ...


@slotted_freezable
@dataclass
class BlockTracesBloom:
    """
    Bloom of the traces of a block.
    """

    bloom: Bloom

    def __post_init__(self) -> None:
        self.bloom = bloom_from_bytes(self.bloom)

    @classmethod
    def from_bloom(cls, bloom: Bytes) -> "BlockTracesBloom":
        """
        Wrap `bloom`, which must be exactly 256 bytes long.
        """
        return cls(bloom_from_bytes(bloom))

    def into_bloom(self) -> Bloom:
        """
        The wrapped bloom.
        """
        return self.bloom


@slotted_freezable
@dataclass
class BlockTracesBloomGroup:
    """
    Blooms of a group of consecutive blocks.
    """

    blooms: Tuple[BlockTracesBloom, ...]

    def __post_init__(self) -> None:
        self.blooms = tuple(self.blooms)
        for bloom in self.blooms:
            if not isinstance(bloom, BlockTracesBloom):
                raise TypeError("bloom group must hold BlockTracesBloom values")

    @classmethod
    def from_bloom_group(cls, group: BloomGroup) -> "BlockTracesBloomGroup":
        """
        Adapt every bloom of `group`, keeping their order.
        """
        return cls(
            tuple(BlockTracesBloom.from_bloom(bloom) for bloom in group.blooms)
        )

    def into_blooms(self) -> Tuple[Bloom, ...]:
        """
        The blooms of the group, in order, from which the bloom index builds
        its own group.
        """
        return tuple(bloom.into_bloom() for bloom in self.blooms)


@dataclass(frozen=True)
class TraceGroupPosition:
    """
    Position of a [`BlockTracesBloomGroup`] in the bloom index.

    [`BlockTracesBloomGroup`]: ref:ethereum_receipts.trace.bloom.BlockTracesBloomGroup
    """  # noqa: E501

    level: U8
    index: U32

    def __post_init__(self) -> None:
        if not isinstance(self.level, U8) or not isinstance(self.index, U32):
            raise TypeError("trace group position must hold a U8 and a U32")

    @classmethod
    def from_group_position(
        cls, position: GroupPosition
    ) -> "TraceGroupPosition":
        """
        Narrow the level and index of `position` to eight and thirty-two bits.

        Raises
        ------
        GroupPositionOutOfRange
            If either field does not fit. The bloom index never produces such
            positions, so this is a bug in the caller.
        """
        try:
            return cls(level=U8(position.level), index=U32(position.index))
        except OverflowError as e:
            raise GroupPositionOutOfRange(
                f"group position ({position.level}, {position.index}) does "
                "not fit in a trace group position"
            ) from e


def encode_bloom_group(group: BlockTracesBloomGroup) -> Bytes:
    """
    Encodes `group` as an RLP list of 256 byte strings, for storage.
    """
    return rlp.encode([bloom_to_bytes(bloom) for bloom in group.into_blooms()])


def decode_bloom_group(encoded_group: Bytes) -> BlockTracesBloomGroup:
    """
    Decodes a group of blooms stored by [`encode_bloom_group`].

    Parameters
    ----------
    encoded_group :
        RLP list of blooms.

    Returns
    -------
    group : `BlockTracesBloomGroup`
        The decoded group.

    Raises
    ------
    InvalidBloomGroup
        If `encoded_group` is not valid RLP, is not a list of byte strings,
        or holds a bloom that is not exactly 256 bytes long.

    [`encode_bloom_group`]: ref:ethereum_receipts.trace.bloom.encode_bloom_group
    """  # noqa: E501
    try:
        raw_group = rlp.decode(encoded_group)
    except rlp.DecodingError as e:
        raise InvalidBloomGroup("bloom group is not valid RLP") from e

    if isinstance(raw_group, bytes):
        raise InvalidBloomGroup("bloom group is bytes, expected sequence")

    blooms = []
    for raw_bloom in raw_group:
        if not isinstance(raw_bloom, bytes):
            raise InvalidBloomGroup("bloom is sequence, expected bytes")
        try:
            blooms.append(BlockTracesBloom.from_bloom(raw_bloom))
        except InvalidBloomWidth as e:
            raise InvalidBloomGroup(str(e)) from e

    logger.debug("decoded bloom group of %d blooms", len(blooms))
    return BlockTracesBloomGroup(tuple(blooms))


def trace_group_key(position: TraceGroupPosition) -> Bytes:
    """
    Storage key of the group at `position`: the level byte followed by the
    big-endian index.
    """
    return position.level.to_bytes1() + position.index.to_be_bytes4()
