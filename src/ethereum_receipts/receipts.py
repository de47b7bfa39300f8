"""
Receipt Encoding
^^^^^^^^^^^^^^^^

.. contents:: Table of Contents
    :backlinks: none
    :local:

Introduction
------------

Receipts are serialized as an RLP list, with no version byte telling the
reader which rules produced them. Instead, the shape of the list does:

- Three fields, `[gas_used, bloom, logs]`, are written for the [`Unknown`]
  outcome. Nothing about the outcome survives, so decoding always yields
  [`Unknown`].
- Four fields, `[outcome, gas_used, bloom, logs]`, are written for the other
  outcomes. An outcome of at most one byte is a [`StatusCode`] (the empty
  string being `0`), anything else must be a 32 byte [`StateRoot`].

That inference lives in [`classify_receipt`] alone. It exists to read receipts
that have already been persisted, and must not be extended to new fields.

[`Unknown`]: ref:ethereum_receipts.blocks.Unknown
[`StatusCode`]: ref:ethereum_receipts.blocks.StatusCode
[`StateRoot`]: ref:ethereum_receipts.blocks.StateRoot
[`classify_receipt`]: ref:ethereum_receipts.receipts.classify_receipt
"""

import enum
import logging
from typing import Final, Optional, Sequence, Tuple, Type, TypeVar

from ethereum_rlp import Extended, rlp
from ethereum_types.bytes import Bytes
from ethereum_types.numeric import U8, U256, Uint

from .bloom import bloom_from_bytes, bloom_to_bytes, logs_bloom
from .blocks import (
    LocalizedReceipt,
    Log,
    Receipt,
    RichReceipt,
    StateRoot,
    StatusCode,
    TransactionOutcome,
    Unknown,
)
from .crypto.hash import Hash32
from .exceptions import (
    CumulativeGasDecreased,
    InvalidReceipt,
    InvalidStateRoot,
)
from .fork_types import (
    STATE_ROOT_BYTE_LENGTH,
    STATUS_CODE_MAX_BYTE_LENGTH,
    Address,
    Bloom,
    Root,
)

logger = logging.getLogger(__name__)

LEGACY_RECEIPT_FIELD_COUNT: Final[int] = 3
"""
Number of fields in a receipt without an outcome.
"""

RECEIPT_FIELD_COUNT: Final[int] = 4
"""
Number of fields in a receipt carrying a state root or a status code.
"""


class ReceiptShape(enum.Enum):
    """
    The layouts a receipt can have on the wire.
    """

    LEGACY = enum.auto()
    """
    `[gas_used, bloom, logs]`, decoded with an [`Unknown`] outcome.

    [`Unknown`]: ref:ethereum_receipts.blocks.Unknown
    """

    STATE_ROOT = enum.auto()
    """
    `[state_root, gas_used, bloom, logs]`.
    """

    STATUS_CODE = enum.auto()
    """
    `[status_code, gas_used, bloom, logs]`.
    """


def make_receipt(
    outcome: TransactionOutcome,
    gas_used: U256,
    logs: Sequence[Log],
) -> Receipt:
    """
    Make the receipt for a transaction that was executed.

    Parameters
    ----------
    outcome :
        The outcome of the transaction, recorded the way the rules in force
        require.
    gas_used :
        The total gas used so far in the block after the transaction was
        executed.
    logs :
        The logs produced by the transaction.

    Returns
    -------
    receipt : `Receipt`
        The receipt for the transaction, with its bloom computed from `logs`.
    """
    logs = tuple(logs)
    return Receipt(
        gas_used=gas_used,
        log_bloom=logs_bloom(logs),
        logs=logs,
        outcome=outcome,
    )


def serialize_receipt(receipt: Receipt) -> Extended:
    """
    Convert `receipt` into the structure that is RLP encoded, for embedding in
    a larger RLP list.
    """
    fields: Tuple[Extended, ...] = (
        receipt.gas_used,
        bloom_to_bytes(receipt.log_bloom),
        receipt.logs,
    )

    outcome = receipt.outcome
    if isinstance(outcome, Unknown):
        return fields
    elif isinstance(outcome, StateRoot):
        return (outcome.root,) + fields
    else:
        return (outcome.code,) + fields


def encode_receipt(receipt: Receipt) -> Bytes:
    """
    Encodes a receipt.

    Parameters
    ----------
    receipt :
        The receipt to encode.

    Returns
    -------
    encoded : `Bytes`
        The RLP encoding of `receipt`. A receipt with an [`Unknown`] outcome
        is written as a three field list, every other receipt as a four field
        list.

    [`Unknown`]: ref:ethereum_receipts.blocks.Unknown
    """
    return rlp.encode(serialize_receipt(receipt))


def classify_receipt(raw_receipt: rlp.Simple) -> ReceiptShape:
    """
    Determine which layout `raw_receipt` was written with.

    Parameters
    ----------
    raw_receipt :
        A receipt decoded from RLP into raw sequences and bytes.

    Returns
    -------
    shape : `ReceiptShape`
        [`ReceiptShape.LEGACY`] for three fields. For four fields,
        [`ReceiptShape.STATUS_CODE`] if the first field is at most one byte
        long, otherwise [`ReceiptShape.STATE_ROOT`].

    Raises
    ------
    InvalidReceipt
        If `raw_receipt` is not a list of three or four items, or if the first
        of four items is a list.

    [`ReceiptShape.LEGACY`]: ref:ethereum_receipts.receipts.ReceiptShape.LEGACY
    [`ReceiptShape.STATUS_CODE`]: ref:ethereum_receipts.receipts.ReceiptShape.STATUS_CODE
    [`ReceiptShape.STATE_ROOT`]: ref:ethereum_receipts.receipts.ReceiptShape.STATE_ROOT
    """  # noqa: E501
    if isinstance(raw_receipt, bytes):
        raise InvalidReceipt("receipt is bytes, expected sequence")

    if len(raw_receipt) == LEGACY_RECEIPT_FIELD_COUNT:
        return ReceiptShape.LEGACY

    if len(raw_receipt) != RECEIPT_FIELD_COUNT:
        raise InvalidReceipt(
            f"receipt has {len(raw_receipt)} fields, expected "
            f"{LEGACY_RECEIPT_FIELD_COUNT} or {RECEIPT_FIELD_COUNT}"
        )

    raw_outcome = raw_receipt[0]
    if not isinstance(raw_outcome, bytes):
        raise InvalidReceipt("receipt outcome is sequence, expected bytes")

    if len(raw_outcome) <= STATUS_CODE_MAX_BYTE_LENGTH:
        return ReceiptShape.STATUS_CODE
    return ReceiptShape.STATE_ROOT


T = TypeVar("T")


def _deserialize_field(cls: Type[T], raw: rlp.Simple, name: str) -> T:
    try:
        return rlp.deserialize_to(cls, raw)
    except rlp.DecodingError as e:
        raise InvalidReceipt(f"invalid receipt {name}") from e


def _deserialize_bloom(raw_bloom: rlp.Simple) -> Bloom:
    if not isinstance(raw_bloom, bytes):
        raise InvalidReceipt("receipt bloom is sequence, expected bytes")
    return bloom_from_bytes(raw_bloom)


def _deserialize_state_root(raw_root: rlp.Simple) -> Root:
    assert isinstance(raw_root, bytes)
    if len(raw_root) != STATE_ROOT_BYTE_LENGTH:
        raise InvalidStateRoot(
            f"state root must be {STATE_ROOT_BYTE_LENGTH} bytes, "
            f"got {len(raw_root)}"
        )
    return Root(raw_root)


def _deserialize_status_code(raw_code: rlp.Simple) -> U8:
    assert isinstance(raw_code, bytes)
    # Zero is the empty string, never a single zero byte.
    if raw_code == b"\x00":
        raise InvalidReceipt("status code is not minimally encoded")
    return U8.from_be_bytes(raw_code)


def deserialize_receipt(raw_receipt: rlp.Simple) -> Receipt:
    """
    Convert `raw_receipt` from raw sequences and bytes to a structured
    receipt.

    The bloom is taken as found and is not checked against the logs.

    Parameters
    ----------
    raw_receipt :
        A receipt decoded from RLP into raw sequences and bytes.

    Returns
    -------
    receipt : `Receipt`
        The decoded receipt.

    Raises
    ------
    InvalidReceipt
        If `raw_receipt` is not a well formed receipt of any era.
    """
    shape = classify_receipt(raw_receipt)
    logger.debug("decoding receipt with %s layout", shape.name)

    assert not isinstance(raw_receipt, bytes)

    outcome: TransactionOutcome
    if shape is ReceiptShape.LEGACY:
        raw_gas_used, raw_bloom, raw_logs = raw_receipt
        outcome = Unknown()
    elif shape is ReceiptShape.STATE_ROOT:
        raw_root, raw_gas_used, raw_bloom, raw_logs = raw_receipt
        outcome = StateRoot(_deserialize_state_root(raw_root))
    else:
        raw_code, raw_gas_used, raw_bloom, raw_logs = raw_receipt
        outcome = StatusCode(_deserialize_status_code(raw_code))

    return Receipt(
        gas_used=_deserialize_field(U256, raw_gas_used, "gas used"),
        log_bloom=_deserialize_bloom(raw_bloom),
        logs=_deserialize_field(
            Tuple[Log, ...], raw_logs, "logs"  # type: ignore[arg-type]
        ),
        outcome=outcome,
    )


def decode_receipt(encoded_receipt: Bytes) -> Receipt:
    """
    Decodes a receipt.

    Parameters
    ----------
    encoded_receipt :
        RLP encoding of a receipt of any era.

    Returns
    -------
    receipt : `Receipt`
        The decoded receipt. Three field receipts always decode with an
        [`Unknown`] outcome.

    Raises
    ------
    InvalidReceipt
        If `encoded_receipt` is not valid RLP, or is not a well formed
        receipt.

    [`Unknown`]: ref:ethereum_receipts.blocks.Unknown
    """
    try:
        raw_receipt = rlp.decode(encoded_receipt)
    except rlp.DecodingError as e:
        raise InvalidReceipt("receipt is not valid RLP") from e

    return deserialize_receipt(raw_receipt)


def _transaction_gas_used(
    receipt: Receipt, previous_cumulative_gas_used: U256
) -> U256:
    if receipt.gas_used < previous_cumulative_gas_used:
        raise CumulativeGasDecreased(
            "cumulative gas used is lower than that of the previous receipt"
        )
    return receipt.gas_used - previous_cumulative_gas_used


def enrich_receipt(
    receipt: Receipt,
    transaction_hash: Hash32,
    transaction_index: Uint,
    previous_cumulative_gas_used: U256,
    contract_address: Optional[Address] = None,
) -> RichReceipt:
    """
    Attach the transaction a receipt belongs to, and the gas used by that
    transaction alone.

    `previous_cumulative_gas_used` is the `gas_used` of the receipt before
    `receipt` in the same block, or zero for the first transaction.
    """
    return RichReceipt(
        transaction_hash=transaction_hash,
        transaction_index=transaction_index,
        cumulative_gas_used=receipt.gas_used,
        gas_used=_transaction_gas_used(receipt, previous_cumulative_gas_used),
        contract_address=contract_address,
        logs=receipt.logs,
        log_bloom=receipt.log_bloom,
        outcome=receipt.outcome,
    )


def localize_receipt(
    receipt: Receipt,
    transaction_hash: Hash32,
    transaction_index: Uint,
    block_hash: Hash32,
    block_number: Uint,
    previous_cumulative_gas_used: U256,
    contract_address: Optional[Address] = None,
) -> LocalizedReceipt:
    """
    Attach the transaction and block a receipt belongs to.

    Parameters
    ----------
    receipt :
        Receipt of an executed transaction.
    transaction_hash :
        Hash of the transaction.
    transaction_index :
        Position of the transaction in its block.
    block_hash :
        Hash of the block including the transaction.
    block_number :
        Number of the block including the transaction.
    previous_cumulative_gas_used :
        `gas_used` of the preceding receipt in the block, or zero for the
        first transaction.
    contract_address :
        Address of the contract created by the transaction, if any.

    Returns
    -------
    localized_receipt : `LocalizedReceipt`
        The receipt, along with its position in the chain and the gas used by
        the transaction alone.

    Raises
    ------
    CumulativeGasDecreased
        If `previous_cumulative_gas_used` exceeds `receipt.gas_used`.
    """
    return LocalizedReceipt(
        transaction_hash=transaction_hash,
        transaction_index=transaction_index,
        block_hash=block_hash,
        block_number=block_number,
        cumulative_gas_used=receipt.gas_used,
        gas_used=_transaction_gas_used(receipt, previous_cumulative_gas_used),
        contract_address=contract_address,
        logs=receipt.logs,
        log_bloom=receipt.log_bloom,
        outcome=receipt.outcome,
    )
