from typing import List

import pytest
from ethereum_rlp import rlp
from ethereum_types.numeric import U8, U256, Uint

from ethereum_receipts.bloom import logs_bloom
from ethereum_receipts.blocks import (
    Log,
    Receipt,
    StateRoot,
    StatusCode,
    TransactionOutcome,
    Unknown,
)
from ethereum_receipts.exceptions import (
    CumulativeGasDecreased,
    InvalidBloomWidth,
    InvalidReceipt,
    InvalidStateRoot,
)
from ethereum_receipts.fork_types import EMPTY_BLOOM, Bloom, Root
from ethereum_receipts.receipts import (
    ReceiptShape,
    classify_receipt,
    decode_receipt,
    deserialize_receipt,
    encode_receipt,
    enrich_receipt,
    localize_receipt,
    make_receipt,
    serialize_receipt,
)
from ethereum_receipts.utils.hexadecimal import (
    hex_to_bytes,
    hex_to_bytes20,
    hex_to_bytes32,
    hex_to_bytes256,
)

LOG = Log(
    address=hex_to_bytes20("dcf421d093428b096ca501a7cd1a740855a7976f"),
    topics=(),
    data=b"\x00" * 32,
)

STATE_ROOT = hex_to_bytes32(
    "2f697d671e9ae4ee24a43c4b0d7e15f1cb4ba6de1561120d43b9a4e8c4a8a6ee"
)

GAS_USED = U256(0x40CAE)

LOG_BLOOM_HEX = (
    "0000000000000000000000000000000000000000000000000000000000000000"
    "0000000000000000000000000000000000000000000000000000000400000000"
    "0000000000000000000000000000000000000000000000000000000000000000"
    "0000000000000000000000000000000000000000000000000000000800000000"
    "0000000000000000000000000000000000000000000000000000000000000000"
    "0000000000000000000000000000000000000000000000000000000000000000"
    "0000000000000000000000000000000000000000000000000000000000000020"
    "0000000000000000000000000000000000000000000000000000000000000000"
)

ENCODED_LOGS_HEX = (
    "f838f794dcf421d093428b096ca501a7cd1a740855a7976fc0a0"
    "0000000000000000000000000000000000000000000000000000000000000000"
)

ENCODED_TAIL_HEX = "83040caeb90100" + LOG_BLOOM_HEX + ENCODED_LOGS_HEX


def test_make_receipt_computes_bloom() -> None:
    receipt = make_receipt(Unknown(), GAS_USED, [LOG])

    assert receipt.log_bloom == hex_to_bytes256(LOG_BLOOM_HEX)
    assert receipt.logs == (LOG,)
    assert receipt.gas_used == GAS_USED


def test_make_receipt_without_logs() -> None:
    receipt = make_receipt(StatusCode(U8(1)), U256(21000), [])

    assert receipt.log_bloom == EMPTY_BLOOM
    assert receipt.logs == ()


def test_receipt_is_frozen() -> None:
    receipt = make_receipt(Unknown(), GAS_USED, [LOG])

    with pytest.raises(AttributeError):
        receipt.gas_used = U256(0)  # type: ignore[misc]


@pytest.mark.parametrize(
    "outcome, attribute",
    [
        (Unknown(), "code"),
        (StateRoot(STATE_ROOT), "root"),
        (StatusCode(U8(1)), "code"),
    ],
)
def test_outcome_is_frozen(
    outcome: TransactionOutcome, attribute: str
) -> None:
    with pytest.raises(AttributeError):
        setattr(outcome, attribute, U8(0))


def test_encode_no_state_root() -> None:
    receipt = make_receipt(Unknown(), GAS_USED, [LOG])

    expected = hex_to_bytes("f90141" + ENCODED_TAIL_HEX)
    assert encode_receipt(receipt) == expected


def test_encode_state_root() -> None:
    receipt = make_receipt(StateRoot(STATE_ROOT), GAS_USED, [LOG])

    expected = hex_to_bytes("f90162a0" + STATE_ROOT.hex() + ENCODED_TAIL_HEX)
    encoded = encode_receipt(receipt)
    assert encoded == expected
    assert decode_receipt(encoded) == receipt


def test_encode_status_code() -> None:
    receipt = make_receipt(StatusCode(U8(0)), GAS_USED, [LOG])

    expected = hex_to_bytes("f9014280" + ENCODED_TAIL_HEX)
    encoded = encode_receipt(receipt)
    assert encoded == expected
    assert decode_receipt(encoded) == receipt


@pytest.mark.parametrize(
    "outcome",
    [
        StateRoot(STATE_ROOT),
        StateRoot(Root(b"\x00" * 32)),
        StatusCode(U8(0)),
        StatusCode(U8(1)),
        StatusCode(U8(0xFF)),
    ],
)
def test_encode_decode_preserves_outcome(outcome: TransactionOutcome) -> None:
    topic = hex_to_bytes32("01")
    logs = [
        LOG,
        Log(address=hex_to_bytes20("ff"), topics=(topic, topic), data=b""),
    ]
    receipt = make_receipt(outcome, U256(2**256 - 1), logs)

    decoded = decode_receipt(encode_receipt(receipt))

    assert decoded == receipt
    assert decoded.logs == tuple(logs)


@pytest.mark.parametrize(
    "outcome",
    [Unknown(), StateRoot(STATE_ROOT), StatusCode(U8(1))],
)
def test_legacy_layout_decodes_as_unknown(outcome: TransactionOutcome) -> None:
    receipt = make_receipt(outcome, GAS_USED, [LOG])
    legacy = rlp.encode(
        (receipt.gas_used, receipt.log_bloom, receipt.logs)
    )

    decoded = decode_receipt(legacy)

    assert decoded.outcome == Unknown()
    assert decoded.gas_used == GAS_USED
    assert decoded.log_bloom == receipt.log_bloom
    assert decoded.logs == (LOG,)


def test_decode_trusts_wire_bloom() -> None:
    bloom = Bloom(b"\xff" * 256)
    encoded = rlp.encode((b"\x01", GAS_USED, bloom, (LOG,)))

    decoded = decode_receipt(encoded)

    assert decoded.log_bloom == bloom
    assert decoded.log_bloom != logs_bloom(decoded.logs)


def test_decode_empty_status_code_is_zero() -> None:
    encoded = rlp.encode((b"", GAS_USED, EMPTY_BLOOM, ()))

    assert decode_receipt(encoded).outcome == StatusCode(U8(0))


def test_decode_rejects_zero_byte_status_code() -> None:
    encoded = rlp.encode((b"\x00", GAS_USED, EMPTY_BLOOM, ()))

    with pytest.raises(InvalidReceipt):
        decode_receipt(encoded)


def test_decode_single_byte_status_code() -> None:
    encoded = rlp.encode((b"\x01", GAS_USED, EMPTY_BLOOM, ()))

    assert decode_receipt(encoded).outcome == StatusCode(U8(1))


@pytest.mark.parametrize("length", [2, 20, 31, 33, 64])
def test_decode_rejects_state_root_of_wrong_width(length: int) -> None:
    encoded = rlp.encode((b"\x11" * length, GAS_USED, EMPTY_BLOOM, ()))

    with pytest.raises(InvalidStateRoot):
        decode_receipt(encoded)


@pytest.mark.parametrize("length", [0, 1, 255, 257, 512])
def test_decode_rejects_bloom_of_wrong_width(length: int) -> None:
    legacy = rlp.encode((GAS_USED, b"\x00" * length, ()))
    current = rlp.encode((b"\x01", GAS_USED, b"\x00" * length, ()))

    with pytest.raises(InvalidBloomWidth):
        decode_receipt(legacy)
    with pytest.raises(InvalidBloomWidth):
        decode_receipt(current)


def test_bloom_width_error_is_invalid_receipt() -> None:
    assert issubclass(InvalidBloomWidth, InvalidReceipt)
    assert issubclass(InvalidStateRoot, InvalidReceipt)


@pytest.mark.parametrize("count", [0, 1, 2, 5, 6])
def test_decode_rejects_wrong_field_count(count: int) -> None:
    encoded = rlp.encode([b"\x01"] * count)

    with pytest.raises(InvalidReceipt):
        decode_receipt(encoded)


def test_decode_rejects_bytes() -> None:
    with pytest.raises(InvalidReceipt):
        decode_receipt(rlp.encode(b"receipt"))


def test_decode_rejects_truncated_input() -> None:
    receipt = make_receipt(StatusCode(U8(1)), GAS_USED, [LOG])
    encoded = encode_receipt(receipt)

    with pytest.raises(InvalidReceipt):
        decode_receipt(encoded[:-10])


def test_decode_rejects_empty_input() -> None:
    with pytest.raises(InvalidReceipt):
        decode_receipt(b"")


def test_decode_rejects_sequence_outcome() -> None:
    encoded = rlp.encode(([b"\x01"], GAS_USED, EMPTY_BLOOM, ()))

    with pytest.raises(InvalidReceipt):
        decode_receipt(encoded)


def test_decode_rejects_sequence_bloom() -> None:
    encoded = rlp.encode((b"\x01", GAS_USED, [EMPTY_BLOOM], ()))

    with pytest.raises(InvalidReceipt):
        decode_receipt(encoded)


def test_decode_rejects_sequence_gas_used() -> None:
    encoded = rlp.encode((b"\x01", [GAS_USED], EMPTY_BLOOM, ()))

    with pytest.raises(InvalidReceipt):
        decode_receipt(encoded)


def test_decode_rejects_malformed_logs() -> None:
    encoded = rlp.encode((b"\x01", GAS_USED, EMPTY_BLOOM, [[b"\x01"]]))

    with pytest.raises(InvalidReceipt):
        decode_receipt(encoded)


def test_decode_rejects_logs_as_bytes() -> None:
    encoded = rlp.encode((GAS_USED, EMPTY_BLOOM, b"logs"))

    with pytest.raises(InvalidReceipt):
        decode_receipt(encoded)


def test_serialize_receipt_embeds_in_list() -> None:
    receipts = [
        make_receipt(StatusCode(U8(1)), U256(21000), []),
        make_receipt(StatusCode(U8(0)), GAS_USED, [LOG]),
    ]

    encoded = rlp.encode([serialize_receipt(r) for r in receipts])
    raw_receipts = rlp.decode(encoded)

    assert isinstance(raw_receipts, list)
    decoded = [deserialize_receipt(raw) for raw in raw_receipts]
    assert decoded == receipts


@pytest.mark.parametrize(
    "raw_receipt, shape",
    [
        ([b"", b"", b""], ReceiptShape.LEGACY),
        ([b"", b"", b"", []], ReceiptShape.STATUS_CODE),
        ([b"\x01", b"", b"", []], ReceiptShape.STATUS_CODE),
        ([b"\x01\x02", b"", b"", []], ReceiptShape.STATE_ROOT),
        ([b"\x00" * 32, b"", b"", []], ReceiptShape.STATE_ROOT),
    ],
)
def test_classify_receipt(raw_receipt: List, shape: ReceiptShape) -> None:
    assert classify_receipt(raw_receipt) is shape


@pytest.mark.parametrize(
    "raw_receipt",
    [b"", b"\x01", [], [b""], [b"", b""], [b""] * 5, [[], b"", b"", []]],
)
def test_classify_receipt_rejects(raw_receipt: List) -> None:
    with pytest.raises(InvalidReceipt):
        classify_receipt(raw_receipt)


def test_localize_receipt() -> None:
    receipt = make_receipt(StatusCode(U8(1)), GAS_USED, [LOG])
    transaction_hash = hex_to_bytes32("aa")
    block_hash = hex_to_bytes32("bb")

    localized = localize_receipt(
        receipt,
        transaction_hash=transaction_hash,
        transaction_index=Uint(3),
        block_hash=block_hash,
        block_number=Uint(4_000_000),
        previous_cumulative_gas_used=U256(0x40000),
    )

    assert localized.transaction_hash == transaction_hash
    assert localized.transaction_index == Uint(3)
    assert localized.block_hash == block_hash
    assert localized.block_number == Uint(4_000_000)
    assert localized.cumulative_gas_used == GAS_USED
    assert localized.gas_used == U256(0xCAE)
    assert localized.contract_address is None
    assert localized.logs == receipt.logs
    assert localized.log_bloom == receipt.log_bloom
    assert localized.outcome == receipt.outcome


def test_enrich_receipt() -> None:
    receipt = make_receipt(StateRoot(STATE_ROOT), GAS_USED, [])
    contract_address = hex_to_bytes20("01")

    rich = enrich_receipt(
        receipt,
        transaction_hash=hex_to_bytes32("aa"),
        transaction_index=Uint(0),
        previous_cumulative_gas_used=U256(0),
        contract_address=contract_address,
    )

    assert rich.gas_used == GAS_USED
    assert rich.cumulative_gas_used == GAS_USED
    assert rich.contract_address == contract_address
    assert rich.outcome == StateRoot(STATE_ROOT)


def test_localize_receipt_rejects_decreasing_gas() -> None:
    receipt = make_receipt(Unknown(), U256(100), [])

    with pytest.raises(CumulativeGasDecreased):
        localize_receipt(
            receipt,
            transaction_hash=hex_to_bytes32("aa"),
            transaction_index=Uint(1),
            block_hash=hex_to_bytes32("bb"),
            block_number=Uint(1),
            previous_cumulative_gas_used=U256(101),
        )


def test_receipt_equality() -> None:
    first = make_receipt(StatusCode(U8(1)), GAS_USED, [LOG])
    second = Receipt(
        gas_used=GAS_USED,
        log_bloom=hex_to_bytes256(LOG_BLOOM_HEX),
        logs=(LOG,),
        outcome=StatusCode(U8(1)),
    )

    assert first == second
    assert first != make_receipt(StatusCode(U8(0)), GAS_USED, [LOG])


def test_enrich_receipt_rejects_decreasing_gas() -> None:
    receipt = make_receipt(StatusCode(U8(1)), U256(100), [])

    with pytest.raises(CumulativeGasDecreased):
        enrich_receipt(
            receipt,
            transaction_hash=hex_to_bytes32("aa"),
            transaction_index=Uint(1),
            previous_cumulative_gas_used=U256(200),
        )


def test_decreasing_gas_is_not_a_decoding_error() -> None:
    assert not issubclass(CumulativeGasDecreased, InvalidReceipt)
