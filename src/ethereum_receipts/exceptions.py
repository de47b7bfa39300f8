"""
Error types raised while building, encoding and decoding receipts.
"""


class ReceiptsException(Exception):
    """
    Base class for all exceptions _expected_ to be thrown during normal
    operation.
    """


class InvalidReceipt(ReceiptsException):
    """
    Thrown when an encoded receipt does not have any of the shapes a receipt
    has had on the wire.
    """


class InvalidBloomWidth(InvalidReceipt):
    """
    Thrown when a logs bloom is not exactly 256 bytes wide.
    """


class InvalidStateRoot(InvalidReceipt):
    """
    Thrown when the post-transaction state root of a receipt is not exactly 32
    bytes wide.
    """


class InvalidBloomGroup(ReceiptsException):
    """
    Thrown when a stored group of trace blooms cannot be decoded.
    """


class GroupPositionOutOfRange(ReceiptsException):
    """
    Thrown when a bloom group position does not fit in a trace group position.

    The bloom index only hands out positions that fit, so this indicates a bug
    in the caller rather than bad input.
    """


class CumulativeGasDecreased(ReceiptsException):
    """
    Thrown when a receipt reports less cumulative gas than the receipt before
    it in the same block.

    Receipts are handed over in execution order, so this indicates a bug in
    the caller rather than bad input.
    """
