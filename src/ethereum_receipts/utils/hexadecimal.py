"""
Utility Functions For Hexadecimal Strings
^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^

.. contents:: Table of Contents
    :backlinks: none
    :local:

Introduction
------------

Helpers for building receipt fields out of hexadecimal strings, as found in
JSON fixtures and RPC responses.
"""
from ethereum_types.bytes import Bytes, Bytes20, Bytes32, Bytes256
from ethereum_types.numeric import U256


def remove_hex_prefix(hex_string: str) -> str:
    """
    Remove 0x prefix from a hex string if present. This function returns the
    passed hex string if it isn't prefixed with 0x.
    """
    if hex_string.startswith("0x"):
        return hex_string[len("0x") :]

    return hex_string


def hex_to_bytes(hex_string: str) -> Bytes:
    """
    Convert hex string to bytes.
    """
    return bytes.fromhex(remove_hex_prefix(hex_string))


def hex_to_bytes20(hex_string: str) -> Bytes20:
    """
    Convert hex string to an address sized byte string, left padding with
    zeros.
    """
    return Bytes20(bytes.fromhex(remove_hex_prefix(hex_string).rjust(40, "0")))


def hex_to_bytes32(hex_string: str) -> Bytes32:
    """
    Convert hex string to 32 bytes, left padding with zeros.
    """
    return Bytes32(bytes.fromhex(remove_hex_prefix(hex_string).rjust(64, "0")))


def hex_to_bytes256(hex_string: str) -> Bytes256:
    """
    Convert hex string to 256 bytes, left padding with zeros.

    Parameters
    ----------
    hex_string :
        The hexadecimal string to be converted to 256 bytes.

    Returns
    -------
    256_byte_stream : `Bytes256`
        256-byte stream corresponding to the given hexadecimal string.
    """
    return Bytes256(
        bytes.fromhex(remove_hex_prefix(hex_string).rjust(512, "0"))
    )


def hex_to_u256(hex_string: str) -> U256:
    """
    Convert hex string to U256.
    """
    return U256(int(remove_hex_prefix(hex_string), 16))
