"""
A `Receipt` records the result of executing a single transaction: how much gas
the block had consumed once the transaction finished, the logs the transaction
emitted, a bloom filter over those logs, and the transaction's outcome.

How the outcome is recorded changed twice over the life of the chain. Receipts
first carried the state root after the transaction, [EIP-98] proposed dropping
it altogether, and [EIP-658] replaced it with a status code. The outcome is
therefore one of [`Unknown`], [`StateRoot`] or [`StatusCode`], picked by
whoever executed the transaction according to the rules in force.

[EIP-98]: https://github.com/ethereum/EIPs/issues/98
[EIP-658]: https://eips.ethereum.org/EIPS/eip-658
[`Unknown`]: ref:ethereum_receipts.blocks.Unknown
[`StateRoot`]: ref:ethereum_receipts.blocks.StateRoot
[`StatusCode`]: ref:ethereum_receipts.blocks.StatusCode
"""
from dataclasses import dataclass
from typing import Optional, Tuple, Union

from ethereum_types.bytes import Bytes
from ethereum_types.frozen import slotted_freezable
from ethereum_types.numeric import U8, U256, Uint
from typing_extensions import TypeAlias

from .crypto.hash import Hash32
from .fork_types import Address, Bloom, Root


@slotted_freezable
@dataclass
class Log:
    """
    Data record produced during the execution of a transaction.
    """

    address: Address
    topics: Tuple[Hash32, ...]
    data: Bytes


@slotted_freezable
@dataclass
class Unknown:
    """
    Outcome of a transaction executed under [EIP-98] rules, where neither the
    state root nor a status code is recorded.

    [EIP-98]: https://github.com/ethereum/EIPs/issues/98
    """


@slotted_freezable
@dataclass
class StateRoot:
    """
    Outcome of a transaction executed before [EIP-658]: the root of the state
    trie once the transaction had been applied.

    [EIP-658]: https://eips.ethereum.org/EIPS/eip-658
    """

    root: Root


@slotted_freezable
@dataclass
class StatusCode:
    """
    Outcome of a transaction executed under [EIP-658]: `1` if the transaction
    succeeded and `0` if it failed.

    [EIP-658]: https://eips.ethereum.org/EIPS/eip-658
    """

    code: U8


TransactionOutcome: TypeAlias = Union[Unknown, StateRoot, StatusCode]
"""
Exactly one of the ways a transaction's result has been recorded.
"""


@slotted_freezable
@dataclass
class Receipt:
    """
    Result of a transaction.
    """

    gas_used: U256
    """
    Total gas used in the block once this transaction had been executed.
    """

    log_bloom: Bloom
    """
    Union of the blooms of every entry in `logs`.
    """

    logs: Tuple[Log, ...]
    """
    Logs emitted by the transaction, in emission order.
    """

    outcome: TransactionOutcome


@slotted_freezable
@dataclass
class RichReceipt:
    """
    Receipt of a pending transaction, along with the transaction it belongs
    to.
    """

    transaction_hash: Hash32
    transaction_index: Uint
    cumulative_gas_used: U256
    gas_used: U256
    """
    Gas used by this transaction alone. Note the difference of meaning to
    `Receipt.gas_used`.
    """
    contract_address: Optional[Address]
    logs: Tuple[Log, ...]
    log_bloom: Bloom
    outcome: TransactionOutcome


@slotted_freezable
@dataclass
class LocalizedReceipt:
    """
    Receipt of a transaction included in a block, along with its position in
    the chain.
    """

    transaction_hash: Hash32
    transaction_index: Uint
    block_hash: Hash32
    block_number: Uint
    cumulative_gas_used: U256
    gas_used: U256
    """
    Gas used by this transaction alone. Note the difference of meaning to
    `Receipt.gas_used`.
    """
    contract_address: Optional[Address]
    logs: Tuple[Log, ...]
    log_bloom: Bloom
    outcome: TransactionOutcome
