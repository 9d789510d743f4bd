"""
ledger_testenv.resources
~~~~~~~~~~~~~~~~~~~~~~~~

Resource specifiers and worktop change records.

A :class:`ResourceSpecifier` names a quantity of one resource: either a
fungible :class:`Amount` or a non-fungible :class:`Ids` set. The same types are
used to build deposit/withdraw instructions and to assert on returned buckets::

    assert receipt.output_buckets("swap") == [
        Amount(y_address, 1),
        Amount(x_address, 0),
    ]
"""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Iterable, Tuple, Union

from ledger_testenv.ids import IdentifierSet, IdLiteral, ids as _ids

AmountLike = Union[Decimal, int, str]


def to_decimal(value: AmountLike) -> Decimal:
    """Convert an amount literal to :class:`~decimal.Decimal`.

    Floats are refused: they cannot represent most ledger amounts exactly.
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool) or isinstance(value, float):
        raise TypeError(f"Amounts must be Decimal, int or str, got {value!r}")
    try:
        return Decimal(value)
    except (InvalidOperation, TypeError) as exc:
        raise ValueError(f"Invalid amount: {value!r}") from exc


class ResourceSpecifier:
    """Base class for :class:`Amount` and :class:`Ids`."""

    address: str

    @property
    def is_fungible(self) -> bool:
        return isinstance(self, Amount)


@dataclass(frozen=True)
class Amount(ResourceSpecifier):
    """A fungible quantity of one resource."""

    address: str
    amount: Decimal

    def __post_init__(self) -> None:
        object.__setattr__(self, "amount", to_decimal(self.amount))

    def __repr__(self) -> str:
        return f"Amount({self.address!r}, {self.amount})"


@dataclass(frozen=True)
class Ids(ResourceSpecifier):
    """A set of non-fungible ids of one resource."""

    address: str
    ids: IdentifierSet

    def __init__(self, address: str, ids: Iterable[IdLiteral]) -> None:
        object.__setattr__(self, "address", address)
        object.__setattr__(self, "ids", ids if isinstance(ids, IdentifierSet) else _ids(ids))

    @property
    def amount(self) -> Decimal:
        return Decimal(len(self.ids))

    def __repr__(self) -> str:
        return f"Ids({self.address!r}, {self.ids!r})"


# ---------------------------------------------------------------------------
# Worktop changes
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Put:
    """Resources an instruction placed on the worktop."""

    resource: ResourceSpecifier


@dataclass(frozen=True)
class Take:
    """Resources an instruction removed from the worktop."""

    resource: ResourceSpecifier


WorktopChange = Union[Put, Take]


def sort_addresses(a_address: str, b_address: str) -> Tuple[str, str]:
    """Return the two addresses in ascending order."""
    if a_address < b_address:
        return a_address, b_address
    return b_address, a_address
