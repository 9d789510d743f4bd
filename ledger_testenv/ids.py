"""
ledger_testenv.ids
~~~~~~~~~~~~~~~~~~

Non-fungible local ids and the ``ids(...)`` set constructor.

Ids are written the way the ledger displays them: ``#7#`` for integers,
``<alpha>`` for strings and ``[c0ffee]`` for bytes. Test code can use any of
the literal forms below and compare the results as sets::

    assert ids([7, 7, 3]) == ids(["#3#", "7"])
    assert ids([3, 7]) != ids([3, 7, 9])
"""

import re
from collections.abc import Set
from dataclasses import dataclass
from typing import Iterable, Iterator, Tuple, Union

IdLiteral = Union[int, str, bytes, "NonFungibleLocalId"]

_INTEGER = "integer"
_STRING = "string"
_BYTES = "bytes"

_KIND_ORDER = {_INTEGER: 0, _STRING: 1, _BYTES: 2}
_INTEGER_RE = re.compile(r"^#(\d+)#$", re.ASCII)
_STRING_RE = re.compile(r"^<(.+)>$")
_BYTES_RE = re.compile(r"^\[([0-9a-fA-F]+)\]$")


class InvalidIdentifier(ValueError):
    """Raised when a literal cannot be turned into a non-fungible local id."""


@dataclass(frozen=True, order=False)
class NonFungibleLocalId:
    """One canonical non-fungible local id."""

    kind: str
    value: Union[int, str, bytes]

    def __str__(self) -> str:
        if self.kind == _INTEGER:
            return f"#{self.value}#"
        if self.kind == _BYTES:
            return f"[{self.value.hex()}]"
        return f"<{self.value}>"

    def __repr__(self) -> str:
        return f"nft_id({str(self)!r})"

    def __lt__(self, other: "NonFungibleLocalId") -> bool:
        if not isinstance(other, NonFungibleLocalId):
            return NotImplemented
        return self._sort_key() < other._sort_key()

    def _sort_key(self) -> Tuple[int, Union[int, str, bytes]]:
        return (_KIND_ORDER[self.kind], self.value)


def nft_id(value: IdLiteral) -> NonFungibleLocalId:
    """Normalise a single literal into a :class:`NonFungibleLocalId`.

    Accepted forms: non-negative ``int``, digit strings (``"7"``), ``"#7#"``,
    ``"<text>"``, bare text, ``"[hex]"`` and ``bytes``.
    """
    if isinstance(value, NonFungibleLocalId):
        return value
    if isinstance(value, bool):
        raise InvalidIdentifier(f"Booleans are not valid non-fungible ids: {value!r}")
    if isinstance(value, int):
        if value < 0:
            raise InvalidIdentifier(f"Integer ids must be non-negative, got {value}")
        return NonFungibleLocalId(_INTEGER, value)
    if isinstance(value, (bytes, bytearray)):
        if not value:
            raise InvalidIdentifier("Bytes ids must not be empty")
        return NonFungibleLocalId(_BYTES, bytes(value))
    if isinstance(value, str):
        text = value.strip()
        if not text:
            raise InvalidIdentifier("String ids must not be empty")
        if text.isascii() and text.isdigit():
            return NonFungibleLocalId(_INTEGER, int(text))
        match = _INTEGER_RE.match(text)
        if match:
            return NonFungibleLocalId(_INTEGER, int(match.group(1)))
        match = _BYTES_RE.match(text)
        if match:
            return NonFungibleLocalId(_BYTES, bytes.fromhex(match.group(1)))
        match = _STRING_RE.match(text)
        if match:
            return NonFungibleLocalId(_STRING, match.group(1))
        return NonFungibleLocalId(_STRING, text)
    raise InvalidIdentifier(f"Unsupported id literal of type {type(value).__name__}: {value!r}")


class IdentifierSet(Set):
    """A set of non-fungible ids.

    Iteration follows first-seen order, which keeps failure messages readable,
    but equality is plain set equality: order is ignored and duplicates
    collapse. An ``IdentifierSet`` also compares equal to a ``set`` or
    ``frozenset`` holding the same :class:`NonFungibleLocalId` members.
    """

    __slots__ = ("_ordered", "_members")

    def __init__(self, values: Iterable[IdLiteral] = ()) -> None:
        ordered = []
        seen = set()
        for value in values:
            local_id = nft_id(value)
            if local_id not in seen:
                seen.add(local_id)
                ordered.append(local_id)
        self._ordered = tuple(ordered)
        self._members = frozenset(seen)

    @classmethod
    def _from_iterable(cls, it: Iterable[IdLiteral]) -> "IdentifierSet":
        return cls(it)

    def __contains__(self, value: object) -> bool:
        try:
            return nft_id(value) in self._members
        except InvalidIdentifier:
            return False

    def __iter__(self) -> Iterator[NonFungibleLocalId]:
        return iter(self._ordered)

    def __len__(self) -> int:
        return len(self._ordered)

    __hash__ = Set._hash

    def sorted(self) -> Tuple[NonFungibleLocalId, ...]:
        return tuple(sorted(self._ordered))

    def __repr__(self) -> str:
        return f"ids([{', '.join(str(i) for i in self._ordered)}])"


def ids(values: Iterable[IdLiteral] = ()) -> IdentifierSet:
    """Build an :class:`IdentifierSet` from heterogeneous id literals."""
    if isinstance(values, (str, bytes, int)):
        values = [values]
    return IdentifierSet(values)
