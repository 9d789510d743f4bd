"""
ledger_testenv.instructions
~~~~~~~~~~~~~~~~~~~~~~~~~~~

Instruction payloads understood by the simulator. Test code normally creates
them through :class:`~ledger_testenv.manifest.ManifestBuilder`.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Tuple

from ledger_testenv.resources import ResourceSpecifier


@dataclass(frozen=True)
class BucketRef:
    """Reference to a named bucket, usable inside call arguments."""

    name: str


class Instruction:
    """Base class for instruction payloads."""

    def describe(self) -> str:
        return repr(self)


@dataclass(frozen=True)
class LockFee(Instruction):
    account: str
    amount: Decimal

    def describe(self) -> str:
        return f"lock_fee({self.account}, {self.amount})"


@dataclass(frozen=True)
class CallFunction(Instruction):
    package: str
    blueprint: str
    function: str
    args: Tuple[Any, ...] = field(default_factory=tuple)

    def describe(self) -> str:
        return f"call_function({self.package}, {self.blueprint}::{self.function}, {list(self.args)!r})"


@dataclass(frozen=True)
class CallMethod(Instruction):
    component: str
    method: str
    args: Tuple[Any, ...] = field(default_factory=tuple)

    def describe(self) -> str:
        return f"call_method({self.component}, {self.method}, {list(self.args)!r})"


@dataclass(frozen=True)
class Withdraw(Instruction):
    account: str
    resource: ResourceSpecifier

    def describe(self) -> str:
        return f"withdraw({self.account}, {self.resource!r})"


@dataclass(frozen=True)
class Deposit(Instruction):
    account: str
    resource: ResourceSpecifier

    def describe(self) -> str:
        return f"deposit({self.account}, {self.resource!r})"


@dataclass(frozen=True)
class DepositBatch(Instruction):
    account: str

    def describe(self) -> str:
        return f"deposit_batch({self.account})"


@dataclass(frozen=True)
class TakeFromWorktop(Instruction):
    resource: ResourceSpecifier
    bucket: str

    def describe(self) -> str:
        return f"take_from_worktop({self.resource!r}) -> {self.bucket}"


@dataclass(frozen=True)
class TakeAllFromWorktop(Instruction):
    resource: str
    bucket: str

    def describe(self) -> str:
        return f"take_all_from_worktop({self.resource}) -> {self.bucket}"


@dataclass(frozen=True)
class AssertWorktopContains(Instruction):
    resource: ResourceSpecifier

    def describe(self) -> str:
        return f"assert_worktop_contains({self.resource!r})"
