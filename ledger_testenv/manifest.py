"""
ledger_testenv.manifest
~~~~~~~~~~~~~~~~~~~~~~~

Fluent builder for labeled instruction sequences.

Usage::

    builder = env.manifest()
    builder.withdraw(Amount(x_address, 2)) \\
        .take_from_worktop(Amount(x_address, 2), "x_bucket") \\
        .call_method(pool, "swap", [builder.bucket("x_bucket")], label="swap")
    sequence = builder.build()

A label names one instruction so its outputs can be read back from the
receipt without counting positions. Nothing is sent to the ledger here.
"""

from dataclasses import dataclass
from decimal import Decimal
from types import MappingProxyType
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence, Tuple

from ledger_testenv.errors import DuplicateBucket, DuplicateLabel, ManifestError, UnknownBucket
from ledger_testenv.instructions import (
    AssertWorktopContains,
    BucketRef,
    CallFunction,
    CallMethod,
    Deposit,
    DepositBatch,
    Instruction,
    LockFee,
    TakeAllFromWorktop,
    TakeFromWorktop,
    Withdraw,
)
from ledger_testenv.resources import ResourceSpecifier


@dataclass(frozen=True)
class LabeledInstruction:
    """One instruction of a sequence, with its position and optional label."""

    position: int
    instruction: Instruction
    label: Optional[str] = None

    def __str__(self) -> str:
        tag = f" [{self.label}]" if self.label else ""
        return f"{self.position}: {self.instruction.describe()}{tag}"


@dataclass(frozen=True)
class InstructionSequence:
    """A finalised, immutable instruction sequence and its label map."""

    instructions: Tuple[LabeledInstruction, ...]
    labels: Mapping[str, int]

    def __len__(self) -> int:
        return len(self.instructions)

    def __iter__(self) -> Iterator[LabeledInstruction]:
        return iter(self.instructions)

    def payloads(self) -> List[Instruction]:
        return [item.instruction for item in self.instructions]

    def describe(self) -> str:
        return "\n".join(str(item) for item in self.instructions)


class ManifestBuilder:
    """Collect instructions for one transaction.

    When *account* is given, the sequence starts with a fee lock paid by that
    account (so user instructions start at position 1) and withdrawals,
    deposits and the closing batch deposit default to it.
    """

    def __init__(
        self,
        account: Optional[str] = None,
        *,
        fee: Optional[Decimal] = None,
    ) -> None:
        self.account = account
        self._instructions: List[LabeledInstruction] = []
        self._labels: Dict[str, int] = {}
        self._buckets: Dict[str, bool] = {}
        self._built = False
        if account is not None and fee is not None:
            self.lock_fee(account, fee)

    # -- labels and buckets --------------------------------------------------

    @property
    def next_position(self) -> int:
        return len(self._instructions)

    @property
    def labels(self) -> Mapping[str, int]:
        return MappingProxyType(self._labels)

    def name(self, base: str) -> str:
        """Return a bucket name unique within this sequence."""
        return f"{base}_{self.next_position}"

    def bucket(self, name: str) -> BucketRef:
        """Reference a named bucket inside call arguments."""
        if name not in self._buckets:
            raise UnknownBucket(f"Bucket {name!r} has not been taken from the worktop")
        return BucketRef(name)

    # -- instructions --------------------------------------------------------

    def lock_fee(self, account: str, amount: Decimal, label: Optional[str] = None) -> "ManifestBuilder":
        return self._append(LockFee(account, amount), label)

    def call_function(
        self,
        package: str,
        blueprint: str,
        function: str,
        args: Sequence[Any] = (),
        label: Optional[str] = None,
    ) -> "ManifestBuilder":
        self._check_label(label)
        return self._append(CallFunction(package, blueprint, function, self._consume(args)), label)

    def call_method(
        self,
        component: str,
        method: str,
        args: Sequence[Any] = (),
        label: Optional[str] = None,
    ) -> "ManifestBuilder":
        self._check_label(label)
        return self._append(CallMethod(component, method, self._consume(args)), label)

    def withdraw(
        self,
        resource: ResourceSpecifier,
        label: Optional[str] = None,
        account: Optional[str] = None,
    ) -> "ManifestBuilder":
        """Move *resource* from the account onto the worktop."""
        return self._append(Withdraw(self._account(account), resource), label)

    def deposit(
        self,
        resource: ResourceSpecifier,
        label: Optional[str] = None,
        account: Optional[str] = None,
    ) -> "ManifestBuilder":
        """Move *resource* from the worktop into the account."""
        return self._append(Deposit(self._account(account), resource), label)

    def deposit_batch(self, account: Optional[str] = None, label: Optional[str] = None) -> "ManifestBuilder":
        """Move everything left on the worktop into the account."""
        return self._append(DepositBatch(self._account(account)), label)

    def take_from_worktop(
        self,
        resource: ResourceSpecifier,
        bucket: str,
        label: Optional[str] = None,
    ) -> "ManifestBuilder":
        self._declare_bucket(bucket, label)
        return self._append(TakeFromWorktop(resource, bucket), label)

    def take_all_from_worktop(
        self,
        resource: str,
        bucket: str,
        label: Optional[str] = None,
    ) -> "ManifestBuilder":
        self._declare_bucket(bucket, label)
        return self._append(TakeAllFromWorktop(resource, bucket), label)

    def assert_worktop_contains(
        self,
        resource: ResourceSpecifier,
        label: Optional[str] = None,
    ) -> "ManifestBuilder":
        return self._append(AssertWorktopContains(resource), label)

    # -- finalisation --------------------------------------------------------

    def build(self, *, deposit_batch: bool = True) -> InstructionSequence:
        """Finalise the sequence.

        Appends a batch deposit into the bound account unless the last
        instruction already is one, *deposit_batch* is false, or the builder
        has no account.
        """
        if self._built:
            raise ManifestError("This builder has already been built")
        last = self._instructions[-1].instruction if self._instructions else None
        if deposit_batch and self.account is not None and not isinstance(last, DepositBatch):
            self.deposit_batch()
        self._built = True
        return InstructionSequence(
            instructions=tuple(self._instructions),
            labels=MappingProxyType(dict(self._labels)),
        )

    # -- internal ------------------------------------------------------------

    def _append(self, instruction: Instruction, label: Optional[str]) -> "ManifestBuilder":
        if self._built:
            raise ManifestError("Cannot add instructions to a builder that has been built")
        position = self.next_position
        if label is not None:
            self._check_label(label)
            self._labels[label] = position
        self._instructions.append(LabeledInstruction(position, instruction, label))
        return self

    def _check_label(self, label: Optional[str]) -> None:
        if label is not None and label in self._labels:
            raise DuplicateLabel(label, self._labels[label], self.next_position)

    def _account(self, account: Optional[str]) -> str:
        account = account or self.account
        if account is None:
            raise ManifestError("No account given and the builder is not bound to one")
        return account

    def _declare_bucket(self, name: str, label: Optional[str]) -> None:
        self._check_label(label)
        if name in self._buckets:
            raise DuplicateBucket(f"Bucket {name!r} is already declared in this sequence")
        self._buckets[name] = False

    def _consume(self, args: Sequence[Any]) -> Tuple[Any, ...]:
        refs = list(_bucket_refs(args))
        seen = set()
        for ref in refs:
            if ref.name not in self._buckets:
                raise UnknownBucket(f"Bucket {ref.name!r} has not been taken from the worktop")
            if self._buckets[ref.name] or ref.name in seen:
                raise UnknownBucket(f"Bucket {ref.name!r} was already passed to an earlier call")
            seen.add(ref.name)
        for ref in refs:
            self._buckets[ref.name] = True
        return tuple(args)


def _bucket_refs(value: Any) -> Iterator[BucketRef]:
    if isinstance(value, BucketRef):
        yield value
    elif isinstance(value, (list, tuple)):
        for item in value:
            yield from _bucket_refs(item)
    elif isinstance(value, dict):
        for item in value.values():
            yield from _bucket_refs(item)
