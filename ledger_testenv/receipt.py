"""
ledger_testenv.receipt
~~~~~~~~~~~~~~~~~~~~~~

Harness-level receipts and label-based output resolution.

A :class:`Receipt` pairs the ledger's :class:`TransactionReceipt` with the
label map of the sequence that produced it, so outputs are read by label::

    receipt = env.execute_expect_success(builder)
    (pool, price) = receipt.outputs("instantiate")
    assert receipt.output_buckets("swap") == [Amount(y, 1), Amount(x, 0)]
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Iterable, List, Mapping, Optional

from ledger_testenv.errors import (
    PositionOutOfRange,
    ReceiptAssertionError,
    ReceiptNotCommitted,
    UnknownLabel,
)
from ledger_testenv.ids import IdentifierSet
from ledger_testenv.ledger import OutcomeReason, Status, TransactionReceipt
from ledger_testenv.manifest import InstructionSequence
from ledger_testenv.resources import Ids, ResourceSpecifier


class BucketView(list):
    """Buckets one instruction put on the worktop, in the order they were put.

    Compares equal to a plain list of specifiers.
    """

    def __init__(self, specifiers: Iterable[ResourceSpecifier] = ()) -> None:
        super().__init__(specifiers)

    def amount(self, address: str) -> Decimal:
        """Total amount of *address* across all buckets."""
        return sum((s.amount for s in self if s.address == address), Decimal(0))

    def ids(self, address: str) -> IdentifierSet:
        """All non-fungible ids of *address* across all buckets."""
        collected = []
        for specifier in self:
            if isinstance(specifier, Ids) and specifier.address == address:
                collected.extend(specifier.ids)
        return IdentifierSet(collected)

    def addresses(self) -> List[str]:
        return [specifier.address for specifier in self]


@dataclass
class Receipt:
    """Outcome of one dispatched sequence.

    ``transaction`` is the committed execution; ``preview`` the dry run made
    against the same ledger state just before it.
    """

    transaction: TransactionReceipt
    sequence: InstructionSequence
    preview: Optional[TransactionReceipt] = None

    @property
    def status(self) -> Status:
        return self.transaction.status

    @property
    def reason(self) -> Optional[OutcomeReason]:
        return self.transaction.reason

    @property
    def succeeded(self) -> bool:
        return self.transaction.succeeded

    @property
    def labels(self) -> Mapping[str, int]:
        return self.sequence.labels

    @property
    def logs(self) -> List[str]:
        return self.transaction.logs

    @property
    def new_resource_addresses(self) -> List[str]:
        return self.transaction.new_resource_addresses

    @property
    def new_component_addresses(self) -> List[str]:
        return self.transaction.new_component_addresses

    def position(self, label: str) -> int:
        """Position of the instruction tagged *label*."""
        try:
            return self.sequence.labels[label]
        except KeyError:
            raise UnknownLabel(label, self.sequence.labels) from None

    def outputs(self, label: str) -> Any:
        """Return value of the instruction tagged *label*.

        Buckets inside the return value appear as their resource specifiers.
        """
        position = self._committed_position(label)
        slots = self.transaction.outputs
        if position >= len(slots):
            raise PositionOutOfRange(label, position, len(slots))
        return slots[position]

    def output_buckets(self, label: str) -> BucketView:
        """Buckets the instruction tagged *label* put on the worktop."""
        position = self._committed_position(label)
        changes = self.transaction.worktop_changes
        if position not in changes:
            raise PositionOutOfRange(label, position, len(changes))
        return BucketView(self.transaction.output_buckets(position))

    def describe(self) -> str:
        """Multi-line summary used in logs and assertion messages."""
        lines = [f"Transaction {self.status.value}"]
        if self.reason is not None:
            lines.append(f"Reason: {self.reason}")
        for item in self.sequence:
            lines.append(f"  {item}")
            if self.succeeded and item.position < len(self.transaction.outputs):
                output = self.transaction.outputs[item.position]
                if output is not None:
                    lines.append(f"      -> {output!r}")
                for bucket in self.transaction.output_buckets(item.position):
                    lines.append(f"      put {bucket!r}")
        if self.logs:
            lines.append("Logs:")
            lines.extend(f"  {line}" for line in self.logs)
        return "\n".join(lines)

    def _committed_position(self, label: str) -> int:
        position = self.position(label)
        if not self.succeeded:
            raise ReceiptNotCommitted(
                f"Cannot read outputs of {label!r}: transaction ended with "
                f"{self.status.value} ({self.reason})"
            )
        return position


# ---------------------------------------------------------------------------
# Module-level accessors
# ---------------------------------------------------------------------------

def outputs(receipt: Receipt, label: str) -> Any:
    """Return value of the instruction tagged *label* in *receipt*."""
    return receipt.outputs(label)


def output_buckets(receipt: Receipt, label: str) -> BucketView:
    """Buckets the instruction tagged *label* put on the worktop."""
    return receipt.output_buckets(label)


def assert_log_contains(receipt: Receipt, substring: str) -> str:
    """Assert that at least one log line contains the given substring.

    Returns the first matching log line.
    """
    for line in receipt.logs:
        if substring in line:
            return line
    raise ReceiptAssertionError(
        f"No log line contains {substring!r}.\n"
        f"Logs: {receipt.logs}"
    )
