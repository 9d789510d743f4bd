"""
ledger_testenv.execution
~~~~~~~~~~~~~~~~~~~~~~~~

Dispatch an instruction sequence and check its outcome.

Usage::

    receipt = run(env, sequence)                                   # expects success
    run(env, sequence, FailureMatching(reason_contains("Price needs to be positive")))
    run(env, sequence, RejectionMatching(reason_kind(ReasonKind.NO_FEE_LOCKED)))

A mismatch between expected and actual outcome raises
:class:`~ledger_testenv.errors.ExpectationMismatch`, which is an
``AssertionError`` and fails the test with both sides in the message.
"""

import logging
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Optional, Union

from ledger_testenv.errors import ExpectationMismatch
from ledger_testenv.ledger import OutcomeReason, ReasonKind, Status
from ledger_testenv.manifest import InstructionSequence, ManifestBuilder
from ledger_testenv.receipt import Receipt

if TYPE_CHECKING:
    from ledger_testenv.environment import TestEnvironment

log = logging.getLogger(__name__)

ReasonPredicate = Callable[[OutcomeReason], bool]


# ---------------------------------------------------------------------------
# Expected outcomes
# ---------------------------------------------------------------------------

class ExpectedOutcome:
    """Base class of the three expectation variants."""

    status: Status

    def matches(self, status: Status, reason: Optional[OutcomeReason]) -> bool:
        raise NotImplementedError


@dataclass(frozen=True)
class Success(ExpectedOutcome):
    """The transaction must commit successfully."""

    status = Status.SUCCESS

    def matches(self, status: Status, reason: Optional[OutcomeReason]) -> bool:
        return status is Status.SUCCESS

    def __str__(self) -> str:
        return "success"


@dataclass(frozen=True)
class FailureMatching(ExpectedOutcome):
    """The transaction must fail, with a reason accepted by *predicate*."""

    predicate: Optional[ReasonPredicate] = None

    status = Status.FAILURE

    def matches(self, status: Status, reason: Optional[OutcomeReason]) -> bool:
        if status is not self.status:
            return False
        return self.predicate is None or bool(self.predicate(reason))

    def __str__(self) -> str:
        return f"{self.status.value}{_describe_predicate(self.predicate)}"


@dataclass(frozen=True)
class RejectionMatching(FailureMatching):
    """The transaction must be rejected, with a reason accepted by *predicate*."""

    status = Status.REJECTION


def _describe_predicate(predicate: Optional[ReasonPredicate]) -> str:
    if predicate is None:
        return ""
    description = getattr(predicate, "description", None) or getattr(predicate, "__name__", "predicate")
    return f" matching {description}"


# ---------------------------------------------------------------------------
# Ready-made reason predicates
# ---------------------------------------------------------------------------

def reason_contains(text: str) -> ReasonPredicate:
    """Accept reasons whose message contains *text*."""

    def predicate(reason: OutcomeReason) -> bool:
        return reason is not None and text in reason.message

    predicate.description = f"message containing {text!r}"
    return predicate


def reason_matches(pattern: Union[str, "re.Pattern"]) -> ReasonPredicate:
    """Accept reasons whose message matches the regular expression *pattern*."""
    compiled = re.compile(pattern) if isinstance(pattern, str) else pattern

    def predicate(reason: OutcomeReason) -> bool:
        return reason is not None and compiled.search(reason.message) is not None

    predicate.description = f"message matching /{compiled.pattern}/"
    return predicate


def reason_kind(kind: Union[ReasonKind, str], instruction: Optional[int] = None) -> ReasonPredicate:
    """Accept reasons of the given kind, optionally raised by one instruction."""
    expected = ReasonKind(kind)

    def predicate(reason: OutcomeReason) -> bool:
        if reason is None or reason.kind is not expected:
            return False
        return instruction is None or reason.instruction == instruction

    where = f" at instruction {instruction}" if instruction is not None else ""
    predicate.description = f"kind {expected.value}{where}"
    return predicate


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------

def run(
    environment: "TestEnvironment",
    sequence: Union[InstructionSequence, ManifestBuilder],
    expect: Optional[ExpectedOutcome] = None,
    *,
    verbose: bool = False,
) -> Receipt:
    """Execute *sequence* as one transaction and check it against *expect*.

    *expect* defaults to :class:`Success`. A builder is finalised first. The
    sequence is previewed before it is executed; the preview is kept on
    ``receipt.preview``.
    """
    expect = expect if expect is not None else Success()
    if isinstance(sequence, ManifestBuilder):
        sequence = sequence.build()

    log.debug("Dispatching %d instruction(s), expecting %s", len(sequence), expect)
    payloads = sequence.payloads()
    signers = [environment.keys.public_key]
    preview = environment.ledger.preview(payloads, signers)
    transaction = environment.ledger.execute(payloads, signers)
    receipt = Receipt(transaction=transaction, sequence=sequence, preview=preview)

    if verbose or environment.config.trace:
        log.info("%s", receipt.describe())

    if not expect.matches(receipt.status, receipt.reason):
        raise ExpectationMismatch(expect, receipt)
    return receipt
