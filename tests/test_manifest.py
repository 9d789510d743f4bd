"""Tests for the labeled instruction builder."""

from decimal import Decimal

import pytest

from ledger_testenv import (
    Amount,
    DuplicateBucket,
    DuplicateLabel,
    ManifestBuilder,
    ManifestError,
    STANDARD_TEST_FEE,
    UnknownBucket,
)
from ledger_testenv.instructions import (
    BucketRef,
    CallFunction,
    CallMethod,
    DepositBatch,
    LockFee,
    TakeFromWorktop,
    Withdraw,
)

ACCOUNT = "account_sim1test"
TOKEN = "resource_sim1token"
PACKAGE = "package_sim1pkg"
COMPONENT = "component_sim1pool"


def bound_builder():
    return ManifestBuilder(ACCOUNT, fee=STANDARD_TEST_FEE)


class TestLabels:

    def test_labels_map_to_instruction_positions(self):
        builder = bound_builder()
        builder.withdraw(Amount(TOKEN, 1), label="withdraw") \
            .take_from_worktop(Amount(TOKEN, 1), "bucket") \
            .call_method(COMPONENT, "swap", [builder.bucket("bucket")], label="swap")
        assert dict(builder.labels) == {"withdraw": 1, "swap": 3}

    def test_unlabeled_builder_has_empty_label_map(self):
        sequence = bound_builder().withdraw(Amount(TOKEN, 1)).build()
        assert dict(sequence.labels) == {}

    def test_duplicate_label_fails_at_append(self):
        builder = bound_builder().call_method(COMPONENT, "a", label="call")
        with pytest.raises(DuplicateLabel) as excinfo:
            builder.call_method(COMPONENT, "b", label="call")
        assert excinfo.value.label == "call"
        assert excinfo.value.first_position == 1
        assert excinfo.value.position == 2

    def test_duplicate_label_leaves_builder_unchanged(self):
        builder = bound_builder().call_method(COMPONENT, "a", label="call")
        with pytest.raises(DuplicateLabel):
            builder.take_from_worktop(Amount(TOKEN, 1), "bucket", label="call")
        assert builder.next_position == 2
        builder.take_from_worktop(Amount(TOKEN, 1), "bucket")

    def test_labels_of_returned_sequence_are_read_only(self):
        sequence = bound_builder().call_method(COMPONENT, "a", label="call").build()
        with pytest.raises(TypeError):
            sequence.labels["other"] = 5


class TestSequence:

    def test_bound_builder_locks_fee_and_closes_with_batch_deposit(self):
        sequence = bound_builder().withdraw(Amount(TOKEN, 2)).build()
        payloads = sequence.payloads()
        assert payloads[0] == LockFee(ACCOUNT, STANDARD_TEST_FEE)
        assert payloads[1] == Withdraw(ACCOUNT, Amount(TOKEN, 2))
        assert payloads[-1] == DepositBatch(ACCOUNT)
        assert len(sequence) == 3

    def test_existing_batch_deposit_is_not_duplicated(self):
        sequence = bound_builder().deposit_batch(label="deposit").build()
        assert [type(p) for p in sequence.payloads()] == [LockFee, DepositBatch]
        assert sequence.labels["deposit"] == 1

    def test_batch_deposit_can_be_skipped(self):
        sequence = bound_builder().withdraw(Amount(TOKEN, 2)).build(deposit_batch=False)
        assert not isinstance(sequence.payloads()[-1], DepositBatch)

    def test_unbound_builder_adds_nothing(self):
        sequence = ManifestBuilder().call_function(PACKAGE, "Hello", "instantiate_hello").build()
        assert sequence.payloads() == [CallFunction(PACKAGE, "Hello", "instantiate_hello", ())]

    def test_unbound_builder_needs_an_account_for_withdrawals(self):
        with pytest.raises(ManifestError):
            ManifestBuilder().withdraw(Amount(TOKEN, 1))

    def test_explicit_account_overrides_bound_account(self):
        sequence = bound_builder().deposit(Amount(TOKEN, 1), account="account_sim1other").build()
        assert sequence.payloads()[1].account == "account_sim1other"

    def test_builder_cannot_be_built_twice(self):
        builder = bound_builder()
        builder.build()
        with pytest.raises(ManifestError):
            builder.build()
        with pytest.raises(ManifestError):
            builder.withdraw(Amount(TOKEN, 1))

    def test_describe_lists_positions_and_labels(self):
        sequence = bound_builder().call_method(COMPONENT, "swap", label="swap").build()
        lines = sequence.describe().splitlines()
        assert lines[1] == f"1: call_method({COMPONENT}, swap, []) [swap]"

    def test_call_arguments_are_stored_as_tuple(self):
        builder = bound_builder().take_from_worktop(Amount(TOKEN, 1), "bucket")
        builder.call_method(COMPONENT, "swap", [builder.bucket("bucket"), Decimal(2)])
        instruction = builder.build().payloads()[2]
        assert instruction == CallMethod(COMPONENT, "swap", (BucketRef("bucket"), Decimal(2)))


class TestBuckets:

    def test_name_is_unique_per_position(self):
        builder = bound_builder()
        first = builder.name("x_bucket")
        builder.withdraw(Amount(TOKEN, 1))
        assert builder.name("x_bucket") != first

    def test_take_declares_bucket(self):
        builder = bound_builder().take_from_worktop(Amount(TOKEN, 1), "bucket")
        assert builder.bucket("bucket") == BucketRef("bucket")
        assert isinstance(builder.build().payloads()[1], TakeFromWorktop)

    def test_unknown_bucket(self):
        with pytest.raises(UnknownBucket):
            bound_builder().bucket("missing")

    def test_duplicate_bucket(self):
        builder = bound_builder().take_from_worktop(Amount(TOKEN, 1), "bucket")
        with pytest.raises(DuplicateBucket):
            builder.take_all_from_worktop(TOKEN, "bucket")

    def test_bucket_can_only_be_passed_once(self):
        builder = bound_builder().take_from_worktop(Amount(TOKEN, 1), "bucket")
        ref = builder.bucket("bucket")
        builder.call_method(COMPONENT, "swap", [ref])
        with pytest.raises(UnknownBucket):
            builder.call_method(COMPONENT, "swap", [ref])

    def test_bucket_cannot_appear_twice_in_one_call(self):
        builder = bound_builder().take_from_worktop(Amount(TOKEN, 1), "bucket")
        ref = builder.bucket("bucket")
        with pytest.raises(UnknownBucket):
            builder.call_method(COMPONENT, "swap", [ref, {"again": ref}])
        builder.call_method(COMPONENT, "swap", [ref])

    def test_undeclared_reference_in_arguments(self):
        with pytest.raises(UnknownBucket):
            bound_builder().call_function(PACKAGE, "Hello", "swallow", [BucketRef("ghost")])
