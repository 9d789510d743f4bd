"""
ledger-testenv
~~~~~~~~~~~~~~

A test harness for blueprint (smart contract) code running on a simulated
ledger. Provides per-test environments with pre-minted resources, a labeled
instruction builder, outcome-checked execution, label-based output resolution
and order-independent non-fungible id matching.

Usage::

    from ledger_testenv import Amount, new_environment, reason_contains

    env = new_environment(packages={"hello_swap": {"HelloSwap": HelloSwap}})
    x, y = env.resource("X"), env.resource("Y")

    builder = env.manifest()
    builder.withdraw(Amount(y, 10)) \\
        .take_from_worktop(Amount(y, 10), "y_bucket") \\
        .call_function(
            env.package_address("hello_swap"), "HelloSwap", "instantiate",
            [x, builder.bucket("y_bucket"), 1], label="instantiate",
        )
    pool, price = env.execute_expect_success(builder).outputs("instantiate")
"""

from ledger_testenv.config import EnvironmentConfig
from ledger_testenv.constants import (
    # Constants
    ADMIN_BADGE,
    DIVISIBILITY_MAXIMUM,
    DIVISIBILITY_NONE,
    MAX_SUPPLY,
    STANDARD_TEST_FEE,
)
from ledger_testenv.environment import (
    # Environment
    TestEnvironment,
    TestHelper,
    new_environment,
)
from ledger_testenv.errors import (
    # Exceptions
    TestEnvError,
    ConfigError,
    BootstrapError,
    ManifestError,
    DuplicateLabel,
    DuplicateBucket,
    UnknownBucket,
    NameLookupError,
    UnknownLabel,
    UnknownResource,
    UnknownPackage,
    ResolutionError,
    PositionOutOfRange,
    ReceiptNotCommitted,
    ExpectationMismatch,
    ReceiptAssertionError,
)
from ledger_testenv.execution import (
    # Dispatch
    ExpectedOutcome,
    Success,
    FailureMatching,
    RejectionMatching,
    reason_contains,
    reason_kind,
    reason_matches,
    run,
)
from ledger_testenv.ids import IdentifierSet, InvalidIdentifier, NonFungibleLocalId, ids, nft_id
from ledger_testenv.ledger import (
    # Simulator
    CallContext,
    InMemoryLedger,
    OutcomeReason,
    ReasonKind,
    Simulator,
    Status,
    create_ledger,
)
from ledger_testenv.manifest import InstructionSequence, ManifestBuilder
from ledger_testenv.receipt import (
    # Output resolution and assertion helpers
    BucketView,
    Receipt,
    assert_log_contains,
    output_buckets,
    outputs,
)
from ledger_testenv.resources import Amount, Ids, ResourceSpecifier, sort_addresses

__version__ = "0.1.0"

__all__ = [
    # Environment
    "EnvironmentConfig",
    "TestEnvironment",
    "TestHelper",
    "new_environment",
    # Builder
    "ManifestBuilder",
    "InstructionSequence",
    # Resources and ids
    "Amount",
    "Ids",
    "ResourceSpecifier",
    "sort_addresses",
    "ids",
    "nft_id",
    "IdentifierSet",
    "NonFungibleLocalId",
    "InvalidIdentifier",
    # Dispatch
    "run",
    "ExpectedOutcome",
    "Success",
    "FailureMatching",
    "RejectionMatching",
    "reason_contains",
    "reason_kind",
    "reason_matches",
    # Output resolution and assertion helpers
    "Receipt",
    "BucketView",
    "outputs",
    "output_buckets",
    "assert_log_contains",
    # Simulator
    "Simulator",
    "InMemoryLedger",
    "create_ledger",
    "CallContext",
    "Status",
    "ReasonKind",
    "OutcomeReason",
    # Constants
    "ADMIN_BADGE",
    "DIVISIBILITY_MAXIMUM",
    "DIVISIBILITY_NONE",
    "MAX_SUPPLY",
    "STANDARD_TEST_FEE",
    # Exceptions
    "TestEnvError",
    "ConfigError",
    "BootstrapError",
    "ManifestError",
    "DuplicateLabel",
    "DuplicateBucket",
    "UnknownBucket",
    "NameLookupError",
    "UnknownLabel",
    "UnknownResource",
    "UnknownPackage",
    "ResolutionError",
    "PositionOutOfRange",
    "ReceiptNotCommitted",
    "ExpectationMismatch",
    "ReceiptAssertionError",
    # Metadata
    "__version__",
]
