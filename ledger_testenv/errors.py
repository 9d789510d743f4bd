"""
ledger_testenv.errors
~~~~~~~~~~~~~~~~~~~~~

Exception hierarchy for the harness. Simulator failures and rejections are not
errors here: they are outcomes recorded on the receipt.
"""

from typing import Any, List


class TestEnvError(Exception):
    """Base exception for ledger-testenv errors."""

    __test__ = False


class ConfigError(TestEnvError):
    """Raised when an environment configuration is invalid."""


class BootstrapError(TestEnvError):
    """Raised when the simulator cannot be initialised."""


# ---------------------------------------------------------------------------
# Build-time errors
# ---------------------------------------------------------------------------

class ManifestError(TestEnvError):
    """Raised when an instruction sequence is built incorrectly."""


class DuplicateLabel(ManifestError):
    """Raised when a label is attached to a second instruction of one sequence."""

    def __init__(self, label: str, first_position: int, position: int) -> None:
        self.label = label
        self.first_position = first_position
        self.position = position
        super().__init__(
            f"Label {label!r} is already used by instruction {first_position}; "
            f"cannot reuse it for instruction {position}"
        )


class DuplicateBucket(ManifestError):
    """Raised when a bucket name is declared twice in one sequence."""


class UnknownBucket(ManifestError):
    """Raised when a bucket reference is unknown or was already consumed."""


# ---------------------------------------------------------------------------
# Lookup / resolution errors
# ---------------------------------------------------------------------------

class NameLookupError(TestEnvError, LookupError):
    """Base class for failed lookups of a symbolic name."""

    kind = "name"

    def __init__(self, name: str, known: Any = ()) -> None:
        self.name = name
        self.known = sorted(known)
        super().__init__(
            f"Unknown {self.kind} {name!r}; known: {', '.join(self.known) or '(none)'}"
        )


class UnknownLabel(NameLookupError):
    """Raised when a label was never registered for the receipt's sequence."""

    kind = "instruction label"


class UnknownResource(NameLookupError):
    """Raised when a standard resource name was not bootstrapped."""

    kind = "resource"


class UnknownPackage(NameLookupError):
    """Raised when a package name was not published in the environment."""

    kind = "package"


class ResolutionError(TestEnvError):
    """Raised when a receipt cannot provide the requested output."""


class PositionOutOfRange(ResolutionError, IndexError):
    """Raised when a label points past the slots recorded in a receipt."""

    def __init__(self, label: str, position: int, available: int) -> None:
        self.label = label
        self.position = position
        self.available = available
        super().__init__(
            f"Instruction {label!r} maps to position {position}, "
            f"but the receipt only records {available} slot(s)"
        )


class ReceiptNotCommitted(ResolutionError):
    """Raised when outputs are requested from a failed or rejected transaction."""


# ---------------------------------------------------------------------------
# Assertion errors
# ---------------------------------------------------------------------------

class ExpectationMismatch(TestEnvError, AssertionError):
    """Raised when a transaction outcome differs from the expected one.

    Keeps the expected outcome and the whole receipt, so a caller can inspect
    ``status``, the structured ``reason`` and ``logs`` instead of parsing the
    message.
    """

    def __init__(self, expected: Any, receipt: Any) -> None:
        self.expected = expected
        self.receipt = receipt
        super().__init__(
            f"Expected {expected}, but transaction ended with {self.actual}\n"
            f"{receipt.describe()}"
        )

    @property
    def status(self) -> Any:
        return self.receipt.status

    @property
    def reason(self) -> Any:
        return self.receipt.reason

    @property
    def logs(self) -> List[str]:
        return self.receipt.logs

    @property
    def actual(self) -> str:
        """Actual status, with the reason when there is one."""
        actual = self.status.value
        if self.reason is not None:
            actual = f"{actual} ({self.reason})"
        return actual


class ReceiptAssertionError(TestEnvError, AssertionError):
    """Raised by the receipt assertion helpers."""
