"""
ledger_testenv.ledger
~~~~~~~~~~~~~~~~~~~~~

The simulator interface consumed by the harness, and :class:`InMemoryLedger`,
an in-process implementation of it for running Python blueprints without a
node.

Blueprints are plain classes published in a package. Functions are
classmethods and methods are instance methods; both receive a
:class:`CallContext` as first argument::

    class HelloSwap:
        def __init__(self, x_vault, y_vault, price):
            ...

        @classmethod
        def instantiate(cls, ctx, x_address, y_bucket, price):
            assert price > 0, "Price needs to be positive."
            component = cls(ctx.new_vault(x_address), ctx.vault_with_bucket(y_bucket), price)
            return ctx.globalize(component), price

        def swap(self, ctx, x_bucket):
            ...

    ledger = create_ledger(seed=1)
    package = ledger.publish_package({"HelloSwap": HelloSwap})

Any exception raised by blueprint code ends the transaction as a ``failure``
outcome; all state changes of a transaction are discarded unless it succeeds.
"""

import contextvars
import copy
import decimal
import hashlib
import logging
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Protocol, Sequence, Tuple

from ledger_testenv.constants import (
    ACCOUNT_XRD_ALLOCATION,
    DIVISIBILITY_MAXIMUM,
    DIVISIBILITY_NONE,
    XRD_SYMBOL,
)
from ledger_testenv.ids import IdentifierSet, IdLiteral, ids as _ids
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
from ledger_testenv.resources import (
    Amount,
    AmountLike,
    Ids,
    Put,
    ResourceSpecifier,
    Take,
    WorktopChange,
    to_decimal,
)

log = logging.getLogger(__name__)

# Ledger amounts need 18 decimal places on top of supplies up to 10**18 and more.
_CONTEXT = decimal.Context(prec=80)


# ---------------------------------------------------------------------------
# Outcomes
# ---------------------------------------------------------------------------

class Status(str, Enum):
    """Outcome tag of an executed transaction."""

    SUCCESS = "success"
    FAILURE = "failure"
    REJECTION = "rejection"


class ReasonKind(str, Enum):
    """Structured category of a failure or rejection."""

    PANIC = "panic"
    INSUFFICIENT_BALANCE = "insufficient_balance"
    INVALID_AMOUNT = "invalid_amount"
    RESOURCE_MISMATCH = "resource_mismatch"
    UNAUTHORIZED = "unauthorized"
    NOT_FOUND = "not_found"
    WORKTOP = "worktop"
    DROPPED_BUCKET = "dropped_bucket"
    NO_FEE_LOCKED = "no_fee_locked"
    FEE_LOCK_FAILED = "fee_lock_failed"
    UNCOPYABLE_STATE = "uncopyable_state"


@dataclass(frozen=True)
class OutcomeReason:
    """Why a transaction failed or was rejected."""

    kind: ReasonKind
    message: str
    instruction: Optional[int] = None

    def __str__(self) -> str:
        where = f" at instruction {self.instruction}" if self.instruction is not None else ""
        return f"{self.kind.value}{where}: {self.message}"


@dataclass
class TransactionReceipt:
    """Result of one executed transaction."""

    status: Status
    reason: Optional[OutcomeReason] = None
    outputs: List[Any] = field(default_factory=list)
    worktop_changes: Dict[int, List[WorktopChange]] = field(default_factory=dict)
    logs: List[str] = field(default_factory=list)
    new_resource_addresses: List[str] = field(default_factory=list)
    new_component_addresses: List[str] = field(default_factory=list)
    fee_locked: Decimal = Decimal(0)
    instruction_count: int = 0

    @property
    def succeeded(self) -> bool:
        return self.status is Status.SUCCESS

    def output_buckets(self, position: int) -> List[ResourceSpecifier]:
        """Resources the instruction at *position* put on the worktop."""
        return [
            change.resource
            for change in self.worktop_changes.get(position, [])
            if isinstance(change, Put)
        ]


# ---------------------------------------------------------------------------
# Ledger errors (turned into outcomes, never raised out of ``execute``)
# ---------------------------------------------------------------------------

class LedgerError(Exception):
    """Raised inside the ledger when an operation cannot be carried out."""

    kind = ReasonKind.PANIC


class InsufficientBalance(LedgerError):
    kind = ReasonKind.INSUFFICIENT_BALANCE


class InvalidAmount(LedgerError):
    kind = ReasonKind.INVALID_AMOUNT


class ResourceMismatch(LedgerError):
    kind = ReasonKind.RESOURCE_MISMATCH


class Unauthorized(LedgerError):
    kind = ReasonKind.UNAUTHORIZED


class NotFound(LedgerError):
    kind = ReasonKind.NOT_FOUND


class WorktopError(LedgerError):
    kind = ReasonKind.WORKTOP


class DroppedBucket(LedgerError):
    kind = ReasonKind.DROPPED_BUCKET


class FeeLockFailed(LedgerError):
    kind = ReasonKind.FEE_LOCK_FAILED


class UncopyableState(LedgerError):
    kind = ReasonKind.UNCOPYABLE_STATE


# ---------------------------------------------------------------------------
# Resources and containers
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class KeyPair:
    """Opaque key material of an account. No signatures are computed."""

    public_key: str
    private_key: str = field(repr=False)


@dataclass
class ResourceRecord:
    address: str
    fungible: bool
    divisibility: int
    metadata: Dict[str, str] = field(default_factory=dict)
    total_supply: Decimal = Decimal(0)


def _decimal_places(value: Decimal) -> int:
    _, digits, exponent = value.as_tuple()
    if exponent >= 0:
        return 0
    places = -exponent
    for digit in reversed(digits):
        if places == 0 or digit != 0:
            break
        places -= 1
    return places


def _checked_amount(resource: ResourceRecord, amount: AmountLike) -> Decimal:
    try:
        value = to_decimal(amount)
    except (TypeError, ValueError) as exc:
        raise InvalidAmount(str(exc)) from exc
    if not value.is_finite() or value < 0:
        raise InvalidAmount(f"Amount must be a non-negative number, got {value}")
    if _decimal_places(value) > resource.divisibility:
        raise InvalidAmount(
            f"Amount {value} exceeds divisibility {resource.divisibility} "
            f"of resource {resource.address}"
        )
    return value


_active_transaction: contextvars.ContextVar = contextvars.ContextVar(
    "ledger_testenv_active_transaction", default=None
)


class _Container:
    """Shared behaviour of buckets, vaults and worktop entries."""

    label = "container"

    def __init__(self, resource: ResourceRecord) -> None:
        self.resource = resource
        self._amount = Decimal(0)
        self._ids: set = set()

    @property
    def resource_address(self) -> str:
        return self.resource.address

    @property
    def amount(self) -> Decimal:
        if self.resource.fungible:
            return self._amount
        return Decimal(len(self._ids))

    def is_empty(self) -> bool:
        return self.amount == 0

    def non_fungible_ids(self) -> IdentifierSet:
        if self.resource.fungible:
            raise ResourceMismatch(f"Resource {self.resource.address} is fungible")
        return IdentifierSet(sorted(self._ids))

    def as_specifier(self) -> ResourceSpecifier:
        if self.resource.fungible:
            return Amount(self.resource.address, self._amount)
        return Ids(self.resource.address, self.non_fungible_ids())

    def put(self, other: "_Container") -> None:
        """Move every unit held by *other* into this container."""
        if other.resource.address != self.resource.address:
            raise ResourceMismatch(
                f"Cannot put {other.resource.address} into a {self.label} "
                f"of {self.resource.address}"
            )
        if self.resource.fungible:
            self._amount = _CONTEXT.add(self._amount, other._amount)
            other._amount = Decimal(0)
        else:
            self._ids |= other._ids
            other._ids = set()

    def take(self, amount: AmountLike) -> "Bucket":
        value = _checked_amount(self.resource, amount)
        if value > self.amount:
            raise InsufficientBalance(
                f"{self.label.capitalize()} of {self.resource.address} holds "
                f"{self.amount}, cannot take {value}"
            )
        bucket = Bucket(self.resource)
        if self.resource.fungible:
            self._amount = _CONTEXT.subtract(self._amount, value)
            bucket._amount = value
        else:
            taken = set(sorted(self._ids)[: int(value)])
            self._ids -= taken
            bucket._ids = taken
        return bucket

    def take_non_fungibles(self, local_ids: Iterable[IdLiteral]) -> "Bucket":
        if self.resource.fungible:
            raise ResourceMismatch(f"Resource {self.resource.address} is fungible")
        wanted = set(_ids(local_ids))
        missing = wanted - self._ids
        if missing:
            raise InsufficientBalance(
                f"{self.label.capitalize()} of {self.resource.address} does not hold "
                f"{', '.join(str(i) for i in sorted(missing))}"
            )
        self._ids -= wanted
        bucket = Bucket(self.resource)
        bucket._ids = wanted
        return bucket

    def take_all(self) -> "Bucket":
        bucket = Bucket(self.resource)
        bucket.put(self)
        return bucket

    def _take_specifier(self, specifier: ResourceSpecifier) -> "Bucket":
        if isinstance(specifier, Ids):
            return self.take_non_fungibles(specifier.ids)
        return self.take(specifier.amount)

    def _contains(self, specifier: ResourceSpecifier) -> bool:
        if isinstance(specifier, Ids):
            return set(specifier.ids) <= self._ids
        return self.amount >= specifier.amount

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.as_specifier()!r})"


class Bucket(_Container):
    """Transient container of resources moved around within one transaction."""

    label = "bucket"

    def __init__(self, resource: ResourceRecord) -> None:
        super().__init__(resource)
        transaction = _active_transaction.get()
        if transaction is not None:
            transaction.buckets.append(self)


class Vault(_Container):
    """Persistent container owned by an account or a component."""

    label = "vault"


class _WorktopEntry(_Container):
    label = "worktop"


# ---------------------------------------------------------------------------
# Ledger state
# ---------------------------------------------------------------------------

@dataclass
class _Account:
    address: str
    public_key: str
    vaults: Dict[str, Vault] = field(default_factory=dict)

    def vault(self, resource: ResourceRecord) -> Vault:
        if resource.address not in self.vaults:
            self.vaults[resource.address] = Vault(resource)
        return self.vaults[resource.address]


@dataclass
class _LedgerState:
    seed: int
    counter: int = 0
    xrd_address: str = ""
    resources: Dict[str, ResourceRecord] = field(default_factory=dict)
    accounts: Dict[str, _Account] = field(default_factory=dict)
    packages: Dict[str, Dict[str, type]] = field(default_factory=dict)
    components: Dict[str, Any] = field(default_factory=dict)

    def new_address(self, kind: str) -> str:
        self.counter += 1
        digest = hashlib.sha256(f"{self.seed}:{kind}:{self.counter}".encode()).hexdigest()
        return f"{kind}_sim1{digest[:40]}"

    def resource(self, address: str) -> ResourceRecord:
        try:
            return self.resources[address]
        except KeyError:
            raise NotFound(f"Resource {address} does not exist") from None

    def account(self, address: str) -> _Account:
        try:
            return self.accounts[address]
        except KeyError:
            raise NotFound(f"Account {address} does not exist") from None

    def new_resource(
        self,
        fungible: bool,
        divisibility: int,
        metadata: Optional[Mapping[str, str]],
    ) -> ResourceRecord:
        if not DIVISIBILITY_NONE <= divisibility <= DIVISIBILITY_MAXIMUM:
            raise InvalidAmount(f"Divisibility must be within 0..18, got {divisibility}")
        record = ResourceRecord(
            address=self.new_address("resource"),
            fungible=fungible,
            divisibility=divisibility,
            metadata=dict(metadata or {}),
        )
        self.resources[record.address] = record
        return record

    def mint(self, resource: ResourceRecord, specifier: ResourceSpecifier) -> Bucket:
        bucket = Bucket(resource)
        if resource.fungible:
            if not isinstance(specifier, Amount):
                raise ResourceMismatch(f"Resource {resource.address} is fungible")
            bucket._amount = _checked_amount(resource, specifier.amount)
        else:
            if not isinstance(specifier, Ids):
                raise ResourceMismatch(f"Resource {resource.address} is non-fungible")
            minted = set(specifier.ids)
            existing = set()
            for holder in self._containers_of(resource.address):
                existing |= holder._ids & minted
            if existing:
                raise InvalidAmount(
                    f"Non-fungible ids already exist: {', '.join(str(i) for i in sorted(existing))}"
                )
            bucket._ids = minted
        resource.total_supply = _CONTEXT.add(resource.total_supply, bucket.amount)
        return bucket

    def _containers_of(self, address: str) -> List[_Container]:
        found = [a.vaults[address] for a in self.accounts.values() if address in a.vaults]
        for component in self.components.values():
            found.extend(
                value
                for value in vars(component).values()
                if isinstance(value, Vault) and value.resource.address == address
            )
        return found


# ---------------------------------------------------------------------------
# Blueprint-facing runtime
# ---------------------------------------------------------------------------

class CallContext:
    """Runtime handed to blueprint functions and methods."""

    def __init__(self, transaction: "_Transaction", position: int) -> None:
        self._transaction = transaction
        self.position = position

    def new_vault(self, resource_address: str) -> Vault:
        return Vault(self._transaction.state.resource(resource_address))

    def vault_with_bucket(self, bucket: Bucket) -> Vault:
        vault = Vault(bucket.resource)
        vault.put(bucket)
        return vault

    def globalize(self, component: Any) -> str:
        """Register *component* on the ledger and return its address.

        Component state must survive ``copy.deepcopy``: every transaction
        runs on a copy of the ledger.
        """
        try:
            copy.deepcopy(component)
        except (TypeError, copy.Error) as exc:
            raise UncopyableState(
                f"Cannot globalize {type(component).__name__}: its state cannot be copied ({exc})"
            ) from exc
        address = self._transaction.state.new_address("component")
        self._transaction.state.components[address] = component
        self._transaction.new_components.append(address)
        return address

    def new_fungible_resource(
        self,
        initial_supply: AmountLike,
        divisibility: int = DIVISIBILITY_MAXIMUM,
        metadata: Optional[Mapping[str, str]] = None,
    ) -> Bucket:
        state = self._transaction.state
        record = state.new_resource(True, divisibility, metadata)
        self._transaction.new_resources.append(record.address)
        return state.mint(record, Amount(record.address, initial_supply))

    def new_non_fungible_resource(
        self,
        local_ids: Iterable[IdLiteral],
        metadata: Optional[Mapping[str, str]] = None,
    ) -> Bucket:
        state = self._transaction.state
        record = state.new_resource(False, DIVISIBILITY_NONE, metadata)
        self._transaction.new_resources.append(record.address)
        return state.mint(record, Ids(record.address, local_ids))

    def resource_metadata(self, resource_address: str) -> Dict[str, str]:
        return dict(self._transaction.state.resource(resource_address).metadata)

    def log(self, message: str) -> None:
        self._transaction.logs.append(str(message))


# ---------------------------------------------------------------------------
# Transaction execution
# ---------------------------------------------------------------------------

class _Transaction:
    def __init__(self, state: _LedgerState, signers: Iterable[str]) -> None:
        self.state = state
        self.signers = frozenset(signers)
        self.worktop: Dict[str, _WorktopEntry] = {}
        self.named: Dict[str, Bucket] = {}
        self.buckets: List[Bucket] = []
        self.logs: List[str] = []
        self.outputs: List[Any] = []
        self.changes: Dict[int, List[WorktopChange]] = {}
        self.new_resources: List[str] = []
        self.new_components: List[str] = []
        self.fee_locked = Decimal(0)

    def run(self, instructions: Sequence[Instruction]) -> Tuple[Status, Optional[OutcomeReason]]:
        if not instructions or not isinstance(instructions[0], LockFee):
            return Status.REJECTION, OutcomeReason(
                ReasonKind.NO_FEE_LOCKED,
                "Transaction does not start by locking a fee",
            )

        for position, instruction in enumerate(instructions):
            self.changes[position] = []
            try:
                output = self._dispatch(position, instruction)
            except LedgerError as exc:
                if position == 0:
                    return Status.REJECTION, OutcomeReason(
                        ReasonKind.FEE_LOCK_FAILED, str(exc), position
                    )
                return Status.FAILURE, OutcomeReason(exc.kind, str(exc), position)
            except Exception as exc:  # raised by blueprint code
                message = str(exc) or type(exc).__name__
                log.debug("Instruction %d panicked: %r", position, exc)
                return Status.FAILURE, OutcomeReason(ReasonKind.PANIC, message, position)
            self.outputs.append(output)

        try:
            self._finish()
        except LedgerError as exc:
            return Status.FAILURE, OutcomeReason(exc.kind, str(exc))
        return Status.SUCCESS, None

    # -- instructions --------------------------------------------------------

    def _dispatch(self, position: int, instruction: Instruction) -> Any:
        if isinstance(instruction, LockFee):
            return self._lock_fee(instruction)
        if isinstance(instruction, Withdraw):
            self._authorize(instruction.account)
            account = self.state.account(instruction.account)
            resource = self.state.resource(instruction.resource.address)
            bucket = account.vault(resource)._take_specifier(instruction.resource)
            return self._absorb(position, bucket)
        if isinstance(instruction, Deposit):
            account = self.state.account(instruction.account)
            bucket = self._take_from_worktop(position, instruction.resource)
            account.vault(bucket.resource).put(bucket)
            return None
        if isinstance(instruction, DepositBatch):
            account = self.state.account(instruction.account)
            for entry in list(self.worktop.values()):
                if entry.is_empty():
                    continue
                bucket = entry.take_all()
                self.changes[position].append(Take(bucket.as_specifier()))
                account.vault(bucket.resource).put(bucket)
            return None
        if isinstance(instruction, TakeFromWorktop):
            bucket = self._take_from_worktop(position, instruction.resource)
            self._name_bucket(instruction.bucket, bucket)
            return None
        if isinstance(instruction, TakeAllFromWorktop):
            resource = self.state.resource(instruction.resource)
            bucket = self._worktop_entry(resource).take_all()
            self.changes[position].append(Take(bucket.as_specifier()))
            self._name_bucket(instruction.bucket, bucket)
            return None
        if isinstance(instruction, AssertWorktopContains):
            resource = self.state.resource(instruction.resource.address)
            if not self._worktop_entry(resource)._contains(instruction.resource):
                raise WorktopError(
                    f"Worktop does not contain {instruction.resource!r}, "
                    f"it holds {self._worktop_entry(resource).as_specifier()!r}"
                )
            return None
        if isinstance(instruction, CallFunction):
            return self._call_function(position, instruction)
        if isinstance(instruction, CallMethod):
            return self._call_method(position, instruction)
        raise NotFound(f"Unsupported instruction {instruction!r}")

    def _lock_fee(self, instruction: LockFee) -> None:
        try:
            self._authorize(instruction.account)
        except LedgerError as exc:
            raise FeeLockFailed(str(exc)) from exc
        account = self.state.accounts.get(instruction.account)
        xrd = self.state.resource(self.state.xrd_address)
        available = account.vault(xrd).amount if account else Decimal(0)
        if available < instruction.amount:
            raise FeeLockFailed(
                f"Account {instruction.account} holds {available} {XRD_SYMBOL}, "
                f"cannot lock a fee of {instruction.amount}"
            )
        self.fee_locked = _CONTEXT.add(self.fee_locked, instruction.amount)

    def _call_function(self, position: int, instruction: CallFunction) -> Any:
        try:
            blueprints = self.state.packages[instruction.package]
        except KeyError:
            raise NotFound(f"Package {instruction.package} does not exist") from None
        try:
            blueprint = blueprints[instruction.blueprint]
        except KeyError:
            raise NotFound(
                f"Blueprint {instruction.blueprint} not found in package {instruction.package}"
            ) from None
        function = _public_callable(blueprint, instruction.function)
        if function is None:
            raise NotFound(f"Function {instruction.blueprint}::{instruction.function} does not exist")
        args = self._resolve(instruction.args)
        result = function(CallContext(self, position), *args)
        return self._absorb(position, result)

    def _call_method(self, position: int, instruction: CallMethod) -> Any:
        if instruction.component in self.state.accounts:
            return self._call_account(position, instruction)
        try:
            component = self.state.components[instruction.component]
        except KeyError:
            raise NotFound(f"Component {instruction.component} does not exist") from None
        if _public_callable(type(component), instruction.method) is None:
            raise NotFound(
                f"Method {type(component).__name__}::{instruction.method} does not exist"
            )
        args = self._resolve(instruction.args)
        result = getattr(component, instruction.method)(CallContext(self, position), *args)
        return self._absorb(position, result)

    def _call_account(self, position: int, instruction: CallMethod) -> Any:
        account = self.state.account(instruction.component)
        args = self._resolve(instruction.args)
        if instruction.method == "balance":
            (resource_address,) = args
            return account.vault(self.state.resource(resource_address)).amount
        if instruction.method == "deposit":
            (bucket,) = args
            account.vault(bucket.resource).put(bucket)
            return None
        if instruction.method == "withdraw":
            self._authorize(account.address)
            resource_address, amount = args
            vault = account.vault(self.state.resource(resource_address))
            return self._absorb(position, vault.take(amount))
        raise NotFound(f"Method Account::{instruction.method} does not exist")

    # -- helpers -------------------------------------------------------------

    def _authorize(self, account_address: str) -> None:
        account = self.state.account(account_address)
        if account.public_key not in self.signers:
            raise Unauthorized(f"Transaction is not signed by the owner of {account_address}")

    def _worktop_entry(self, resource: ResourceRecord) -> _WorktopEntry:
        if resource.address not in self.worktop:
            self.worktop[resource.address] = _WorktopEntry(resource)
        return self.worktop[resource.address]

    def _take_from_worktop(self, position: int, specifier: ResourceSpecifier) -> Bucket:
        resource = self.state.resource(specifier.address)
        bucket = self._worktop_entry(resource)._take_specifier(specifier)
        self.changes[position].append(Take(bucket.as_specifier()))
        return bucket

    def _name_bucket(self, name: str, bucket: Bucket) -> None:
        if name in self.named:
            raise WorktopError(f"Bucket {name!r} already exists")
        self.named[name] = bucket

    def _resolve(self, value: Any) -> Any:
        if isinstance(value, BucketRef):
            try:
                return self.named.pop(value.name)
            except KeyError:
                raise WorktopError(f"Bucket {value.name!r} does not exist or was consumed") from None
        if isinstance(value, tuple):
            return tuple(self._resolve(v) for v in value)
        if isinstance(value, list):
            return [self._resolve(v) for v in value]
        if isinstance(value, dict):
            return {k: self._resolve(v) for k, v in value.items()}
        return value

    def _absorb(self, position: int, value: Any) -> Any:
        """Move returned buckets onto the worktop, replacing them by their contents."""
        if isinstance(value, Bucket):
            specifier = value.as_specifier()
            self.changes[position].append(Put(specifier))
            self._worktop_entry(value.resource).put(value)
            return specifier
        if isinstance(value, tuple):
            return tuple(self._absorb(position, v) for v in value)
        if isinstance(value, list):
            return [self._absorb(position, v) for v in value]
        if isinstance(value, dict):
            return {k: self._absorb(position, v) for k, v in value.items()}
        return value

    def _finish(self) -> None:
        leftovers = [entry.as_specifier() for entry in self.worktop.values() if not entry.is_empty()]
        if leftovers:
            raise WorktopError(f"Resources left on the worktop: {leftovers!r}")
        dropped = [bucket.as_specifier() for bucket in self.buckets if not bucket.is_empty()]
        if dropped:
            raise DroppedBucket(f"Non-empty buckets were dropped: {dropped!r}")


def _public_callable(owner: Any, name: str) -> Any:
    if name.startswith("_"):
        return None
    attribute = getattr(owner, name, None)
    return attribute if callable(attribute) else None


# ---------------------------------------------------------------------------
# Simulator interface
# ---------------------------------------------------------------------------

class Simulator(Protocol):
    """What the harness needs from a ledger simulator."""

    def create_account(self) -> Tuple[str, KeyPair]:
        ...

    def create_fungible_resource(
        self,
        account: str,
        amount: AmountLike,
        divisibility: int = DIVISIBILITY_MAXIMUM,
        metadata: Optional[Mapping[str, str]] = None,
    ) -> str:
        ...

    def create_non_fungible_resource(
        self,
        account: str,
        local_ids: Iterable[IdLiteral],
        metadata: Optional[Mapping[str, str]] = None,
    ) -> str:
        ...

    def mint(self, account: str, specifier: ResourceSpecifier) -> None:
        ...

    def publish_package(self, blueprints: Mapping[str, type]) -> str:
        ...

    def execute(self, instructions: Sequence[Instruction], signers: Iterable[str]) -> TransactionReceipt:
        ...

    def preview(self, instructions: Sequence[Instruction], signers: Iterable[str]) -> TransactionReceipt:
        ...

    def balance(self, account: str, resource: str) -> Decimal:
        ...

    def non_fungible_ids(self, account: str, resource: str) -> IdentifierSet:
        ...


class InMemoryLedger:
    """In-process ledger simulator.

    Usage::

        ledger = InMemoryLedger(seed=7)
        account, keys = ledger.create_account()
        token = ledger.create_fungible_resource(account, 1000)
        receipt = ledger.execute(instructions, [keys.public_key])
    """

    def __init__(self, *, seed: int = 1) -> None:
        self.seed = seed
        self._state = _LedgerState(seed=seed)
        xrd = self._state.new_resource(
            True,
            DIVISIBILITY_MAXIMUM,
            {"name": "Radix", "symbol": XRD_SYMBOL},
        )
        self._state.xrd_address = xrd.address
        log.debug("Created in-memory ledger (seed=%s)", seed)

    @property
    def xrd_address(self) -> str:
        """Address of the native fee resource."""
        return self._state.xrd_address

    # -- setup ---------------------------------------------------------------

    def create_account(self) -> Tuple[str, KeyPair]:
        """Create an account holding the standard XRD allocation."""
        state = self._state
        address = state.new_address("account")
        private_key = hashlib.sha256(f"{self.seed}:key:{address}".encode()).hexdigest()
        keys = KeyPair(
            public_key=hashlib.sha256(private_key.encode()).hexdigest(),
            private_key=private_key,
        )
        account = _Account(address=address, public_key=keys.public_key)
        state.accounts[address] = account
        xrd = state.resource(state.xrd_address)
        account.vault(xrd).put(state.mint(xrd, Amount(xrd.address, ACCOUNT_XRD_ALLOCATION)))
        return address, keys

    def create_fungible_resource(
        self,
        account: str,
        amount: AmountLike,
        divisibility: int = DIVISIBILITY_MAXIMUM,
        metadata: Optional[Mapping[str, str]] = None,
    ) -> str:
        """Create a fungible resource and deposit its initial supply into *account*."""
        holder = self._state.account(account)
        record = self._state.new_resource(True, divisibility, metadata)
        holder.vault(record).put(self._state.mint(record, Amount(record.address, amount)))
        return record.address

    def create_non_fungible_resource(
        self,
        account: str,
        local_ids: Iterable[IdLiteral] = (1, 2, 3),
        metadata: Optional[Mapping[str, str]] = None,
    ) -> str:
        """Create a non-fungible resource and deposit *local_ids* into *account*."""
        holder = self._state.account(account)
        record = self._state.new_resource(False, DIVISIBILITY_NONE, metadata)
        holder.vault(record).put(self._state.mint(record, Ids(record.address, local_ids)))
        return record.address

    def mint(self, account: str, specifier: ResourceSpecifier) -> None:
        """Mint more of an existing resource straight into *account*."""
        holder = self._state.account(account)
        record = self._state.resource(specifier.address)
        holder.vault(record).put(self._state.mint(record, specifier))

    def publish_package(self, blueprints: Mapping[str, type]) -> str:
        address = self._state.new_address("package")
        self._state.packages[address] = dict(blueprints)
        log.debug("Published package %s with blueprints %s", address, sorted(blueprints))
        return address

    # -- execution -----------------------------------------------------------

    def execute(self, instructions: Sequence[Instruction], signers: Iterable[str]) -> TransactionReceipt:
        """Run *instructions* atomically and return the receipt."""
        working, receipt = self._run(instructions, signers)
        if receipt.succeeded:
            self._state = working
        return receipt

    def preview(self, instructions: Sequence[Instruction], signers: Iterable[str]) -> TransactionReceipt:
        """Run *instructions* like :meth:`execute` but never commit the result.

        Addresses are derived from ledger state, so a preview reports the same
        new addresses as the execution that follows it.
        """
        _, receipt = self._run(instructions, signers)
        return receipt

    def _run(
        self,
        instructions: Sequence[Instruction],
        signers: Iterable[str],
    ) -> Tuple[Optional[_LedgerState], TransactionReceipt]:
        instructions = list(instructions)
        try:
            working = copy.deepcopy(self._state)
        except (TypeError, copy.Error) as exc:
            log.debug("Ledger state cannot be copied: %r", exc)
            return None, TransactionReceipt(
                status=Status.FAILURE,
                reason=OutcomeReason(
                    ReasonKind.UNCOPYABLE_STATE,
                    f"Ledger state cannot be copied for a new transaction ({exc})",
                ),
                instruction_count=len(instructions),
            )

        transaction = _Transaction(working, signers)
        token = _active_transaction.set(transaction)
        try:
            status, reason = transaction.run(instructions)
        finally:
            _active_transaction.reset(token)

        committed = status is Status.SUCCESS
        return working, TransactionReceipt(
            status=status,
            reason=reason,
            outputs=transaction.outputs if committed else [],
            worktop_changes=transaction.changes if committed else {},
            logs=transaction.logs,
            new_resource_addresses=transaction.new_resources if committed else [],
            new_component_addresses=transaction.new_components if committed else [],
            fee_locked=transaction.fee_locked,
            instruction_count=len(instructions),
        )

    # -- inspection ----------------------------------------------------------

    def balance(self, account: str, resource: str) -> Decimal:
        vault = self._state.account(account).vaults.get(resource)
        return vault.amount if vault is not None else Decimal(0)

    def non_fungible_ids(self, account: str, resource: str) -> IdentifierSet:
        vault = self._state.account(account).vaults.get(resource)
        return vault.non_fungible_ids() if vault is not None else IdentifierSet()

    def resource_metadata(self, resource: str) -> Dict[str, str]:
        return dict(self._state.resource(resource).metadata)

    def total_supply(self, resource: str) -> Decimal:
        return self._state.resource(resource).total_supply

    def component(self, address: str) -> Any:
        """Return a snapshot of a globalized component's state."""
        try:
            return copy.deepcopy(self._state.components[address])
        except KeyError:
            raise NotFound(f"Component {address} does not exist") from None


def create_ledger(seed: int = 1) -> InMemoryLedger:
    """Create a fresh in-memory ledger."""
    return InMemoryLedger(seed=seed)
