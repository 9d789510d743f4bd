"""
ledger_testenv.environment
~~~~~~~~~~~~~~~~~~~~~~~~~~

Per-test environments: a fresh ledger, a funded default account and a
standard set of pre-minted test resources.

Usage::

    env = new_environment(packages={"hello_swap": {"HelloSwap": HelloSwap}})
    builder = env.manifest().call_function(
        env.package_address("hello_swap"), "HelloSwap", "instantiate", [...],
        label="instantiate",
    )
    receipt = env.execute_expect_success(builder)

Blueprint-specific helpers usually subclass :class:`TestHelper`, which keeps
the builder for the next transaction and resets it after every execution.
"""

import logging
from decimal import Decimal
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Union

from ledger_testenv.config import EnvironmentConfig
from ledger_testenv.constants import (
    ADMIN_BADGE,
    DIVISIBILITY_MAXIMUM,
    DIVISIBILITY_NONE,
    STANDARD_TEST_FEE,
)
from ledger_testenv.errors import BootstrapError, UnknownPackage, UnknownResource
from ledger_testenv.execution import (
    ExpectedOutcome,
    FailureMatching,
    ReasonPredicate,
    RejectionMatching,
    Success,
    run,
)
from ledger_testenv.ids import IdentifierSet
from ledger_testenv.ledger import KeyPair, Simulator, create_ledger
from ledger_testenv.manifest import InstructionSequence, ManifestBuilder
from ledger_testenv.receipt import Receipt
from ledger_testenv.resources import sort_addresses

log = logging.getLogger(__name__)

Sequenceish = Union[InstructionSequence, ManifestBuilder]


class TestEnvironment:
    """Everything one test needs: ledger, accounts, packages and resources.

    Prefer :func:`new_environment` over instantiating this class directly.
    """

    __test__ = False

    def __init__(
        self,
        *,
        ledger: Simulator,
        config: EnvironmentConfig,
        account: str,
        keys: KeyPair,
        dapp_definition: str,
        packages: Mapping[str, str],
        resources: Mapping[str, str],
    ) -> None:
        self.ledger = ledger
        self.config = config
        self.account = account
        self.keys = keys
        self.dapp_definition = dapp_definition
        self._packages = dict(packages)
        self._resources = dict(resources)

    @property
    def public_key(self) -> str:
        return self.keys.public_key

    # -- lookups -------------------------------------------------------------

    @property
    def resources(self) -> Mapping[str, str]:
        """Symbolic resource name -> resource address."""
        return MappingProxyType(self._resources)

    @property
    def fungible_names(self):
        return self.config.fungible_names

    def resource(self, name: str) -> str:
        """Address of the standard resource called *name* (e.g. ``"A"``, ``"X"``, ``"J"``)."""
        try:
            return self._resources[name]
        except KeyError:
            raise UnknownResource(name, self._resources) from None

    def package_address(self, name: str) -> str:
        try:
            return self._packages[name]
        except KeyError:
            raise UnknownPackage(name, self._packages) from None

    def balance(self, resource: str, account: Optional[str] = None) -> Decimal:
        """Balance of *resource* (a name or an address) held by *account*."""
        address = self._resources.get(resource, resource)
        return self.ledger.balance(account or self.account, address)

    def non_fungible_ids(self, resource: str, account: Optional[str] = None) -> IdentifierSet:
        address = self._resources.get(resource, resource)
        return self.ledger.non_fungible_ids(account or self.account, address)

    # -- transactions --------------------------------------------------------

    def manifest(self, fee: Decimal = STANDARD_TEST_FEE) -> ManifestBuilder:
        """A builder that locks *fee* from the default account and deposits leftovers back."""
        return ManifestBuilder(self.account, fee=fee)

    def execute(
        self,
        sequence: Sequenceish,
        expect: Optional[ExpectedOutcome] = None,
        *,
        verbose: bool = False,
    ) -> Receipt:
        return run(self, sequence, expect, verbose=verbose)

    def execute_expect_success(self, sequence: Sequenceish, *, verbose: bool = False) -> Receipt:
        return run(self, sequence, Success(), verbose=verbose)

    def execute_expect_failure(
        self,
        sequence: Sequenceish,
        predicate: Optional[ReasonPredicate] = None,
        *,
        verbose: bool = False,
    ) -> Receipt:
        return run(self, sequence, FailureMatching(predicate), verbose=verbose)

    def execute_expect_rejection(
        self,
        sequence: Sequenceish,
        predicate: Optional[ReasonPredicate] = None,
        *,
        verbose: bool = False,
    ) -> Receipt:
        return run(self, sequence, RejectionMatching(predicate), verbose=verbose)

    def __repr__(self) -> str:
        return f"TestEnvironment(account={self.account!r}, resources={sorted(self._resources)})"


def new_environment(
    config: Optional[EnvironmentConfig] = None,
    packages: Optional[Mapping[str, Mapping[str, type]]] = None,
    ledger: Optional[Simulator] = None,
) -> TestEnvironment:
    """Create a fresh ledger populated with the standard test resources.

    Parameters
    ----------
    config:
        Which resources to pre-mint; defaults to :class:`EnvironmentConfig`.
    packages:
        Package name -> ``{blueprint name: blueprint class}`` to publish.
    ledger:
        An already created simulator. A new in-memory ledger seeded with
        ``config.seed`` is used when omitted.

    Raises :class:`BootstrapError` if the simulator cannot be initialised.
    """
    config = config or EnvironmentConfig()
    try:
        ledger = ledger if ledger is not None else create_ledger(config.seed)
        account, keys = ledger.create_account()
        dapp_definition, _ = ledger.create_account()
        package_addresses = {
            name: ledger.publish_package(blueprints)
            for name, blueprints in (packages or {}).items()
        }
        resources = _mint_standard_resources(ledger, account, config)
    except Exception as exc:
        raise BootstrapError(f"Failed to initialise the test ledger: {exc}") from exc

    log.debug(
        "Bootstrapped environment: account=%s packages=%s resources=%s",
        account,
        sorted(package_addresses),
        sorted(resources),
    )
    return TestEnvironment(
        ledger=ledger,
        config=config,
        account=account,
        keys=keys,
        dapp_definition=dapp_definition,
        packages=package_addresses,
        resources=resources,
    )


def _mint_standard_resources(
    ledger: Simulator,
    account: str,
    config: EnvironmentConfig,
) -> Dict[str, str]:
    resources: Dict[str, str] = {}
    if config.admin_badge:
        resources[ADMIN_BADGE] = ledger.create_fungible_resource(
            account,
            1,
            DIVISIBILITY_NONE,
            {"name": "Admin badge", "symbol": ADMIN_BADGE},
        )
    for name in config.fungible_names:
        resources[name] = ledger.create_fungible_resource(
            account,
            config.default_account_funding,
            DIVISIBILITY_MAXIMUM,
            {"name": f"Test token {name}", "symbol": name},
        )
    if "A" in resources and "B" in resources:
        resources["X"], resources["Y"] = sort_addresses(resources["A"], resources["B"])
    for name in config.nonfungible_collections:
        resources[name] = ledger.create_non_fungible_resource(
            account,
            range(1, config.nonfungible_count + 1),
            {"name": f"Test NFT {name}", "symbol": name},
        )
    return resources


# ---------------------------------------------------------------------------
# TestHelper
# ---------------------------------------------------------------------------

class TestHelper:
    """Base class for blueprint-specific helpers.

    Subclasses add fluent methods that append labeled instructions to
    ``self.manifest`` and return ``self``; the ``execute*`` methods dispatch
    the collected instructions and start a fresh builder::

        class HelloSwapTestHelper(TestHelper):
            def swap(self, x_amount):
                x_bucket = self.name("x_bucket")
                x = self.env.resource("X")
                self.manifest.withdraw(Amount(x, x_amount)) \\
                    .take_from_worktop(Amount(x, x_amount), x_bucket) \\
                    .call_method(self.pool, "swap", [self.manifest.bucket(x_bucket)], label="swap")
                return self

        helper.swap(1).execute_expect_success().output_buckets("swap")
    """

    __test__ = False

    def __init__(self, env: TestEnvironment) -> None:
        self.env = env
        self.manifest = env.manifest()

    def name(self, base: str) -> str:
        """Bucket name unique within the pending transaction."""
        return self.manifest.name(base)

    def reset_instructions(self) -> None:
        self.manifest = self.env.manifest()

    def execute(self, verbose: bool = False, expect: Optional[ExpectedOutcome] = None) -> Receipt:
        builder = self.manifest
        self.reset_instructions()
        return run(self.env, builder, expect, verbose=verbose)

    def execute_expect_success(self, verbose: bool = False) -> Receipt:
        return self.execute(verbose, Success())

    def execute_expect_failure(
        self,
        predicate: Optional[ReasonPredicate] = None,
        verbose: bool = False,
    ) -> Receipt:
        return self.execute(verbose, FailureMatching(predicate))

    def execute_expect_rejection(
        self,
        predicate: Optional[ReasonPredicate] = None,
        verbose: bool = False,
    ) -> Receipt:
        return self.execute(verbose, RejectionMatching(predicate))
