"""Tests for environment bootstrapping."""

from decimal import Decimal

import pytest

from blueprints import PACKAGES
from ledger_testenv import (
    ADMIN_BADGE,
    Amount,
    BootstrapError,
    EnvironmentConfig,
    MAX_SUPPLY,
    STANDARD_TEST_FEE,
    TestEnvironment,
    UnknownPackage,
    UnknownResource,
    ids,
    new_environment,
)
from ledger_testenv.constants import ACCOUNT_XRD_ALLOCATION
from ledger_testenv.instructions import LockFee


class TestStandardResources:

    def test_default_environment(self, testenv):
        assert isinstance(testenv, TestEnvironment)
        for name in ("A", "B", "U", "V"):
            assert testenv.balance(name) == MAX_SUPPLY
        assert testenv.balance(ADMIN_BADGE) == 1
        assert testenv.non_fungible_ids("J") == ids([1, 2, 3])
        assert testenv.non_fungible_ids("K") == ids([3, 2, 1])

    def test_fungible_count_limits_resources(self):
        env = new_environment(EnvironmentConfig(fungible_count=3, default_account_funding=500))
        assert env.fungible_names == ("A", "B", "U")
        for name in env.fungible_names:
            assert env.balance(name) == 500
        with pytest.raises(UnknownResource):
            env.resource("V")

    def test_unknown_resource_is_a_lookup_error(self, testenv):
        with pytest.raises(LookupError) as excinfo:
            testenv.resource("Q")
        assert "'Q'" in str(excinfo.value)
        assert "A" in excinfo.value.known

    def test_x_and_y_are_a_and_b_sorted(self, testenv):
        a, b = testenv.resource("A"), testenv.resource("B")
        assert {testenv.resource("X"), testenv.resource("Y")} == {a, b}
        assert testenv.resource("X") < testenv.resource("Y")

    def test_no_x_y_without_b(self):
        env = new_environment(EnvironmentConfig(fungible_count=1))
        env.resource("A")
        with pytest.raises(UnknownResource):
            env.resource("X")

    def test_metadata(self, testenv):
        metadata = testenv.ledger.resource_metadata(testenv.resource("A"))
        assert metadata == {"name": "Test token A", "symbol": "A"}

    def test_resources_are_distinct(self, testenv):
        addresses = [testenv.resource(name) for name in ("A", "B", "U", "V", "J", "K", ADMIN_BADGE)]
        assert len(set(addresses)) == len(addresses)

    def test_admin_badge_can_be_disabled(self):
        env = new_environment(EnvironmentConfig(admin_badge=False))
        assert ADMIN_BADGE not in env.resources

    def test_custom_collections(self):
        env = new_environment(EnvironmentConfig(nonfungible_collections=("N",), nonfungible_count=5))
        assert env.non_fungible_ids("N") == ids(range(1, 6))
        with pytest.raises(UnknownResource):
            env.resource("J")

    def test_empty_collections(self):
        env = new_environment(EnvironmentConfig(nonfungible_count=0))
        assert env.non_fungible_ids("J") == ids()

    def test_account_holds_xrd(self, testenv):
        xrd = testenv.ledger.xrd_address
        assert testenv.balance(xrd) == ACCOUNT_XRD_ALLOCATION
        assert testenv.balance(xrd, testenv.dapp_definition) == ACCOUNT_XRD_ALLOCATION


class TestEnvironmentIsolation:

    def test_environments_do_not_share_state(self):
        first = new_environment()
        second = new_environment()
        a = first.resource("A")
        builder = first.manifest().withdraw(Amount(a, 10)).deposit(Amount(a, 10), account=first.dapp_definition)
        first.execute_expect_success(builder)
        assert first.balance("A") == MAX_SUPPLY - 10
        assert second.balance("A") == MAX_SUPPLY
        assert first.ledger is not second.ledger

    def test_same_seed_gives_same_addresses(self):
        assert dict(new_environment().resources) == dict(new_environment().resources)

    def test_different_seed_gives_different_addresses(self):
        first = new_environment(EnvironmentConfig(seed=1))
        second = new_environment(EnvironmentConfig(seed=2))
        assert first.resource("A") != second.resource("A")


class TestPackages:

    def test_packages_are_published(self, env):
        assert env.package_address("hello_swap") != env.package_address("hello")

    def test_unknown_package(self, env):
        with pytest.raises(UnknownPackage):
            env.package_address("missing")


class TestManifest:

    def test_manifest_locks_standard_fee_from_account(self, testenv):
        builder = testenv.manifest()
        assert builder.build().payloads()[0] == LockFee(testenv.account, STANDARD_TEST_FEE)

    def test_custom_fee(self, testenv):
        builder = testenv.manifest(fee=Decimal(10))
        assert builder.build().payloads()[0].amount == Decimal(10)


class TestBootstrapFailure:

    def test_simulator_errors_are_wrapped(self):
        class BrokenLedger:
            def create_account(self):
                raise RuntimeError("node unavailable")

        with pytest.raises(BootstrapError) as excinfo:
            new_environment(ledger=BrokenLedger())
        assert "node unavailable" in str(excinfo.value)
        assert isinstance(excinfo.value.__cause__, RuntimeError)


def test_packages_can_be_passed_with_config():
    env = new_environment(EnvironmentConfig(fungible_count=2), packages=PACKAGES)
    assert env.package_address("hello")
    assert env.fungible_names == ("A", "B")
