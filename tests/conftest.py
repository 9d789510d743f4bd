"""Shared pytest fixtures for the ledger-testenv test suite."""

import pytest

from blueprints import PACKAGES
from helpers import HelloSwapTestHelper
from ledger_testenv import new_environment

pytest_plugins = ["ledger_testenv.pytest_plugin"]


@pytest.fixture
def env():
    """Environment with the example packages published."""
    return new_environment(packages=PACKAGES)


@pytest.fixture
def helper(env):
    return HelloSwapTestHelper(env)
