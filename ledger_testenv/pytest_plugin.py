"""pytest fixtures for ledger-testenv.

Enable them from a ``conftest.py``::

    pytest_plugins = ["ledger_testenv.pytest_plugin"]
"""

import logging

import pytest

from ledger_testenv.config import EnvironmentConfig
from ledger_testenv.environment import TestEnvironment, new_environment

log = logging.getLogger(__name__)


@pytest.fixture
def testenv_config() -> EnvironmentConfig:
    """Environment configuration read from ``TESTENV_*`` variables (and ``.env``)."""
    return EnvironmentConfig.from_env()


@pytest.fixture
def testenv(testenv_config: EnvironmentConfig) -> TestEnvironment:
    """A fresh environment without published packages.

    Tests that need blueprints call :func:`new_environment` with ``packages``.
    """
    env = new_environment(testenv_config)
    log.debug("Created %r", env)
    return env
