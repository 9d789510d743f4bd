"""
ledger_testenv.config
~~~~~~~~~~~~~~~~~~~~~

Configuration of the standard test environment.

Defaults can be overridden per test by constructing :class:`EnvironmentConfig`
directly, or for a whole test run through environment variables (a ``.env``
file in the working directory is loaded first)::

    TESTENV_FUNGIBLE_COUNT=3
    TESTENV_NONFUNGIBLE_COLLECTIONS=J,K
    TESTENV_NONFUNGIBLE_COUNT=3
    TESTENV_FUNDING=1000000
    TESTENV_ADMIN_BADGE=true
    TESTENV_SEED=1
    TESTENV_TRACE=false
"""

import os
from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Mapping, Optional, Tuple

from dotenv import find_dotenv, load_dotenv

from ledger_testenv.constants import (
    ADMIN_BADGE,
    MAX_SUPPLY,
    STANDARD_FUNGIBLES,
    STANDARD_NONFUNGIBLES,
)
from ledger_testenv.errors import ConfigError
from ledger_testenv.resources import to_decimal

ENV_PREFIX = "TESTENV_"

_TRUE = {"1", "true", "yes", "y", "on"}
_FALSE = {"0", "false", "no", "n", "off", ""}


@dataclass(frozen=True)
class EnvironmentConfig:
    """Which standard resources a new environment pre-mints, and how."""

    fungible_count: int = 4
    nonfungible_collections: Tuple[str, ...] = STANDARD_NONFUNGIBLES
    nonfungible_count: int = 3
    default_account_funding: Decimal = MAX_SUPPLY
    admin_badge: bool = True
    seed: int = 1
    trace: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "nonfungible_collections", tuple(self.nonfungible_collections))
        try:
            object.__setattr__(self, "default_account_funding", to_decimal(self.default_account_funding))
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"Invalid default_account_funding: {exc}") from exc
        self.validate()

    def validate(self) -> None:
        """Raise :class:`ConfigError` if the configuration is inconsistent."""
        if not 0 <= self.fungible_count <= len(STANDARD_FUNGIBLES):
            raise ConfigError(
                f"fungible_count must be within 0..{len(STANDARD_FUNGIBLES)}, "
                f"got {self.fungible_count}"
            )
        if self.nonfungible_count < 0:
            raise ConfigError(f"nonfungible_count must be non-negative, got {self.nonfungible_count}")
        if not self.default_account_funding.is_finite() or self.default_account_funding <= 0:
            raise ConfigError(
                f"default_account_funding must be positive, got {self.default_account_funding}"
            )
        reserved = set(self.fungible_names) | {"X", "Y", ADMIN_BADGE}
        seen = set()
        for name in self.nonfungible_collections:
            if not name:
                raise ConfigError("Non-fungible collection names must not be empty")
            if name in seen:
                raise ConfigError(f"Non-fungible collection {name!r} is listed twice")
            if name in reserved:
                raise ConfigError(f"Non-fungible collection {name!r} clashes with a fungible resource name")
            seen.add(name)

    @property
    def fungible_names(self) -> Tuple[str, ...]:
        return STANDARD_FUNGIBLES[: self.fungible_count]

    def with_overrides(self, **changes) -> "EnvironmentConfig":
        return replace(self, **changes)

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        *,
        dotenv: bool = True,
    ) -> "EnvironmentConfig":
        """Build a configuration from ``TESTENV_*`` environment variables."""
        if environ is None:
            if dotenv:
                load_dotenv(find_dotenv(usecwd=True))
            environ = os.environ

        def get(name: str) -> Optional[str]:
            value = environ.get(ENV_PREFIX + name)
            return value.strip() if value is not None else None

        overrides = {}
        if get("FUNGIBLE_COUNT") is not None:
            overrides["fungible_count"] = _parse_int("FUNGIBLE_COUNT", get("FUNGIBLE_COUNT"))
        if get("NONFUNGIBLE_COLLECTIONS") is not None:
            overrides["nonfungible_collections"] = tuple(
                part.strip() for part in get("NONFUNGIBLE_COLLECTIONS").split(",") if part.strip()
            )
        if get("NONFUNGIBLE_COUNT") is not None:
            overrides["nonfungible_count"] = _parse_int("NONFUNGIBLE_COUNT", get("NONFUNGIBLE_COUNT"))
        if get("FUNDING") is not None:
            overrides["default_account_funding"] = get("FUNDING")
        if get("ADMIN_BADGE") is not None:
            overrides["admin_badge"] = _parse_bool("ADMIN_BADGE", get("ADMIN_BADGE"))
        if get("SEED") is not None:
            overrides["seed"] = _parse_int("SEED", get("SEED"))
        if get("TRACE") is not None:
            overrides["trace"] = _parse_bool("TRACE", get("TRACE"))
        return cls(**overrides)


def _parse_int(name: str, value: str) -> int:
    try:
        return int(value)
    except ValueError:
        raise ConfigError(f"{ENV_PREFIX}{name} must be an integer, got {value!r}") from None


def _parse_bool(name: str, value: str) -> bool:
    lowered = value.lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise ConfigError(f"{ENV_PREFIX}{name} must be a boolean, got {value!r}")
