"""
ledger_testenv.constants
~~~~~~~~~~~~~~~~~~~~~~~~

Ledger-wide constants shared by the simulator and the environment bootstrapper.
"""

from decimal import Decimal

# Largest supply the standard test tokens are minted with (10**18).
MAX_SUPPLY = Decimal("1000000000000000000")

DIVISIBILITY_NONE = 0
DIVISIBILITY_MAXIMUM = 18

XRD_SYMBOL = "XRD"

# Every account created by the ledger starts with this many XRD.
ACCOUNT_XRD_ALLOCATION = Decimal("10000")

# Fee locked by the first instruction of every harness-built transaction.
STANDARD_TEST_FEE = Decimal("5000")

STANDARD_FUNGIBLES = ("A", "B", "U", "V", "W", "Z")
STANDARD_NONFUNGIBLES = ("J", "K")
ADMIN_BADGE = "ADMIN"
