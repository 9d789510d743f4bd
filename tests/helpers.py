"""Blueprint-specific test helpers."""

from decimal import Decimal

from ledger_testenv import Amount, TestHelper


class HelloSwapTestHelper(TestHelper):
    """Fluent instructions for the HelloSwap blueprint."""

    def __init__(self, env):
        super().__init__(env)
        self.pool_address = None
        self.price = None

    @property
    def x_address(self):
        return self.env.resource("X")

    @property
    def y_address(self):
        return self.env.resource("Y")

    def instantiate(self, x_address, y_address, y_amount, price):
        y_bucket = self.name("y_bucket")
        self.manifest.withdraw(Amount(y_address, y_amount)) \
            .take_from_worktop(Amount(y_address, y_amount), y_bucket) \
            .call_function(
                self.env.package_address("hello_swap"),
                "HelloSwap",
                "instantiate",
                [x_address, self.manifest.bucket(y_bucket), Decimal(price)],
                label="instantiate",
            )
        return self

    def swap(self, x_address, x_amount):
        x_bucket = self.name("x_bucket")
        self.manifest.withdraw(Amount(x_address, x_amount)) \
            .take_from_worktop(Amount(x_address, x_amount), x_bucket) \
            .call_method(self.pool_address, "swap", [self.manifest.bucket(x_bucket)], label="swap")
        return self

    def instantiate_default(self, y_amount, price, verbose=False):
        receipt = self.instantiate(self.x_address, self.y_address, y_amount, price) \
            .execute_expect_success(verbose)
        self.pool_address, self.price = receipt.outputs("instantiate")
        return receipt

    def swap_expect_success(self, x_amount, y_amount_expected, x_remainder_expected):
        receipt = self.swap(self.x_address, x_amount).execute_expect_success(True)
        assert receipt.output_buckets("swap") == [
            Amount(self.y_address, y_amount_expected),
            Amount(self.x_address, x_remainder_expected),
        ]
        return receipt
