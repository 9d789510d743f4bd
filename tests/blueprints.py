"""Example blueprints exercised by the test suite."""

import threading
from decimal import Decimal


class HelloSwap:
    """Sells one unit of Y for ``price`` units of X."""

    def __init__(self, x_vault, y_vault, price):
        self.x_vault = x_vault
        self.y_vault = y_vault
        self.price = price

    @classmethod
    def instantiate(cls, ctx, x_address, y_bucket, price):
        assert price > 0, "Price needs to be positive."
        component = cls(ctx.new_vault(x_address), ctx.vault_with_bucket(y_bucket), Decimal(price))
        return ctx.globalize(component), Decimal(price)

    def swap(self, ctx, x_bucket):
        payment = x_bucket.take(self.price)
        output = self.y_vault.take(1)
        self.x_vault.put(payment)
        ctx.log(f"Swapped {self.price} X for 1 Y")
        return output, x_bucket

    def reserves(self, ctx):
        return self.x_vault.amount, self.y_vault.amount


class Hello:
    """Mints a fresh token on instantiation."""

    @classmethod
    def instantiate_hello(cls, ctx):
        bucket = ctx.new_fungible_resource(1000, metadata={"name": "HelloToken", "symbol": "HT"})
        component = ctx.globalize(cls())
        ctx.log("Hello component instantiated")
        return component, bucket

    @classmethod
    def mint_collection(cls, ctx, local_ids):
        return ctx.new_non_fungible_resource(local_ids, metadata={"name": "Hello NFT"})

    @classmethod
    def swallow(cls, ctx, bucket):
        # Leaves the bucket unused.
        return None

    @classmethod
    def explode(cls, ctx):
        raise RuntimeError("boom")

    @classmethod
    def instantiate_with_lock(cls, ctx):
        component = cls()
        component.lock = threading.Lock()
        return ctx.globalize(component)

    def hold_lock(self, ctx):
        self.lock = threading.Lock()


PACKAGES = {
    "hello_swap": {"HelloSwap": HelloSwap},
    "hello": {"Hello": Hello},
}
