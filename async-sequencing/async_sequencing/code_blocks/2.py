# Style 2: future chains.
#
# A future is a value that will be available later. "then" attaches what to do
# once it settles and hands back a new future for that result,
# so steps read top to bottom instead of nesting.
# Returning a future from a continuation makes the chain wait for it too.
from async_sequencing.config import SequencingConfig
from async_sequencing.deferred import then
from async_sequencing.logging import configure_logging
from async_sequencing.task import MockHttpClient, ProductCatalog, describe
from async_sequencing.timeit import timer

import asyncio


async def main():
    config = SequencingConfig()
    configure_logging(config.log_level)
    catalog = ProductCatalog(MockHttpClient(latency_seconds=config.network_latency_seconds))

    with timer():
        # The price lookup needs the product, so it is chained from inside
        # the first continuation and both values travel on together.
        chain = then(
            catalog.fetch_product(1),
            lambda product: then(catalog.fetch_price(product), lambda price: (product, price)),
        )
        chain = then(chain, lambda product_and_price: describe(*product_and_price))
        # One failure handler at the end covers every step above it.
        chain = then(chain, print, lambda error: print(f"lookup failed: {error}"))
        await chain
        # > espresso machine costs 249.00 EUR

        missing = then(catalog.fetch_product(42), print, lambda error: print(f"lookup failed: {error}"))
        await missing
        # > lookup failed: 404 for /products/42

    # > elapsed time: 1.50 seconds


if __name__ == "__main__":
    import asyncio

    coroutine = main()
    asyncio.run(coroutine)
