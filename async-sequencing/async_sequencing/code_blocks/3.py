# Style 3: async/await.
#
# "await" suspends the coroutine until the awaited value is ready,
# letting the code read like ordinary sequential code.
# Failures are plain exceptions, handled with try/except.
from async_sequencing.config import SequencingConfig
from async_sequencing.logging import configure_logging
from async_sequencing.task import MockHttpClient, MockHttpError, ProductCatalog, describe
from async_sequencing.timeit import timer

import asyncio


async def main():
    config = SequencingConfig()
    configure_logging(config.log_level)
    catalog = ProductCatalog(MockHttpClient(latency_seconds=config.network_latency_seconds))

    with timer():
        for product_id in (1, 42):
            try:
                product = await catalog.fetch_product(product_id)
                price = await catalog.fetch_price(product)
            except MockHttpError as error:
                print(f"lookup failed: {error}")
                continue
            print(describe(product, price))
        # > espresso machine costs 249.00 EUR
        # > lookup failed: 404 for /products/42

    # > elapsed time: 1.50 seconds


if __name__ == "__main__":
    import asyncio

    coroutine = main()
    asyncio.run(coroutine)
