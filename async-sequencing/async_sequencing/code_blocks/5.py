# Style 4, continued: failures in generator-driven coroutines.
#
# When a step fails, the driver throws the exception back into the generator
# at the "yield" that produced the step. The generator decides what happens:
#   - catch it and carry on with further steps (recovery),
#   - or let it escape, which fails the task returned by async_chain.
# The observer is only told about steps that succeeded.
from async_sequencing.config import SequencingConfig
from async_sequencing.driver import async_chain
from async_sequencing.logging import configure_logging
from async_sequencing.task import MockHttpClient, MockHttpError, ProductCatalog
from async_sequencing.timeit import timer

import asyncio


def lookup_prices(catalog, product_ids):
    found = 0
    for product_id in product_ids:
        try:
            product = yield catalog.fetch_product(product_id)
            yield catalog.fetch_price(product)
        except MockHttpError as error:
            # recover: skip this product and keep going
            print(f"skipping product {product_id}: {error}")
            continue
        found += 1
    return found


def lookup_prices_strictly(catalog, product_ids):
    for product_id in product_ids:
        # no try/except: a failed step ends the whole sequence
        product = yield catalog.fetch_product(product_id)
        yield catalog.fetch_price(product)
    return len(product_ids)


def report(value, finished):
    print(f"{value=!r} {finished=!r}")


async def main():
    config = SequencingConfig()
    configure_logging(config.log_level)
    catalog = ProductCatalog(MockHttpClient(latency_seconds=config.network_latency_seconds))

    with timer():
        await async_chain(lookup_prices, report, catalog, [1, 42, 2])
        # > value=Product(product_id=1, name='espresso machine') finished=False
        # > value=Price(amount=249.0, currency='EUR') finished=False
        # > skipping product 42: 404 for /products/42
        # > value=Product(product_id=2, name='milk frother') finished=False
        # > value=Price(amount=39.5, currency='EUR') finished=False
        # > value=2 finished=True

        try:
            await async_chain(lookup_prices_strictly, report, catalog, [1, 42, 2])
        except MockHttpError as error:
            print(f"lookup aborted: {error}")
        # > value=Product(product_id=1, name='espresso machine') finished=False
        # > value=Price(amount=249.0, currency='EUR') finished=False
        # > lookup aborted: 404 for /products/42

    # > elapsed time: 4.00 seconds


if __name__ == "__main__":
    import asyncio

    coroutine = main()
    asyncio.run(coroutine)
