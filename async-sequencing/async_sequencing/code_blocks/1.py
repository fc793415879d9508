# Style 1: nested callbacks.
#
# Every call takes a callback that runs later, once the (mocked) network answers.
# A callback receives (error, result): exactly one of them is not None.
# The second request can only be issued from inside the first callback,
# so each further step nests one level deeper.
from async_sequencing.config import SequencingConfig
from async_sequencing.logging import configure_logging
from async_sequencing.task import MockHttpClient, ProductCatalog, describe
from async_sequencing.timeit import timer

import asyncio


async def main():
    config = SequencingConfig()
    configure_logging(config.log_level)
    catalog = ProductCatalog(MockHttpClient(latency_seconds=config.network_latency_seconds))

    # Callbacks know nothing about "main", so we need a way to learn that
    # the innermost one has run. A future is the smallest such signal.
    lookup_finished = asyncio.get_running_loop().create_future()

    with timer():

        def on_product(error, product):
            if error is not None:
                lookup_finished.set_exception(error)
                return

            def on_price(error, price):
                if error is not None:
                    lookup_finished.set_exception(error)
                    return
                print(describe(product, price))
                lookup_finished.set_result(price)

            catalog.fetch_price_with_callback(product, on_price)

        catalog.fetch_product_with_callback(1, on_product)
        await lookup_finished
        # > espresso machine costs 249.00 EUR

    # > elapsed time: 1.00 seconds


if __name__ == "__main__":
    import asyncio

    coroutine = main()
    asyncio.run(coroutine)
