"""Unit tests for the mocked shop API and build steps."""

from __future__ import annotations

import asyncio

import pydantic
import pytest

from async_sequencing.task import (
    BuildStepError,
    MockHttpClient,
    MockHttpError,
    Price,
    Product,
    ProductCatalog,
    build_step,
    describe,
)


@pytest.mark.asyncio
async def test_catalog_fetches_product_and_price(catalog: ProductCatalog, http: MockHttpClient) -> None:
    product = await catalog.fetch_product(1)
    price = await catalog.fetch_price(product)

    assert product == Product(product_id=1, name="espresso machine")
    assert price == Price(amount=249.0, currency="EUR")
    assert describe(product, price) == "espresso machine costs 249.00 EUR"
    assert http.requests == ["/products/1", "/products/1/price"]


@pytest.mark.asyncio
async def test_unknown_path_answers_404(catalog: ProductCatalog) -> None:
    with pytest.raises(MockHttpError) as excinfo:
        await catalog.fetch_product(42)
    assert excinfo.value.status == 404
    assert excinfo.value.path == "/products/42"


@pytest.mark.asyncio
async def test_configured_failures_take_precedence() -> None:
    http = MockHttpClient(latency_seconds=0, failures={"/products/1/price": 503})
    catalog = ProductCatalog(http)
    product = await catalog.fetch_product(1)

    with pytest.raises(MockHttpError, match="503 for /products/1/price"):
        await catalog.fetch_price(product)


@pytest.mark.asyncio
async def test_callback_variant_delivers_error_or_result(catalog: ProductCatalog) -> None:
    loop = asyncio.get_running_loop()
    found = loop.create_future()
    missing = loop.create_future()

    catalog.fetch_product_with_callback(2, lambda error, product: found.set_result((error, product)))
    catalog.fetch_product_with_callback(42, lambda error, product: missing.set_result((error, product)))

    error, product = await found
    assert error is None
    assert product == Product(product_id=2, name="milk frother")

    error, product = await missing
    assert isinstance(error, MockHttpError)
    assert product is None


@pytest.mark.asyncio
async def test_callback_variant_reports_invalid_payloads() -> None:
    http = MockHttpClient(latency_seconds=0, routes={"/products/7/price": {"amount": -1}})
    catalog = ProductCatalog(http)
    delivered = asyncio.get_running_loop().create_future()

    catalog.fetch_price_with_callback(
        Product(product_id=7, name="broken"),
        lambda error, price: delivered.set_result((error, price)),
    )

    error, price = await delivered
    assert isinstance(error, pydantic.ValidationError)
    assert price is None


def test_negative_latency_is_rejected() -> None:
    with pytest.raises(pydantic.ValidationError):
        MockHttpClient(latency_seconds=-1)


@pytest.mark.asyncio
async def test_build_step_returns_its_name() -> None:
    assert await build_step("scss", 0) == "scss"


@pytest.mark.asyncio
async def test_build_step_can_fail() -> None:
    with pytest.raises(BuildStepError, match="network-down"):
        await build_step("scss", 0, fail_with="network-down")


@pytest.mark.asyncio
async def test_build_step_validates_arguments() -> None:
    with pytest.raises(pydantic.ValidationError):
        await build_step("js", -1)
