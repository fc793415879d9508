import asyncio
import logging
from collections.abc import Callable, Mapping
from typing import Any

import pydantic

logger = logging.getLogger(__name__)

DEFAULT_ROUTES: dict[str, dict[str, Any]] = {
    "/products/1": {"product_id": 1, "name": "espresso machine"},
    "/products/1/price": {"amount": 249.0, "currency": "EUR"},
    "/products/2": {"product_id": 2, "name": "milk frother"},
    "/products/2/price": {"amount": 39.5, "currency": "EUR"},
}


class MockHttpError(Exception):
    def __init__(self, status: int, path: str) -> None:
        super().__init__(f"{status} for {path}")
        self.status = status
        self.path = path


class BuildStepError(Exception):
    pass


class Product(pydantic.BaseModel):
    product_id: pydantic.NonNegativeInt
    name: str


class Price(pydantic.BaseModel):
    amount: pydantic.NonNegativeFloat
    currency: str = "EUR"


def describe(product: Product, price: Price) -> str:
    return f"{product.name} costs {price.amount:.2f} {price.currency}"


class MockHttpClient:
    """Pretends to talk to a shop API.

    Every request takes ``latency_seconds`` and answers from ``routes``.
    Paths listed in ``failures`` answer with that status code instead, and
    unknown paths answer 404.
    """

    def __init__(
        self,
        latency_seconds: float = 0.5,
        routes: Mapping[str, Mapping[str, Any]] | None = None,
        failures: Mapping[str, int] | None = None,
    ) -> None:
        self.latency_seconds = pydantic.TypeAdapter(pydantic.NonNegativeFloat).validate_python(
            latency_seconds
        )
        self.routes = dict(DEFAULT_ROUTES if routes is None else routes)
        self.failures = dict(failures or {})
        self.requests: list[str] = []

    def _respond(self, path: str) -> dict[str, Any]:
        if path in self.failures:
            raise MockHttpError(self.failures[path], path)
        if path not in self.routes:
            raise MockHttpError(404, path)
        return dict(self.routes[path])

    async def get(self, path: str) -> dict[str, Any]:
        self.requests.append(path)
        await asyncio.sleep(self.latency_seconds)
        return self._respond(path)

    def get_with_callback(
        self,
        path: str,
        callback: Callable[[Exception | None, dict[str, Any] | None], None],
    ) -> None:
        """Node-style variant of ``get``: ``callback(error, payload)`` runs on the loop later."""
        self.requests.append(path)

        def _deliver() -> None:
            try:
                payload = self._respond(path)
            except MockHttpError as exc:
                callback(exc, None)
                return
            callback(None, payload)

        asyncio.get_running_loop().call_later(self.latency_seconds, _deliver)


class ProductCatalog:
    def __init__(self, http: MockHttpClient) -> None:
        self.http = http

    async def fetch_product(self, product_id: int) -> Product:
        payload = await self.http.get(f"/products/{product_id}")
        return Product.model_validate(payload)

    async def fetch_price(self, product: Product) -> Price:
        payload = await self.http.get(f"/products/{product.product_id}/price")
        return Price.model_validate(payload)

    def fetch_product_with_callback(
        self,
        product_id: int,
        callback: Callable[[Exception | None, Product | None], None],
    ) -> None:
        self.http.get_with_callback(
            f"/products/{product_id}", _validating(Product, callback)
        )

    def fetch_price_with_callback(
        self,
        product: Product,
        callback: Callable[[Exception | None, Price | None], None],
    ) -> None:
        self.http.get_with_callback(
            f"/products/{product.product_id}/price", _validating(Price, callback)
        )


def _validating(model: type[pydantic.BaseModel], callback: Callable) -> Callable:
    def _on_response(error: Exception | None, payload: dict[str, Any] | None) -> None:
        if error is not None:
            callback(error, None)
            return
        try:
            validated = model.model_validate(payload)
        except pydantic.ValidationError as exc:
            callback(exc, None)
            return
        callback(None, validated)

    return _on_response


@pydantic.validate_call
async def build_step(
    step_name: str,
    time_to_execute_in_seconds: pydantic.NonNegativeFloat,
    fail_with: str | None = None,
) -> str:
    """One step of a fake asset build: waits, then returns its own name.

    Raises:
        BuildStepError: When ``fail_with`` is given, with that message.
    """
    await asyncio.sleep(time_to_execute_in_seconds)
    if fail_with is not None:
        raise BuildStepError(fail_with)
    logger.info(
        f"processed step with {step_name=!r} {time_to_execute_in_seconds=!r}",
        extra={"step_name": step_name},
    )
    return step_name
