"""FastAPI endpoint for shipping rates."""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any, Optional

from fastapi import Cookie, Depends, FastAPI, Request
from fastapi.responses import JSONResponse

from parcel_optimizer.catalog import InMemoryCatalogStore
from parcel_optimizer.config import load_settings
from parcel_optimizer.errors import ShippingError
from parcel_optimizer.io.schemas import ShippingRatesResponse, ShippingRequest
from parcel_optimizer.providers.shippo import ShippoRateProvider
from parcel_optimizer.shipping import ShippingService

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Parcel Optimizer API",
    description="Box packing and shipping rate shopping service",
)


@lru_cache(maxsize=1)
def get_shipping_service() -> ShippingService:
    """Build the service once from environment settings."""
    settings = load_settings()
    provider = ShippoRateProvider(
        api_key=settings.shippo_api_key or "",
        base_url=settings.shippo_base_url,
        timeout=settings.shippo_timeout,
    )
    store = (
        InMemoryCatalogStore.from_json(settings.catalog_path)
        if settings.catalog_path
        else InMemoryCatalogStore()
    )
    return ShippingService(settings, provider, catalog_store=store)


@app.exception_handler(ShippingError)
async def shipping_error_handler(request: Request, exc: ShippingError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{exc.code} on {request.url.path}: {exc.message}")
    else:
        logger.warning(f"{exc.code} on {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.post("/shipping/rates", response_model=ShippingRatesResponse)
def shipping_rates(
    body: ShippingRequest,
    cart_id_cookie: Optional[str] = Cookie(default=None, alias="cartId"),
    service: ShippingService = Depends(get_shipping_service),
) -> dict[str, Any]:
    """
    Quote shipping options for a destination.

    Input (request body):
        {
            "addressTo": {"name": "...", "street1": "...", "city": "...",
                          "state": "QC", "zip": "H1H 1H1", "country": "CA"},
            "items": [{"variantId": "v1", "quantity": 2}],
            "cartId": "optional, the cartId cookie wins"
        }

    Returns:
        {"rates": [...]} with at most one standard and one express option
    """
    cart_id = cart_id_cookie or body.cart_id
    rates = service.get_shipping_rates(cart_id, body)
    return {"rates": [r.model_dump(exclude_none=True) for r in rates]}


@app.get("/health")
async def health() -> dict[str, Any]:
    return {"status": "ok"}
