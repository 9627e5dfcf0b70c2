"""Error types raised by the shipping rate pipeline."""

from __future__ import annotations


class ShippingError(Exception):
    """Base error with an API error code and an HTTP status."""

    code: str = "SHIPPING_ERROR"
    status_code: int = 500

    def __init__(self, message: str, *, code: str | None = None, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self) -> dict[str, str]:
        return {"error": self.code, "message": self.message}


class ShippingDataMissingError(ShippingError):
    """Shipping-critical data is missing or invalid. No fallback is attempted."""

    code = "SHIPPING_DATA_MISSING"
    status_code = 400


class NoSuitableBoxError(ShippingDataMissingError):
    """No box in the catalog can hold the requested items."""


class RequestTooLargeError(ShippingError):
    """More units in one quote than the packer is allowed to handle."""

    code = "REQUEST_TOO_LARGE"
    status_code = 413


class NotFoundError(ShippingError):
    code = "NOT_FOUND"
    status_code = 404


class RateProviderError(ShippingError):
    """The external rate provider failed (transport, timeout or HTTP error)."""

    code = "EXTERNAL_SERVICE_ERROR"
    status_code = 502


class ConfigurationError(ShippingError):
    """Required service configuration (e.g. a provider API key) is missing."""

    code = "SERVICE_MISCONFIGURED"
    status_code = 503


class CurrencyConversionError(ValueError):
    """Raised when an amount cannot be converted between two currencies."""
