"""Exception-to-response mapping for the Storefront API."""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.exceptions import ObjectNotFoundError, ValidationError

from storefront.checkout.errors import CheckoutError, UpstreamPaymentFailure


def install_error_handlers(app: FastAPI) -> None:
    """Register handlers so domain failures reach clients as typed payloads."""

    @app.exception_handler(CheckoutError)
    async def checkout_error(request: Request, exc: CheckoutError):  # noqa: ARG001
        status_code = 502 if isinstance(exc, UpstreamPaymentFailure) else 400
        return JSONResponse(status_code=status_code, content=exc.to_payload())

    @app.exception_handler(ValidationError)
    async def validation_error(request: Request, exc: ValidationError):  # noqa: ARG001
        return JSONResponse(status_code=400, content={"errors": exc.messages})

    @app.exception_handler(ObjectNotFoundError)
    async def not_found(request: Request, exc: ObjectNotFoundError):  # noqa: ARG001
        return JSONResponse(status_code=404, content={"error": str(exc)})
