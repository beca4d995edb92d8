"""
Application factory for the kiosk API.

Builds the FastAPI application, wires the service objects (payment adapter,
PrintNode client, emailer, notification sink) onto ``app.state`` and mounts
the routers. Only the routes of the active payment provider are mounted.

Tests call ``create_app`` with fakes for any of the service objects.
"""

import logging
import uuid
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from . import config
from .payments import PaymentAdapter, PaymentProvider, get_payment_adapter, resolve_provider
from .routes import (
    admin_menu_router,
    admin_print_router,
    admin_settings_router,
    orders_router,
    public_router,
    square_router,
    stripe_router,
)
from .services.email_service import OrderEmailer
from .services.notifications import LoggingSink, NotificationSink
from .services.printing import PrintNodeClient

logger = logging.getLogger(__name__)


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Middleware that adds a unique request ID to each request.
    The ID is available in request.state.request_id and returned in X-Request-ID header.
    """

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id
        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


def create_app(
    payment_provider: Optional[str] = None,
    payment_adapter: Optional[PaymentAdapter] = None,
    printer: Optional[PrintNodeClient] = None,
    emailer: Optional[OrderEmailer] = None,
    sink: Optional[NotificationSink] = None,
) -> FastAPI:
    """
    Create a FastAPI application.

    Args:
        payment_provider: "stripe" or "square" (defaults to PAYMENT_PROVIDER).
                          Ignored when payment_adapter is given.
        payment_adapter: Pre-built adapter (tests pass a fake)
        printer: PrintNode client
        emailer: Order notification emailer
        sink: Receives side-effect results from order creation

    Returns:
        Configured FastAPI application
    """
    if payment_adapter is None:
        payment_adapter = get_payment_adapter(resolve_provider(payment_provider))
    provider = payment_adapter.provider

    logger.info("Creating FastAPI application (payments: %s)", provider.value)

    app = FastAPI(
        title="Kiosk API",
        description=f"{config.RESTAURANT_NAME} self-service ordering kiosk",
        version="1.0.0",
        openapi_tags=[
            {"name": "Public", "description": "Health, pricing and menu"},
            {"name": "Orders", "description": "Order creation and lookup"},
            {"name": "Admin - Menu", "description": "Admin endpoints for menu management"},
            {"name": "Admin - Settings", "description": "Admin endpoints for kiosk settings"},
        ],
    )

    app.state.payment_adapter = payment_adapter
    app.state.printer = printer or PrintNodeClient()
    app.state.emailer = emailer or OrderEmailer()
    app.state.sink = sink or LoggingSink()

    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(Exception, unhandled_exception_handler)

    app.include_router(public_router)
    app.include_router(orders_router)
    if provider == PaymentProvider.SQUARE:
        app.include_router(square_router)
    else:
        app.include_router(stripe_router)
    app.include_router(admin_menu_router)
    app.include_router(admin_settings_router)
    app.include_router(admin_print_router)

    logger.info("Application created successfully")
    return app


def run_server(
    host: str = "0.0.0.0",
    port: int = 3001,
    reload: bool = False,
) -> None:
    """
    Run the API with uvicorn.

    Args:
        host: Host to bind to
        port: Port to run on
        reload: Enable auto-reload for development
    """
    import uvicorn

    logger.info("Starting kiosk API on %s:%d", host, port)
    uvicorn.run("kiosk_api.main:app", host=host, port=port, reload=reload)
