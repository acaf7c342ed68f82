"""Main application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from beacn_gateway import __version__
from beacn_gateway.api.dependencies import app_state
from beacn_gateway.api.routes import router as api_router
from beacn_gateway.core.config import Settings, setup_logging
from beacn_gateway.core.errors import GatewayError
from beacn_gateway.core.lighting import LightingController
from beacn_gateway.core.models import HealthResponse
from beacn_gateway.protocol.handler import DeviceActor
from beacn_gateway.usb.connection import UsbConnection

logger = logging.getLogger(__name__)


def create_actor(settings: Settings) -> DeviceActor:
    """Build a device actor for the configured USB device."""
    connection = UsbConnection(
        vendor_id=settings.vendor_id,
        product_id=settings.product_id,
        interface=settings.interface,
        alt_setting=settings.alt_setting,
        timeout=settings.transfer_timeout,
    )
    return DeviceActor(connection, queue_size=settings.queue_size)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: startup and shutdown."""
    settings = app_state.settings or Settings()
    app_state.settings = settings

    setup_logging(settings.log_level)
    logger.info(f"Starting Beacn Gateway v{__version__}")

    # Initialize components
    app_state.actor = create_actor(settings)
    app_state.controller = LightingController(app_state.actor, request_timeout=settings.request_timeout)

    # Device must be ready before anything else starts
    await app_state.actor.start()
    try:
        await app_state.actor.wait_ready()
    except GatewayError as e:
        logger.error(f"Device unavailable, refusing to start: {e}")
        raise

    try:
        state = await app_state.controller.snapshot()
        logger.info("Loaded LED state from device")
        logger.debug("%s", state.model_dump())
    except (GatewayError, TimeoutError) as e:
        logger.warning(f"Initial state load failed: {e}")

    yield

    # Shutdown
    logger.info("Shutting down...")
    if app_state.actor is not None and app_state.actor.connected:
        await app_state.actor.shutdown(timeout=settings.request_timeout)


app = FastAPI(
    title="Beacn Gateway",
    description="Local REST API for the Beacn Mic LED ring",
    version=__version__,
    lifespan=lifespan,
)

app.include_router(api_router)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": "Beacn Gateway",
        "version": __version__,
        "status": "running",
    }


@app.get("/health", response_model=HealthResponse)
async def health():
    """Health check endpoint."""
    actor = app_state.actor

    if actor is None:
        return HealthResponse(
            status="unhealthy",
            device_connected=False,
            actor_state="idle",
        )

    connected = actor.connected

    return HealthResponse(
        status="healthy" if connected else "unhealthy",
        device_connected=connected,
        actor_state=actor.state.value,
        stats=actor.stats,
    )


def main():
    """Run the application (for CLI entry point)."""
    import uvicorn

    settings = Settings()
    setup_logging(settings.log_level)
    app_state.settings = settings

    uvicorn.run(app, host=settings.api_host, port=settings.api_port)


if __name__ == "__main__":
    main()
