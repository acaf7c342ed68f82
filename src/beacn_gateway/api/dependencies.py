"""FastAPI dependency injection for shared application state."""

from ..core.config import Settings
from ..core.lighting import LightingController
from ..protocol.handler import DeviceActor


class AppState:
    """Holds shared application state instances.

    Created during app startup and accessed via FastAPI dependencies.
    """

    def __init__(self) -> None:
        self.settings: Settings | None = None
        self.actor: DeviceActor | None = None
        self.controller: LightingController | None = None


# Global app state singleton
app_state = AppState()


def get_controller() -> LightingController:
    """Get the lighting controller instance."""
    assert app_state.controller is not None, "App not initialized"
    return app_state.controller
