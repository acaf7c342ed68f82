"""Data models for Beacn gateway."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from beacn_gateway.protocol.codec import RGB


class ColourModel(BaseModel):
    """RGB colour as exposed by the API."""

    red: int = Field(..., ge=0, le=255)
    green: int = Field(..., ge=0, le=255)
    blue: int = Field(..., ge=0, le=255)

    @classmethod
    def from_rgb(cls, value: RGB) -> "ColourModel":
        return cls(red=value.red, green=value.green, blue=value.blue)

    def to_rgb(self) -> RGB:
        return RGB(red=self.red, green=self.green, blue=self.blue)


class LedState(BaseModel):
    """Snapshot of every LED setting read from the device."""

    mode: int = 0
    colour1: ColourModel = Field(default_factory=lambda: ColourModel(red=0, green=0, blue=0))
    colour2: ColourModel = Field(default_factory=lambda: ColourModel(red=0, green=0, blue=0))
    speed: int = 0
    brightness: int = 0
    meter_source: int = 0
    meter_sensitivity: float = 0.0
    mute_mode: int = 0
    mute_colour: ColourModel = Field(default_factory=lambda: ColourModel(red=0, green=0, blue=0))
    suspend_mode: int = 0
    suspend_brightness: int = 0


# ============================================================================
# API Request/Response Models
# ============================================================================


class ParameterInfo(BaseModel):
    """A catalog entry together with its current device value."""

    name: str = Field(..., description="Parameter name")
    group: int = Field(..., ge=0, le=0xFF, description="Group id")
    child_id: int = Field(..., ge=0, le=0xFFFF, description="Child id within the group")
    type: str = Field(..., description="Value type (uint32, int32, float, rgb)")
    description: str = Field("", description="Human-readable label")
    value: Any = Field(..., description="Current value; colours as #rrggbb")
    min: float | None = Field(None, description="Minimum allowed value")
    max: float | None = Field(None, description="Maximum allowed value")
    choices: dict[int, str] | None = Field(None, description="Allowed values and their labels")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "brightness",
                "group": 1,
                "child_id": 5,
                "type": "int32",
                "description": "Ring brightness",
                "value": 80,
                "min": 0,
                "max": 100,
                "choices": None,
            }
        }
    )


class ParametersResponse(BaseModel):
    """Response model for GET /api/parameters."""

    timestamp: datetime = Field(default_factory=datetime.now, description="Time the values were read")
    parameters: dict[str, ParameterInfo] = Field(..., description="Parameters keyed by name")


class ParameterSetRequest(BaseModel):
    """Request model for POST /api/parameters/{name}."""

    value: Any = Field(..., description="New value; colours as #rrggbb or {red, green, blue}")

    model_config = ConfigDict(json_schema_extra={"example": {"value": "#ff8000"}})


class ParameterSetResponse(BaseModel):
    """Response model for successful parameter set operation."""

    success: bool = Field(True, description="Operation success status")
    name: str = Field(..., description="Parameter name")
    old_value: Any = Field(..., description="Value before the write")
    new_value: Any = Field(..., description="Value confirmed by the device")
    timestamp: datetime = Field(default_factory=datetime.now, description="Operation timestamp")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "success": True,
                "name": "brightness",
                "old_value": 40,
                "new_value": 80,
                "timestamp": "2026-01-13T10:30:00",
            }
        }
    )


class StateResponse(BaseModel):
    """Response model for GET /api/state."""

    timestamp: datetime = Field(default_factory=datetime.now, description="Time the snapshot was read")
    state: LedState


class ErrorResponse(BaseModel):
    """Response model for errors."""

    success: bool = Field(False, description="Operation success status")
    error: str = Field(..., description="Error message")
    detail: str | None = Field(None, description="Additional error details")
    timestamp: datetime = Field(default_factory=datetime.now, description="Error timestamp")


class HealthResponse(BaseModel):
    """Response model for health check."""

    status: str = Field(..., description="Health status (healthy/unhealthy)")
    device_connected: bool = Field(..., description="Whether the device actor holds an open session")
    actor_state: str = Field(..., description="Device actor lifecycle state")
    stats: dict[str, int] = Field(default_factory=dict, description="Request counters")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "status": "healthy",
                "device_connected": True,
                "actor_state": "ready",
                "stats": {"fetches": 24, "sets": 3, "faults": 0},
            }
        }
    )
