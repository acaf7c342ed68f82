"""API route handlers."""

from fastapi import APIRouter, Depends, HTTPException

from beacn_gateway.api.dependencies import get_controller
from beacn_gateway.core.errors import (
    ActorStoppedError,
    ConfirmationMismatchError,
    GatewayError,
    ProtocolViolationError,
    TransportError,
)
from beacn_gateway.core.lighting import LightingController, describe, format_value
from beacn_gateway.core.models import (
    ErrorResponse,
    ParameterInfo,
    ParameterSetRequest,
    ParameterSetResponse,
    ParametersResponse,
    StateResponse,
)
from beacn_gateway.protocol.catalog import ParameterGroup, get_parameter, parameters_in_group


router = APIRouter(prefix="/api")

_FAULT_RESPONSES = {
    502: {"model": ErrorResponse},
    503: {"model": ErrorResponse},
    504: {"model": ErrorResponse},
}


def _fault_to_http(error: BaseException) -> HTTPException:
    """Map a device fault to an HTTP error."""
    if isinstance(error, TimeoutError):
        return HTTPException(status_code=504, detail="Device did not reply in time")
    if isinstance(error, ActorStoppedError):
        return HTTPException(status_code=503, detail=str(error))
    if isinstance(error, ConfirmationMismatchError):
        return HTTPException(status_code=409, detail=f"Device did not accept the value: {error}")
    if isinstance(error, ProtocolViolationError):
        return HTTPException(status_code=502, detail=f"Protocol violation: {error}")
    if isinstance(error, TransportError):
        return HTTPException(status_code=504, detail=f"USB transfer failed: {error}")
    return HTTPException(status_code=500, detail=str(error))


def _require_connected(controller: LightingController) -> None:
    if not controller.actor.connected:
        raise HTTPException(status_code=503, detail="Device not connected")


@router.get("/parameters", response_model=ParametersResponse, responses=_FAULT_RESPONSES)
async def get_parameters(controller: LightingController = Depends(get_controller)):
    """Read every catalog parameter from the device."""
    _require_connected(controller)

    try:
        values = await controller.read_group(ParameterGroup.LED)
    except (GatewayError, TimeoutError) as e:
        raise _fault_to_http(e) from None

    parameters = {}
    for spec in parameters_in_group(ParameterGroup.LED):
        parameters[spec.name] = ParameterInfo(**describe(spec, values[spec.name]))

    return ParametersResponse(parameters=parameters)


@router.get(
    "/parameters/{name}",
    response_model=ParameterInfo,
    responses={404: {"model": ErrorResponse}, **_FAULT_RESPONSES},
)
async def get_parameter_value(name: str, controller: LightingController = Depends(get_controller)):
    """Read a single parameter from the device."""
    _require_connected(controller)

    try:
        spec = get_parameter(name)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Parameter not found: {name}") from None

    try:
        value = await controller.read(spec.name)
    except (GatewayError, TimeoutError) as e:
        raise _fault_to_http(e) from None

    return ParameterInfo(**describe(spec, value))


@router.post(
    "/parameters/{name}",
    response_model=ParameterSetResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        **_FAULT_RESPONSES,
    },
)
async def set_parameter(
    name: str,
    request: ParameterSetRequest,
    controller: LightingController = Depends(get_controller),
):
    """Set a parameter value and return the value the device confirmed."""
    _require_connected(controller)

    try:
        spec = get_parameter(name)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Parameter not found: {name}") from None

    try:
        old_value = await controller.read(spec.name)
        new_value = await controller.write(spec.name, request.value)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from None
    except (GatewayError, TimeoutError) as e:
        raise _fault_to_http(e) from None

    return ParameterSetResponse(
        success=True,
        name=spec.name,
        old_value=format_value(spec, old_value),
        new_value=format_value(spec, new_value),
    )


@router.get("/state", response_model=StateResponse, responses=_FAULT_RESPONSES)
async def get_state(controller: LightingController = Depends(get_controller)):
    """Read the full LED state snapshot."""
    _require_connected(controller)

    try:
        state = await controller.snapshot()
    except (GatewayError, TimeoutError) as e:
        raise _fault_to_http(e) from None

    return StateResponse(state=state)
