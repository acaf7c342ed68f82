"""Command-line access to device parameters without the HTTP server."""

import argparse
import asyncio
import json
import logging
import sys

from beacn_gateway.core.config import Settings, setup_logging
from beacn_gateway.core.errors import GatewayError
from beacn_gateway.core.lighting import LightingController, format_value, parse_value
from beacn_gateway.main import create_actor
from beacn_gateway.protocol.catalog import ParameterGroup, get_parameter, parameters_in_group
from beacn_gateway.protocol.constants import TYPE_NAMES

logger = logging.getLogger(__name__)


def cmd_list(args: argparse.Namespace) -> int:
    for spec in parameters_in_group(ParameterGroup.LED):
        limits = ""
        if spec.choices:
            limits = ", ".join(f"{k}={v}" for k, v in spec.choices.items())
        elif spec.min_value is not None:
            limits = f"{spec.min_value:g}..{spec.max_value:g}"
        print(f"{spec.name:<20} 0x{spec.group:02X}/{spec.child_id:<3} {TYPE_NAMES[spec.data_type]:<7} {limits}")
    return 0


async def _with_device(settings: Settings, action) -> int:
    actor = create_actor(settings)
    await actor.start()
    try:
        await actor.wait_ready()
    except GatewayError as e:
        logger.error(f"Device unavailable: {e}")
        return 1

    controller = LightingController(actor, request_timeout=settings.request_timeout)
    try:
        await action(controller)
    except (GatewayError, TimeoutError) as e:
        logger.error(f"Device request failed: {e!r}")
        return 1
    finally:
        await actor.shutdown(timeout=settings.request_timeout)
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Read and write Beacn Mic LED settings")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command")

    sub.add_parser("list", help="List known parameters")

    get = sub.add_parser("get", help="Read one parameter")
    get.add_argument("name", help="Parameter name (see 'list')")

    set_ = sub.add_parser("set", help="Write one parameter")
    set_.add_argument("name", help="Parameter name (see 'list')")
    set_.add_argument("value", help="New value; colours as #rrggbb")

    sub.add_parser("dump", help="Read every LED parameter as JSON")

    args = parser.parse_args(argv)

    settings = Settings()
    setup_logging("DEBUG" if args.verbose else settings.log_level)

    if args.command == "list":
        return cmd_list(args)

    if args.command in ("get", "set"):
        try:
            spec = get_parameter(args.name)
        except KeyError as e:
            parser.error(str(e.args[0]))

    if args.command == "get":

        async def action(controller: LightingController) -> None:
            value = await controller.read(spec.name)
            print(format_value(spec, value))

    elif args.command == "set":
        try:
            new_value = parse_value(spec, args.value)
            spec.validate(new_value)
        except ValueError as e:
            parser.error(str(e))

        async def action(controller: LightingController) -> None:
            value = await controller.write(spec.name, new_value)
            print(format_value(spec, value))

    elif args.command == "dump":

        async def action(controller: LightingController) -> None:
            state = await controller.snapshot()
            print(json.dumps(state.model_dump(), indent=2))

    else:
        parser.print_help()
        return 1

    return asyncio.run(_with_device(settings, action))


if __name__ == "__main__":
    sys.exit(main())
