# Copyright 2025 Dimensional Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import asyncio
import inspect
import types
from typing import Optional, Union, get_args, get_origin

import typer

from rocs_client.core.global_config import GlobalConfig
from rocs_client.motor.limits import LimitCache
from rocs_client.motor.motor import Motor
from rocs_client.robot.discovery import get_robot_type
from rocs_client.transport.control import ControlChannel
from rocs_client.transport.types import ControlRequest
from rocs_client.utils.logging_config import setup_exception_handler

main = typer.Typer()


def create_dynamic_callback():
    fields = GlobalConfig.model_fields

    params = [
        inspect.Parameter("ctx", inspect.Parameter.POSITIONAL_OR_KEYWORD, annotation=typer.Context),
    ]

    # One CLI option per GlobalConfig field
    for field_name, field_info in fields.items():
        field_type = field_info.annotation

        # Unwrap Optional[T]
        if get_origin(field_type) in (Union, types.UnionType):
            inner_types = get_args(field_type)
            if len(inner_types) == 2 and type(None) in inner_types:
                actual_type = next(t for t in inner_types if t != type(None))
            else:
                actual_type = field_type
        else:
            actual_type = field_type

        cli_option_name = field_name.replace("_", "-")

        if actual_type is bool:
            param = inspect.Parameter(
                field_name,
                inspect.Parameter.KEYWORD_ONLY,
                default=typer.Option(
                    None,  # None means use the model's default if not provided
                    f"--{cli_option_name}/--no-{cli_option_name}",
                    help=f"Override {field_name} in GlobalConfig",
                ),
                annotation=Optional[bool],  # noqa: UP045
            )
        else:
            param = inspect.Parameter(
                field_name,
                inspect.Parameter.KEYWORD_ONLY,
                default=typer.Option(
                    None,  # None means use the model's default if not provided
                    f"--{cli_option_name}",
                    help=f"Override {field_name} in GlobalConfig",
                ),
                annotation=Optional[actual_type],  # noqa: UP045
            )
        params.append(param)

    def callback(**kwargs) -> None:
        ctx = kwargs.pop("ctx")
        overrides = {k: v for k, v in kwargs.items() if v is not None}
        ctx.obj = GlobalConfig().model_copy(update=overrides)
        setup_exception_handler()

    callback.__signature__ = inspect.Signature(params)

    return callback


main.callback()(create_dynamic_callback())


@main.command()
def show_config(ctx: typer.Context) -> None:
    """Show current configuration status."""
    config: GlobalConfig = ctx.obj

    for field_name, value in config.model_dump().items():
        typer.echo(f"{field_name}: {value}")


@main.command()
def robot_type(ctx: typer.Context) -> None:
    """Print the type the robot reports (human, car, ...)."""
    config: GlobalConfig = ctx.obj
    typer.echo(asyncio.run(get_robot_type(config=config)))


async def _fetch_limits(config: GlobalConfig) -> LimitCache:
    channel = ControlChannel(config.connect_option().base_url, config.request_timeout)
    cache = LimitCache()
    try:
        await cache.load(lambda: channel.request(ControlRequest("GET", "/robot/motor/limit/list")))
    finally:
        await channel.aclose()
    return cache


@main.command()
def limits(ctx: typer.Context) -> None:
    """List the joint limits reported by the robot."""
    config: GlobalConfig = ctx.obj
    cache = asyncio.run(_fetch_limits(config))
    if not cache.loaded:
        typer.echo("No joint limits available", err=True)
        raise typer.Exit(code=1)

    for limit in cache:
        typer.echo(f"{limit.no:>4} {limit.orientation:<8} [{limit.min_angle}, {limit.max_angle}]")


async def _move_joint(config: GlobalConfig, no: str, orientation: str, angle: float, wait: float):
    async with Motor(config=config) as motor:
        pending = motor.move_joint([{"no": no, "orientation": orientation, "angle": angle}])
        if pending is not None:
            await asyncio.wait_for(pending, wait)


@main.command()
def move_joint(
    ctx: typer.Context,
    no: str = typer.Argument(..., help="Joint number"),
    orientation: str = typer.Argument(..., help="Joint side, e.g. left, right or middle"),
    angle: float = typer.Argument(..., help="Target angle, clamped to the joint's limits"),
    wait: float = typer.Option(10.0, "--wait", help="Seconds to wait for limits and connection"),
) -> None:
    """Move a single joint, clamped to the limits reported by the robot."""
    config: GlobalConfig = ctx.obj
    asyncio.run(_move_joint(config, no, orientation, angle, wait))


if __name__ == "__main__":
    main()
