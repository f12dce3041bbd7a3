"""CLI entry point using Typer."""

from __future__ import annotations

import json
import math
from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import typer

if TYPE_CHECKING:
    from poseforge.models.animation import PoseAnimation

app = typer.Typer(
    name="poseforge",
    help="Keyframed character pose animation editor.",
    no_args_is_help=False,
)


def _load_or_exit(path: Path) -> PoseAnimation:
    from poseforge.codec import DecodeError, load_animation

    try:
        return load_animation(path)
    except DecodeError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None


@app.command()
def new(
    output: Annotated[
        Path | None,
        typer.Argument(help="File or directory to write (default: exports dir)"),
    ] = None,
    length: Annotated[
        float | None,
        typer.Option("--length", "-l", min=0.001, help="Animation length in seconds"),
    ] = None,
) -> None:
    """Create a starter animation with one empty keyframe."""
    from poseforge.codec import save_animation
    from poseforge.config import load_config
    from poseforge.models.animation import default_animation

    config = load_config()
    animation = default_animation(length or config.editor.default_length)
    target = output or config.exports_dir / config.editor.export_filename
    save_path = save_animation(animation, target)
    typer.echo(f"Created {animation.length:g}s animation at {save_path}")


@app.command()
def info(
    path: Annotated[Path, typer.Argument(help="Animation JSON file or directory")],
) -> None:
    """Summarise an animation file."""
    from poseforge.bones import is_scalar_channel

    animation = _load_or_exit(path)
    typer.echo(f"Length: {animation.length:g}s")
    typer.echo(f"Keyframes: {len(animation.keyframes)}")
    for i, keyframe in enumerate(animation.keyframes):
        names = ", ".join(keyframe.pose) or "-"
        typer.echo(f"  [{i}] t={keyframe.time:.2f}  {names}")
    channels = animation.channel_names()
    typer.echo(f"Channels: {len(channels)}")
    for name in channels:
        kind = "scalar" if is_scalar_channel(name) else "rotation"
        typer.echo(f"  {name} ({kind})")


@app.command()
def sample(
    path: Annotated[Path, typer.Argument(help="Animation JSON file or directory")],
    time: Annotated[
        float | None,
        typer.Option("--time", "-t", help="Evaluate at this time only"),
    ] = None,
    step: Annotated[
        float,
        typer.Option("--step", "-s", min=0.001, help="Sampling step when no --time"),
    ] = 1.0,
) -> None:
    """Print evaluated poses as JSON lines."""
    from poseforge.codec import dump_pose
    from poseforge.config import load_config
    from poseforge.engine.interpolator import EvaluationStats, ShapeMismatchError, evaluate

    config = load_config()
    animation = _load_or_exit(path)

    if time is not None:
        times = [time]
    else:
        count = math.floor(animation.length / step + 1e-9)
        times = [round(i * step, 6) for i in range(count + 1)]

    stats = EvaluationStats()
    for t in times:
        try:
            pose = evaluate(animation, t, policy=config.editor.mismatch_policy, stats=stats)
        except ShapeMismatchError as e:
            typer.echo(f"Error: {e}", err=True)
            raise typer.Exit(1) from None
        typer.echo(json.dumps({"time": t, "pose": dump_pose(pose)}))

    if stats.shape_mismatches:
        channels = ", ".join(sorted(stats.mismatched_channels))
        typer.echo(
            f"Warning: held {stats.shape_mismatches} shape mismatch(es)"
            f" in {channels}",
            err=True,
        )


@app.command()
def encode(
    path: Annotated[Path, typer.Argument(help="Animation JSON file or directory")],
) -> None:
    """Print the base64 share payload of an animation file."""
    from poseforge.codec import encode as encode_animation

    typer.echo(encode_animation(_load_or_exit(path)))


@app.command()
def decode(
    payload: Annotated[str, typer.Argument(help="Base64 animation payload")],
    output: Annotated[
        Path,
        typer.Option("--output", "-o", help="File or directory to write"),
    ] = Path("animation.json"),
) -> None:
    """Decode a share payload into an animation file."""
    from poseforge.codec import DecodeError, save_animation
    from poseforge.codec import decode as decode_animation

    try:
        animation = decode_animation(payload)
    except DecodeError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None
    typer.echo(f"Wrote {save_animation(animation, output)}")


@app.command()
def share(
    path: Annotated[Path, typer.Argument(help="Animation JSON file or directory")],
    base_url: Annotated[
        str | None,
        typer.Option("--base-url", "-u", help="Editor URL to attach the payload to"),
    ] = None,
) -> None:
    """Print a share link carrying the animation."""
    from poseforge.config import load_config
    from poseforge.share import build_share_url

    config = load_config()
    animation = _load_or_exit(path)
    url = build_share_url(
        animation,
        base_url or config.share.base_url,
        param=config.share.animation_param,
    )
    typer.echo(url)


@app.command("open-link")
def open_link(
    url: Annotated[str, typer.Argument(help="Share link")],
    output: Annotated[
        Path,
        typer.Option("--output", "-o", help="File or directory to write"),
    ] = Path("animation.json"),
) -> None:
    """Resolve the animation a share link starts with and save it."""
    from poseforge.codec import DecodeError, save_animation
    from poseforge.config import load_config
    from poseforge.share import animation_from_url

    config = load_config()
    try:
        animation = animation_from_url(
            url,
            default_length=config.editor.default_length,
            animation_param=config.share.animation_param,
            length_param=config.share.length_param,
        )
    except DecodeError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None
    typer.echo(f"Wrote {save_animation(animation, output)}")


@app.command()
def stream(
    path: Annotated[
        Path | None,
        typer.Argument(help="Animation to play (default: starter animation)"),
    ] = None,
    port: Annotated[int | None, typer.Option("--port", "-p", help="WebSocket port")] = None,
    no_autoplay: Annotated[
        bool, typer.Option("--no-autoplay", help="Wait for a play command")
    ] = False,
) -> None:
    """Stream evaluated poses over WebSocket for an external renderer."""
    import asyncio

    from poseforge.config import load_config
    from poseforge.engine.interpolator import PoseInterpolator
    from poseforge.engine.store import AnimationStore
    from poseforge.models.animation import default_animation
    from poseforge.pose_server import PoseStreamServer

    config = load_config()
    animation = (
        _load_or_exit(path) if path else default_animation(config.editor.default_length)
    )
    store = AnimationStore(
        animation, interpolator=PoseInterpolator(config.editor.mismatch_policy),
    )
    server = PoseStreamServer(
        store,
        host=config.stream.host,
        port=port or config.stream.port,
        tick_rate=config.playback.tick_rate,
    )
    typer.echo(f"Streaming poses at ws://{server.host}:{server.port}")
    typer.echo("Press Ctrl+C to stop")
    try:
        asyncio.run(server.run(autoplay=not no_autoplay))
    except KeyboardInterrupt:
        typer.echo("\nStopped.")


@app.command()
def edit(
    path: Annotated[
        Path | None,
        typer.Argument(help="Animation file to open"),
    ] = None,
    link: Annotated[
        str | None,
        typer.Option("--link", help="Open the animation carried by a share link"),
    ] = None,
) -> None:
    """Launch the interactive editor."""
    from poseforge.app import PoseForgeApp
    from poseforge.codec import DecodeError
    from poseforge.config import load_config
    from poseforge.share import animation_from_url

    config = load_config()
    animation = None
    if path is not None:
        animation = _load_or_exit(path)
    elif link is not None:
        try:
            animation = animation_from_url(
                link,
                default_length=config.editor.default_length,
                animation_param=config.share.animation_param,
                length_param=config.share.length_param,
            )
        except DecodeError as e:
            typer.echo(f"Error: {e}", err=True)
            raise typer.Exit(1) from None

    PoseForgeApp(animation=animation, config=config, source=path).run()


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: Annotated[
        bool, typer.Option("--version", "-v", help="Show version")
    ] = False,
    verbose: Annotated[
        bool, typer.Option("--verbose", help="Log debug output to stderr")
    ] = False,
) -> None:
    """PoseForge - keyframed character pose animation editor."""
    if version:
        from poseforge import __version__

        typer.echo(f"poseforge {__version__}")
        raise typer.Exit()
    if verbose:
        import logging

        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    if ctx.invoked_subcommand is None:
        # Default to the editor when no subcommand
        from poseforge.app import PoseForgeApp

        PoseForgeApp().run()
