"""Layer resize CLI application.

This module provides the command-line interface for resizing the active
layer of a layered document to a bounding box in pixels, inspecting layer
bounds, and configuration utilities.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any, Final, NoReturn

import typer
import yaml
from pydantic import ValidationError

from layerfit.controller import LayerResizer
from layerfit.host.document import AnchorPosition, LayeredDocument, ResampleMethod
from layerfit.host.editor import Editor
from layerfit.host.prompts import TyperPrompter
from layerfit.host.units import Preferences, RulerUnits
from layerfit.settings.user import UserSettings
from layerfit.utils.file import ensure_directory_exists

# ── CLI setup ────────────────────────────────────────────────────────────────
app = typer.Typer(
    help="Resize the active layer of a document to a bounding box in pixels",
    add_completion=False,
)
config_app = typer.Typer(help="Config helpers")
app.add_typer(config_app, name="config")

logger: Final = logging.getLogger(__name__)  # Will be "layerfit.cli"

# Options for the resize command
DOCUMENT_ARGUMENT = typer.Argument(None, help="Document manifest (YAML)", dir_okay=False)
CONFIG_OPTION = typer.Option(None, "--config", "-c", exists=True, dir_okay=False)
LAYER_OPTION = typer.Option(None, "--layer", "-l", help="Layer to resize (default: active layer)")
WIDTH_OPTION = typer.Option(None, "--width", "-w", help="Target width in pixels ('' to leave out)")
HEIGHT_OPTION = typer.Option(None, "--height", "-H", help="Target height in pixels ('' to leave out)")
CONSTRAIN_OPTION = typer.Option(None, "--constrain", help="Keep the aspect ratio [true|false]")
PROMPT_OPTION = typer.Option(False, "--prompt", "-p", help="Ask for width, height and constrain")
ANCHOR_OPTION = typer.Option(None, "--anchor", "-a", help="Point of the layer that stays in place")
RESAMPLE_OPTION = typer.Option(None, "--resample", "-r", help="Resampling filter")
OUTPUT_OPTION = typer.Option(
    None, "--output", "-o", dir_okay=False, help="Save to this manifest instead of in place"
)
EXPORT_OPTION = typer.Option(None, "--export", "-e", dir_okay=False, help="Write the flattened PNG")
DEBUG_OPTION = typer.Option(False, "--debug", help="Enable debug logging")
INSPECT_ARGUMENT = typer.Argument(..., exists=True, dir_okay=False, help="Document manifest (YAML)")
UNITS_OPTION = typer.Option(RulerUnits.PIXELS, "--units", "-u", help="Ruler units for bounds")
DST_ARGUMENT = typer.Argument(..., help="Output config.yaml")


def _fail(message: str) -> NoReturn:
    typer.secho(message, fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)


@app.command()
def resize(
    document: Path | None = DOCUMENT_ARGUMENT,
    layer: str | None = LAYER_OPTION,
    width: str | None = WIDTH_OPTION,
    height: str | None = HEIGHT_OPTION,
    constrain: str | None = CONSTRAIN_OPTION,
    prompt: bool = PROMPT_OPTION,
    anchor: AnchorPosition | None = ANCHOR_OPTION,
    resample: ResampleMethod | None = RESAMPLE_OPTION,
    config: Path | None = CONFIG_OPTION,
    output: Path | None = OUTPUT_OPTION,
    export: Path | None = EXPORT_OPTION,
    debug: bool = DEBUG_OPTION,
) -> None:
    """Resize a layer to fit WIDTH x HEIGHT pixels and save the document."""
    try:
        settings = UserSettings.load(config)
    except (FileNotFoundError, RuntimeError) as exc:
        _fail(str(exc))

    editor = Editor(Preferences(ruler_units=settings.ruler_units))
    if document is not None:
        try:
            opened = editor.open(document)
        except (FileNotFoundError, RuntimeError) as exc:
            _fail(str(exc))
        if layer is not None:
            try:
                opened.select_layer(layer)
            except KeyError:
                _fail(f"No layer named '{layer}' in {document}")

    resizer = LayerResizer(
        editor,
        settings,
        TyperPrompter(),
        width=width,
        height=height,
        constrain=constrain,
        prompt_user=True if prompt else None,
        anchor=anchor,
        resample=resample,
        debug=debug,
    )
    outcome = resizer.run()
    if outcome is None:
        raise typer.Exit(code=1)

    active = editor.active_document
    saved = active.save(output)
    if export is not None:
        ensure_directory_exists(export.parent)
        active.flatten().save(export, format="PNG")
        logger.debug("Exported composite to %s", export)

    typer.secho(outcome.describe(), fg=typer.colors.GREEN)
    typer.echo(f"Saved {saved}")


@app.command()
def inspect(
    document: Path = INSPECT_ARGUMENT,
    units: RulerUnits = UNITS_OPTION,
) -> None:
    """List the layers of a document with their bounds."""
    try:
        doc = LayeredDocument.load(document, preferences=Preferences(ruler_units=units))
    except (FileNotFoundError, RuntimeError) as exc:
        _fail(str(exc))

    typer.echo(f"{doc.name}: {doc.width}x{doc.height} px @ {doc.resolution:g} ppi")
    active = doc.active_layer if doc.layers else None
    # Top layer first, like a layers panel
    for item in reversed(doc.layers):
        marker = "*" if item is active else " "
        flags = []
        if item.is_background:
            flags.append("background")
        if not item.visible:
            flags.append("hidden")
        left, top, right, bottom = item.bounds
        suffix = f" [{', '.join(flags)}]" if flags else ""
        typer.echo(
            f"{marker} {item.name}: left={left} top={top} right={right} bottom={bottom}{suffix}"
        )


# ───────────────────────── config sub-commands ───────────────────────────────
@config_app.command("validate")
def validate_config(file: Path):
    """Validate a YAML config file against the schema."""
    try:
        UserSettings.load(file)
        typer.echo("✅ Config valid")
    except (FileNotFoundError, RuntimeError) as exc:
        typer.secho(str(exc), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc


@config_app.command("wizard")
def wizard(dst: Path = DST_ARGUMENT):
    """Interactive prompt to create a config file."""
    typer.echo("Interactive config builder - press Enter for defaults.")

    while True:
        data: dict[str, Any] = {
            "prompt_user": typer.prompt("Prompt for values on every run [true|false]", default="false"),
            "default_width": typer.prompt("Default width in pixels (none to leave out)", default="80"),
            "default_height": typer.prompt("Default height in pixels (none to leave out)", default="80"),
            "default_constrain": typer.prompt("Constrain proportions [true|false]", default="true"),
            "anchor": typer.prompt("Anchor", default=AnchorPosition.MIDDLECENTER.value),
            "resample": typer.prompt("Resampling filter", default=ResampleMethod.BICUBIC.value),
            "ruler_units": typer.prompt("Editor ruler units", default=RulerUnits.INCHES.value),
        }
        for key in ("default_width", "default_height"):
            if str(data[key]).strip().lower() in ("", "none"):
                data[key] = None
        try:
            cfg = UserSettings(**data)
            break  # valid → exit loop
        except ValidationError as err:
            typer.secho("\nConfig error(s):", fg=typer.colors.RED, err=True)
            for e in err.errors():
                typer.secho(f"  • {e['loc'][0]} - {e['msg']}", fg=typer.colors.RED, err=True)
            typer.echo("Please re-enter the values.\n")

    dst.write_text(yaml.safe_dump(cfg.model_dump(mode="json"), sort_keys=False), encoding="utf-8")
    typer.secho(f"Config written to {dst}", fg=typer.colors.GREEN)


# ───────────────────────── module entrypoint ────────────────────────────────
if __name__ == "__main__":
    try:
        app()
    except KeyboardInterrupt:
        sys.exit(0)
