from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, List, Optional

import typer
from dotenv import load_dotenv
from rich import print, print_json

from .config import AppConfig, load_config
from .keyframes import snapshot_scene
from .sampler import sample_at, sample_widget
from .scene import add_element, find_element, new_element, new_group
from .spline import solve_spline
from .types import GlobalKeyframe, Point, Widget, Workspace
from .utils import round_half_up

app = typer.Typer(add_completion=False, no_args_is_help=True)

CONFIG_ENV = "OVERLAY_ANIMATOR_CONFIG"


def _load_workspace(path: str) -> Workspace:
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Document not found: {path}")
    data = json.loads(p.read_text(encoding="utf-8"))
    if "widgets" in data:
        return Workspace.model_validate(data)
    # a bare widget export
    return Workspace(name=data.get("name", "Imported"), widgets=[Widget.model_validate(data)])


def _pick_widget(workspace: Workspace, widget_id: Optional[str]) -> Widget:
    if not workspace.widgets:
        raise typer.BadParameter("document contains no widgets")
    if widget_id is None:
        return workspace.widgets[0]
    widget = workspace.find_widget(widget_id)
    if widget is None:
        raise typer.BadParameter(f"unknown widget id: {widget_id}")
    return widget


def _settings(config: Optional[str]) -> Optional[AppConfig]:
    path = config or os.getenv(CONFIG_ENV)
    return load_config(path) if path else None


def _rounded(value: Any, precision: Optional[int]) -> Any:
    if precision is None:
        return value
    if isinstance(value, float):
        return round_half_up(value, precision)
    if isinstance(value, dict):
        return {k: _rounded(v, precision) for k, v in value.items()}
    if isinstance(value, list):
        return [_rounded(v, precision) for v in value]
    return value


@app.command()
def sample_document(
    output: str = typer.Option("./overlay.json", help="Where to write the demo workspace JSON"),
):
    """Write a small workspace with one animated widget."""
    widget = Widget.from_preset("alert", name="Demo Alert")
    badge = add_element(widget, new_element("shape", name="Badge", x=20, y=40, width=100, height=100,
                                            shape_type="circle", border_radius=9999))
    group = add_element(widget, new_group(name="Caption", x=140, y=40, width=420, height=100))
    add_element(widget, new_element("text", name="Title", x=0, y=20, content="New follower!"), group.id)

    timeline = widget.ensure_timeline()
    timeline.duration = 3.0
    timeline.keyframes.append(GlobalKeyframe(time=0.0, element_states=snapshot_scene(widget.elements)))
    badge.x, badge.opacity, badge.fill = 460.0, 0.2, "#f59e0b"
    timeline.keyframes.append(
        GlobalKeyframe(time=1.5, easing="ease-out", element_states=snapshot_scene(widget.elements))
    )
    badge.x, badge.rotation = 20.0, 360.0
    timeline.keyframes.append(GlobalKeyframe(time=3.0, element_states=snapshot_scene(widget.elements)))
    # the base state is what the scene shows when the timeline is idle
    badge.x, badge.opacity, badge.rotation, badge.fill = 20.0, 1.0, 0.0, "#3b82f6"

    workspace = Workspace(name="Demo", widgets=[widget])
    Path(output).write_text(json.dumps(workspace.to_document(), indent=2), encoding="utf-8")
    print(f"[bold green]Wrote sample document[/bold green] to {output}")


@app.command()
def evaluate(
    document: Optional[str] = typer.Argument(None, help="Workspace or widget JSON"),
    time: float = typer.Option(0.0, help="Query time in seconds"),
    widget_id: Optional[str] = typer.Option(None, help="Widget to evaluate (default: first)"),
    element_id: Optional[str] = typer.Option(None, help="Only print this element"),
    precision: Optional[int] = typer.Option(None, help="Round numbers to this many decimals"),
    config: Optional[str] = typer.Option(None, help="Path to YAML config"),
    prefer_config: bool = typer.Option(False, help="If true, config overrides CLI when set"),
):
    """Print the effective element state at one point on the timeline."""
    load_dotenv()
    cfg = _settings(config)

    def choose(val, cfg_val):
        if prefer_config and cfg_val is not None:
            return cfg_val
        return val if val is not None else cfg_val

    document = choose(document, cfg.document if cfg else None)
    if not document:
        raise typer.BadParameter("document is required (as argument or via --config)")
    widget_id = choose(widget_id, cfg.widget_id if cfg else None)
    precision = choose(precision, cfg.precision if cfg else None)

    widget = _pick_widget(_load_workspace(document), widget_id)
    elements = sample_at(widget, time)
    if element_id is not None:
        found = find_element(elements, element_id)
        if found is None:
            raise typer.BadParameter(f"unknown element id: {element_id}")
        payload: Any = found.to_document()
    else:
        payload = [el.to_document() for el in elements]
    print_json(data=_rounded(payload, precision))


@app.command()
def frames(
    document: Optional[str] = typer.Argument(None, help="Workspace or widget JSON"),
    fps: Optional[int] = typer.Option(None, help="Samples per second (default 30)"),
    output: Optional[str] = typer.Option(None, help="Write frames JSON here (default ./frames.json)"),
    widget_id: Optional[str] = typer.Option(None, help="Widget to sample (default: first)"),
    precision: Optional[int] = typer.Option(None, help="Round numbers to this many decimals"),
    config: Optional[str] = typer.Option(None, help="Path to YAML config"),
    prefer_config: bool = typer.Option(False, help="If true, config overrides CLI when set"),
):
    """Sample a widget over its whole timeline."""
    load_dotenv()
    cfg = _settings(config)

    def choose(val, cfg_val):
        if prefer_config and cfg_val is not None:
            return cfg_val
        return val if val is not None else cfg_val

    document = choose(document, cfg.document if cfg else None)
    if not document:
        raise typer.BadParameter("document is required (as argument or via --config)")
    fps = int(choose(fps, cfg.fps if cfg else None) or 30)
    if fps <= 0:
        raise typer.BadParameter("fps must be positive")
    output = choose(output, cfg.output if cfg else None) or "./frames.json"
    widget_id = choose(widget_id, cfg.widget_id if cfg else None)
    precision = choose(precision, cfg.precision if cfg else None)

    widget = _pick_widget(_load_workspace(document), widget_id)
    sampled = sample_widget(widget, fps=fps)
    payload = _rounded([f.to_document() for f in sampled], precision)
    Path(output).write_text(json.dumps(payload, indent=2), encoding="utf-8")
    print(f"[bold green]Done.[/bold green] Wrote {len(sampled)} frames to {output}")


@app.command()
def spline(
    points: List[str] = typer.Argument(..., help="Points as X,Y pairs"),
    tension: float = typer.Option(1.0, help="Control point scale"),
):
    """Print the smooth SVG path through the given points."""
    parsed: List[Point] = []
    for raw in points:
        try:
            x, y = raw.split(",")
            parsed.append(Point(x=float(x), y=float(y)))
        except ValueError:
            raise typer.BadParameter(f"expected X,Y but got {raw!r}") from None
    typer.echo(solve_spline(parsed, tension))


if __name__ == "__main__":
    app()
