"""CLI entry point for the plane segmentation robot interface.

Usage:
    planeseg-ri run-examples                 # Process the configured dataset presets
    planeseg-ri run-examples -n 0 -n 2       # Process presets 0 and 2
    planeseg-ri process-file cloud.pcd --origin 0 0 1 --look-dir 1 0 0
    planeseg-ri presets                      # List dataset presets
    planeseg-ri palette                      # Show the block color palette
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from planeseg_ri.core.contracts import InterfaceConfig
from planeseg_ri.core.logging import setup_logging

app = typer.Typer(name="planeseg-ri", help="Planar segmentation robot interface")
console = Console()

DEFAULT_CONFIG = Path("configs/interface.yaml")
DEFAULT_OUTPUT = Path("output")


def _load_config(config: Path) -> InterfaceConfig:
    from planeseg_ri.core.pipeline_runner import load_interface_config

    if not config.exists():
        console.print(f"[yellow]Config {config} not found, using defaults[/yellow]")
        return InterfaceConfig()
    return load_interface_config(config)


def _build_interface(cfg: InterfaceConfig):
    from planeseg_ri.core.pipeline_runner import build_fitter
    from planeseg_ri.interface import RobotInterface

    try:
        fitter = build_fitter(cfg)
    except (ValueError, ImportError) as exc:
        console.print(f"[red]Cannot load block fitter: {exc}[/red]")
        raise typer.Exit(1)
    return RobotInterface(fitter, config=cfg)


def _save_outputs(output, output_dir: Path, stem: str, plot: bool) -> None:
    from planeseg_ri.utils.io import write_colored_cloud, write_result_json

    hull_cloud = output.visualization.hull_cloud
    if hull_cloud.num_points:
        write_colored_cloud(output_dir / f"{stem}_hulls.ply", hull_cloud.points, hull_cloud.colors)
    write_result_json(output.result, output_dir / f"{stem}_blocks.json")
    if plot:
        from planeseg_ri.utils.visualization import plot_hulls

        plot_hulls(
            output.visualization,
            cloud_points=output.received_cloud.points,
            title=stem,
            save_path=output_dir / f"{stem}_hulls.png",
        )
    console.print(
        f"[green]{stem}:[/green] {output.result.num_blocks} blocks, "
        f"{output.visualization.hull_markers.num_segments} hull segments"
    )


@app.command()
def run_examples(
    config: Path = typer.Option(DEFAULT_CONFIG, help="Interface config path"),
    index: Optional[list[int]] = typer.Option(None, "--index", "-n", help="Preset index (repeatable)"),
    output_dir: Path = typer.Option(DEFAULT_OUTPUT, help="Where hull clouds and block JSON go"),
    plot: bool = typer.Option(False, help="Also save a matplotlib rendering per preset"),
) -> None:
    """Process recorded dataset presets through the configured fitter."""
    setup_logging()
    from planeseg_ri.core.pipeline_runner import run_examples as run_presets

    if not config.exists():
        console.print(f"[red]Config {config} not found[/red]")
        raise typer.Exit(1)
    try:
        outputs = run_presets(config, list(index) if index else None)
    except (ValueError, ImportError) as exc:
        console.print(f"[red]Run failed: {exc}[/red]")
        raise typer.Exit(1)

    for i, output in outputs:
        if output is None:
            console.print(f"[yellow]Preset {i} skipped[/yellow]")
            continue
        _save_outputs(output, output_dir, f"preset_{i:02d}", plot)
    console.print("[green]Finished![/green]")


@app.command()
def process_file(
    path: Path = typer.Argument(..., help="Cloud file (.pcd or .ply)"),
    origin: tuple[float, float, float] = typer.Option((0.0, 0.0, 0.0), help="Sensor origin x y z"),
    look_dir: tuple[float, float, float] = typer.Option((1.0, 0.0, 0.0), help="Look direction x y z"),
    config: Path = typer.Option(DEFAULT_CONFIG, help="Interface config path"),
    output_dir: Path = typer.Option(DEFAULT_OUTPUT, help="Where hull clouds and block JSON go"),
    plot: bool = typer.Option(False, help="Also save a matplotlib rendering"),
) -> None:
    """Segment one cloud file from an explicit viewpoint."""
    setup_logging()
    cfg = _load_config(config)
    interface = _build_interface(cfg)

    loaded = interface.dataset_import.load_file(path, origin, look_dir)
    if loaded is None:
        console.print(f"[red]Could not process {path}[/red]")
        raise typer.Exit(1)
    output = interface.process_cloud(loaded.cloud, origin=loaded.origin, look_dir=loaded.look_dir)
    _save_outputs(output, output_dir, path.stem, plot)


@app.command()
def presets(config: Path = typer.Option(DEFAULT_CONFIG, help="Interface config path")) -> None:
    """List dataset presets."""
    cfg = _load_config(config)
    table = Table(title=f"Dataset presets (data root: {cfg.dataset.data_root})")
    table.add_column("#", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("File", style="green")
    table.add_column("Origin", style="yellow")
    table.add_column("Look dir", style="yellow")
    table.add_column("Default run", style="dim")

    for i, preset in enumerate(cfg.dataset.presets):
        table.add_row(
            str(i),
            preset.name,
            str(preset.path),
            ", ".join(f"{c:.3f}" for c in preset.origin),
            ", ".join(f"{c:.3f}" for c in preset.look_dir),
            "Y" if i in cfg.run_examples else "-",
        )
    console.print(table)


@app.command()
def palette(config: Path = typer.Option(DEFAULT_CONFIG, help="Interface config path")) -> None:
    """Show the colors assigned to blocks 0, 1, 2, ..."""
    from planeseg_ri.utils.palette import ColorPalette

    cfg = _load_config(config)
    colors = cfg.hull_visualization.palette
    try:
        pal = ColorPalette(colors) if colors is not None else ColorPalette()
    except ValueError as exc:
        console.print(f"[red]Invalid palette: {exc}[/red]")
        raise typer.Exit(1)

    table = Table(title=f"Block palette ({len(pal)} colors, cycles after block {len(pal) - 1})")
    table.add_column("Block", style="dim")
    table.add_column("RGB (0-1)")
    table.add_column("RGB (0-255)")
    table.add_column("Swatch")
    for i in range(len(pal)):
        r, g, b = pal.color_for_255(i).tolist()
        table.add_row(
            str(i),
            ", ".join(f"{c:.3f}" for c in pal.color_for(i)),
            f"{r}, {g}, {b}",
            f"[on rgb({r},{g},{b})]      [/]",
        )
    console.print(table)


if __name__ == "__main__":
    app()
