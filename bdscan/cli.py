"""bdscan CLI: Blu-ray playlist and stream scanner."""

from __future__ import annotations

import logging

import typer
from rich.console import Console
from rich.logging import RichHandler

from bdscan.config import ENV_CHECK_CLIPS, ENV_SKIP_DUPLICATES, ScanOptions
from bdscan.errors import NotADiscError
from bdscan.export import export_json, text_report
from bdscan.export.text_report import playlist_report
from bdscan.model import DiscScan
from bdscan.scan import scan_disc

app = typer.Typer(name="bdscan", help="Blu-ray playlist and stream scanner")
console = Console(stderr=True)


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _scan(bdmv: str, check_clips: bool, skip_duplicates: bool, verbose: bool) -> DiscScan:
    """Common helper: configure logging, scan the disc, exit 1 if it is not one."""
    _setup_logging(verbose)
    options = ScanOptions(check_clip_files=check_clips, skip_duplicates=skip_duplicates)
    try:
        with console.status("[bold]Parsing BDMV playlists…"):
            return scan_disc(bdmv, options)
    except NotADiscError as e:
        console.print(f"[red]Error:[/red] {e}")
        console.print("Doesn't look like a valid BD/BDMV path or the files are corrupted")
        raise typer.Exit(1)


_CHECK_CLIPS = typer.Option(
    True,
    "--check-clips/--no-check-clips",
    envvar=ENV_CHECK_CLIPS,
    help="Reject playlists referencing missing STREAM/*.M2TS files",
)
_SKIP_DUPLICATES = typer.Option(
    True,
    "--skip-duplicates/--keep-duplicates",
    envvar=ENV_SKIP_DUPLICATES,
    help="Drop playlists structurally identical to an earlier one",
)
_VERBOSE = typer.Option(False, "--verbose", "-v", help="Debug logging")


@app.command()
def scan(
    bdmv: str = typer.Argument(..., help="Path to BDMV directory"),
    output: str = typer.Option(None, "-o", "--output", help="Output JSON file path"),
    pretty: bool = typer.Option(True, "--pretty/--compact"),
    stdout: bool = typer.Option(False, "--stdout", help="Print JSON to stdout"),
    check_clips: bool = _CHECK_CLIPS,
    skip_duplicates: bool = _SKIP_DUPLICATES,
    verbose: bool = _VERBOSE,
):
    """Decode every playlist and emit structured JSON."""
    result = _scan(bdmv, check_clips, skip_duplicates, verbose)
    json_str = export_json(result, path=output, pretty=pretty)
    if stdout or output is None:
        typer.echo(json_str)
    elif output:
        console.print(f"[green]Wrote:[/green] {output}")


@app.command()
def report(
    bdmv: str = typer.Argument(..., help="Path to BDMV directory"),
    check_clips: bool = _CHECK_CLIPS,
    skip_duplicates: bool = _SKIP_DUPLICATES,
    verbose: bool = _VERBOSE,
):
    """Print playlists, their files and streams, longest first."""
    result = _scan(bdmv, check_clips, skip_duplicates, verbose)
    typer.echo(text_report(result))


@app.command(name="playlist")
def playlist_cmd(
    bdmv: str = typer.Argument(..., help="Path to BDMV directory"),
    name: str = typer.Argument(..., help="Playlist file name, e.g. 00001 or 00001.mpls"),
    check_clips: bool = _CHECK_CLIPS,
    skip_duplicates: bool = _SKIP_DUPLICATES,
    verbose: bool = _VERBOSE,
):
    """Show one playlist in detail."""
    result = _scan(bdmv, check_clips, skip_duplicates, verbose)
    match = None
    for pl in result.playlists:
        if pl.source_file_name in (name, name + ".mpls"):
            match = pl
            break
    if match is None:
        console.print(f"[red]Playlist not found:[/red] {name}")
        raise typer.Exit(1)

    for line in playlist_report(match):
        typer.echo(line)
    typer.echo("")
    for i, item in enumerate(match.items):
        angles = f"  angles={item.angle_count}" if item.is_multi_angle else ""
        typer.echo(f"  [{i}] {item.clip_id}  {item.duration_ms}ms  start={item.start_time}{angles}")


if __name__ == "__main__":
    app()
