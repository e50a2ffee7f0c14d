"""``scat`` command line: cat with syntax highlighting."""

from __future__ import annotations

import contextlib
import logging
import os
import sys
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler

from scat.core.config import ColorWhen, build_render_config, resolve_color
from scat.core.languages import normalize_language
from scat.core.selection import FileSpec, LineRange, parse_file_spec, parse_line_range_arg
from scat.core.theme import list_themes, resolve_theme
from scat.core.view import ViewRequest, needs_composition, view_buffer
from scat.output.terminal import TerminalSink, detect_color_system

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="scat",
    help="cat with syntax highlighting, line numbers, git change markers and visible whitespace.",
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)
console = Console(highlight=False)
err_console = Console(stderr=True, highlight=False)


def _configure_logging(verbose: int) -> None:
    default_level = getattr(logging, os.getenv("SCAT_LOG_LEVEL", "WARNING").upper(), logging.WARNING)
    level = default_level if verbose == 0 else logging.INFO if verbose == 1 else logging.DEBUG
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_time=False, show_path=False)],
        force=True,
    )


def _report(message: str) -> None:
    err_console.print(f"scat: {message}", markup=False, soft_wrap=True)


def _display_name(spec: FileSpec, stdin_name: str | None) -> str:
    if spec.is_stdin:
        return stdin_name or "-"
    return spec.path


def _silence_stdout() -> None:
    # Point stdout at devnull so the interpreter's final flush cannot raise again.
    with contextlib.suppress(OSError, ValueError):
        devnull = os.open(os.devnull, os.O_WRONLY)
        os.dup2(devnull, sys.stdout.fileno())


@app.command()
def view(
    files: Annotated[
        list[str] | None,
        typer.Argument(
            metavar="[FILE]...",
            help="Files to display (use '-' or omit for stdin). Append #L10-L20 to select lines.",
        ),
    ] = None,
    plain: Annotated[bool, typer.Option("--plain", "-p", help="Only show plain style, no decorations.")] = False,
    language: Annotated[
        str | None, typer.Option("--language", "-l", metavar="LANG", help="Force a specific language.")
    ] = None,
    theme: Annotated[
        str, typer.Option(envvar="SCAT_THEME", help="Color theme: auto, dark, light or a theme name.")
    ] = "auto",
    theme_light: Annotated[
        str | None, typer.Option(help="Theme for light backgrounds (used with --theme=auto/light).")
    ] = None,
    theme_dark: Annotated[
        str | None, typer.Option(help="Theme for dark backgrounds (used with --theme=auto/dark).")
    ] = None,
    line_numbers: Annotated[bool, typer.Option("--line-numbers", "-n", help="Show line numbers.")] = False,
    lines: Annotated[
        str | None, typer.Option(metavar="RANGE", help="Show only selected lines (e.g. 10-20, 10:20, 10,20, 10).")
    ] = None,
    color: Annotated[
        ColorWhen, typer.Option(case_sensitive=False, help="When to use colored output.")
    ] = ColorWhen.AUTO,
    file_headers: Annotated[bool, typer.Option("--file-headers", help="Show file headers between files.")] = False,
    file_name: Annotated[
        str | None, typer.Option(help="Name to display for stdin; also used for language detection.")
    ] = None,
    show_themes: Annotated[bool, typer.Option("--list-themes", help="List supported themes.")] = False,
    squeeze_blank: Annotated[
        bool, typer.Option("--squeeze-blank", "-s", help="Squeeze consecutive empty lines into one.")
    ] = False,
    squeeze_limit: Annotated[
        int | None, typer.Option(min=0, help="Maximum number of consecutive empty lines.")
    ] = None,
    style: Annotated[
        str | None,
        typer.Option(
            envvar="SCAT_STYLE",
            help="Style components: plain, full, numbers, changes, grid, rich (+/- prefix).",
        ),
    ] = None,
    show_all: Annotated[
        bool, typer.Option("--show-all", "-A", help="Show unprintable characters, keeping highlighting.")
    ] = False,
    unbuffered: Annotated[bool, typer.Option("--unbuffered", "-u", help="Flush output after every line.")] = False,
    verbose: Annotated[int, typer.Option("--verbose", "-v", count=True, help="Log more (-vv for debug).")] = 0,
) -> None:
    """Display files with syntax highlighting."""
    _configure_logging(verbose)

    if show_themes:
        for name in list_themes():
            console.print(name, markup=False)
        return

    stdout = sys.stdout
    try:
        language_override = normalize_language(language) if language else None
        global_range: LineRange | None = parse_line_range_arg(lines) if lines else None
        config = build_render_config(
            style=style,
            plain=plain,
            line_numbers=line_numbers,
            show_all=show_all,
            color=resolve_color(color, stdout),
            squeeze_blank=squeeze_blank,
            squeeze_limit=squeeze_limit,
        )
    except ValueError as exc:
        _report(str(exc))
        raise typer.Exit(1) from None

    had_error = False
    specs: list[FileSpec] = []
    for raw in files or ["-"]:
        try:
            specs.append(parse_file_spec(raw, global_range))
        except ValueError as exc:
            _report(str(exc))
            had_error = True

    sink = TerminalSink(
        stdout,
        resolve_theme(theme, theme_light, theme_dark),
        detect_color_system(stdout) if config.color else None,
    )
    logger.debug("Rendering %d file(s) with %s", len(specs), config)
    show_headers = file_headers and len(specs) > 1
    stdin_consumed = False

    try:
        for spec in specs:
            if show_headers:
                sink.write_header(_display_name(spec, file_name))
            if spec.is_stdin:
                if stdin_consumed:
                    continue
                stdin_consumed = True
                content = sys.stdin.buffer.read()
                request = ViewRequest(
                    content,
                    name=Path(file_name) if file_name else None,
                    line_range=spec.line_range,
                    language=language_override,
                )
            else:
                path = Path(spec.path)
                try:
                    content = path.read_bytes()
                except OSError as exc:
                    _report(f"{spec.path}: {exc.strerror or exc}")
                    had_error = True
                    continue
                request = ViewRequest(content, path=path, line_range=spec.line_range, language=language_override)

            if not needs_composition(request, config):
                sink.write_raw(content)
                continue
            for rendered in view_buffer(request, config):
                sink.write_line(rendered)
                if unbuffered:
                    sink.flush()
        sink.flush()
    except BrokenPipeError:
        _silence_stdout()
        raise typer.Exit(1) from None

    if had_error:
        raise typer.Exit(1)


def main() -> None:
    app()
