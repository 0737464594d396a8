from __future__ import annotations

import logging
from pathlib import Path

import msgspec
import typer

from . import __version__
from .config import ConfigError, RenderConfig, default_config_path, direction_from_name, load_config
from .font import Font
from .fonts import FontLibrary, FontNotFoundError, env_font_dirs
from .layout import layout_flag_names, parse_layout_spec
from .parser import FontFormatError, load
from .renderer import MissingGlyphError, Renderer

app = typer.Typer(add_completion=False)

logger = logging.getLogger(__name__)

_DIRECTIONS = ("auto", "left-to-right", "right-to-left")


class FontInfo(msgspec.Struct):
    name: str
    hardblank: str
    height: int
    baseline: int
    max_length: int
    old_layout: int
    comment_lines: int
    print_direction: str
    full_layout: int
    layout_flags: list[str]
    code_tag_count: int
    glyph_count: int


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _load_config(path: Path | None) -> tuple[RenderConfig, Path | None]:
    """Load the config and return it with the directory its relative paths resolve against."""
    cfg_path = path if path is not None else default_config_path()
    try:
        cfg = load_config(cfg_path)
    except ConfigError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1) from exc
    return cfg, cfg_path.parent if cfg_path is not None else None


def _font_dirs(config: RenderConfig, extra: list[Path] | None, config_dir: Path | None = None) -> list[Path]:
    return [*(extra or []), *config.font_paths(config_dir), *env_font_dirs()]


def _open_font(name: str, dirs: list[Path]) -> Font:
    path = Path(name)
    try:
        if path.is_file():
            logger.debug("loading font file %s", path)
            return load(path)
        library = FontLibrary.from_directories(dirs)
        return library.load(name)
    except FontNotFoundError as exc:
        searched = ", ".join(str(d) for d in dirs) or "no font directories"
        typer.echo(f"{exc} (searched: {searched})", err=True)
        raise typer.Exit(code=1) from exc
    except (FontFormatError, OSError) as exc:
        typer.echo(f"failed to load font {name!r}: {exc}", err=True)
        raise typer.Exit(code=1) from exc


def _parse_layout(text: str) -> int:
    try:
        return parse_layout_spec(text)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc


@app.command("render")
def cmd_render(
    text: list[str] = typer.Argument(..., help="text to render (words are joined with spaces)"),
    font: str | None = typer.Option(None, "--font", "-f", help="font name or path to a .flf file"),
    font_dir: list[Path] | None = typer.Option(None, "--font-dir", "-d", help="directory to search for fonts"),
    layout: str | None = typer.Option(None, "--layout", "-l", help="smush mode: integer or comma list of flag names"),
    direction: str | None = typer.Option(None, "--direction", help="auto, left-to-right or right-to-left"),
    skip_missing: bool = typer.Option(False, "--skip-missing", help="drop characters the font has no glyph for"),
    config: Path | None = typer.Option(None, "--config", help="path to figbanner.toml / .json"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="debug logging"),
) -> None:
    """Render text as a FIGlet banner."""
    _configure_logging(verbose)
    cfg, config_dir = _load_config(config)
    if direction is not None and direction not in _DIRECTIONS:
        raise typer.BadParameter(f"direction must be one of: {', '.join(_DIRECTIONS)}", param_hint="--direction")

    figfont = _open_font(font or cfg.font, _font_dirs(cfg, font_dir, config_dir))
    renderer = Renderer(
        font=figfont,
        smush_mode=_parse_layout(layout) if layout is not None else cfg.layout,
        print_direction=direction_from_name(direction or cfg.direction),
        on_missing="skip" if skip_missing else cfg.on_missing,
    )
    try:
        banner = renderer.render(" ".join(text))
    except MissingGlyphError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1) from exc
    typer.echo(banner)


@app.command("info")
def cmd_info(
    font: str = typer.Argument(..., help="font name or path to a .flf file"),
    font_dir: list[Path] | None = typer.Option(None, "--font-dir", "-d", help="directory to search for fonts"),
    as_json: bool = typer.Option(False, "--json", help="print JSON"),
    config: Path | None = typer.Option(None, "--config", help="path to figbanner.toml / .json"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="debug logging"),
) -> None:
    """Show FIGfont header metadata."""
    _configure_logging(verbose)
    cfg, config_dir = _load_config(config)
    figfont = _open_font(font, _font_dirs(cfg, font_dir, config_dir))
    info = FontInfo(
        name=Path(font).stem,
        hardblank=figfont.hardblank,
        height=figfont.height,
        baseline=figfont.baseline,
        max_length=figfont.max_length,
        old_layout=figfont.old_layout,
        comment_lines=figfont.comment_lines,
        print_direction=figfont.print_direction.label,
        full_layout=figfont.full_layout,
        layout_flags=layout_flag_names(figfont.full_layout),
        code_tag_count=figfont.code_tag_count,
        glyph_count=len(figfont),
    )
    if as_json:
        typer.echo(msgspec.json.format(msgspec.json.encode(info), indent=2).decode("utf-8"))
        return
    for key in info.__struct_fields__:
        value = getattr(info, key)
        if isinstance(value, list):
            value = ", ".join(value) if value else "none"
        typer.echo(f"{key}: {value}")


@app.command("fonts")
def cmd_fonts(
    font_dir: list[Path] | None = typer.Option(None, "--font-dir", "-d", help="directory to search for fonts"),
    config: Path | None = typer.Option(None, "--config", help="path to figbanner.toml / .json"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="debug logging"),
) -> None:
    """List fonts found in the font directories."""
    _configure_logging(verbose)
    cfg, config_dir = _load_config(config)
    dirs = _font_dirs(cfg, font_dir, config_dir)
    library = FontLibrary.from_directories(dirs)
    if not len(library):
        typer.echo("no fonts found", err=True)
        raise typer.Exit(code=1)
    for name in library.names():
        typer.echo(name)


@app.command("version")
def cmd_version() -> None:
    """Print the package version."""
    typer.echo(__version__)


def main(argv: list[str] | None = None) -> None:
    app(prog_name="figbanner", args=argv)


if __name__ == "__main__":
    main()
