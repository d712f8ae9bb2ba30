"""CLI main entry point using Typer."""

import logging
import webbrowser
from pathlib import Path
from typing import Optional

import typer
import uvicorn
from rich.console import Console

from markdeck.compiler import ThemeNotFoundError
from markdeck.config.models import VALID_THEMES, EmojiOptions, MathOptions, RenderOptions, ServerConfig
from markdeck.config.settings import DEFAULT_HOST, DEFAULT_LOG_LEVEL, DEFAULT_PORT, DEFAULT_THEME

app = typer.Typer(
    name="markdeck",
    help="Compile Markdown into slide deck HTML and CSS",
    add_completion=False,
)

console = Console()


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _build_options(
    html: bool,
    no_math: bool,
    math_font_path: Optional[str],
    no_math_font_rewrite: bool,
    no_emoji_shortcode: bool,
    no_emoji_unicode: bool,
    no_inline_svg: bool,
) -> RenderOptions:
    if math_font_path and no_math_font_rewrite:
        raise ValueError("--math-font-path and --no-math-font-rewrite are mutually exclusive")

    math = None
    if not no_math:
        math = MathOptions(font_path=False if no_math_font_rewrite else math_font_path)

    return RenderOptions(
        html=html,
        math=math,
        emoji=EmojiOptions(shortcode=not no_emoji_shortcode, unicode=not no_emoji_unicode),
        inline_svg=not no_inline_svg,
    )


@app.command()
def render(
    source: Path = typer.Argument(
        ...,
        help="Markdown deck to render",
        exists=True,
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output file (defaults to the source name with .html or .css)",
    ),
    theme: str = typer.Option(
        DEFAULT_THEME,
        "--theme",
        "-t",
        help=f"Deck theme ({'/'.join(VALID_THEMES)})",
    ),
    html: bool = typer.Option(
        False,
        "--html",
        help="Allow raw HTML in the Markdown",
    ),
    no_math: bool = typer.Option(
        False,
        "--no-math",
        help="Disable math typesetting",
    ),
    math_font_path: Optional[str] = typer.Option(
        None,
        "--math-font-path",
        help="Serve math web fonts from this path instead of the CDN",
    ),
    no_math_font_rewrite: bool = typer.Option(
        False,
        "--no-math-font-rewrite",
        help="Keep the math engine's own font URLs",
    ),
    no_emoji_shortcode: bool = typer.Option(
        False,
        "--no-emoji-shortcode",
        help="Leave :shortcode: text alone",
    ),
    no_emoji_unicode: bool = typer.Option(
        False,
        "--no-emoji-unicode",
        help="Leave unicode emoji characters alone",
    ),
    no_inline_svg: bool = typer.Option(
        False,
        "--no-inline-svg",
        help="Disable inline SVG slide wrapping",
    ),
    css_only: bool = typer.Option(
        False,
        "--css-only",
        help="Write only the composed stylesheet",
    ),
    log_level: str = typer.Option(
        DEFAULT_LOG_LEVEL,
        "--log-level",
        "-l",
        help="Logging level (DEBUG/INFO/WARNING/ERROR)",
    ),
) -> None:
    """Render a Markdown deck to a standalone HTML file."""
    _configure_logging(log_level)

    try:
        options = _build_options(
            html,
            no_math,
            math_font_path,
            no_math_font_rewrite,
            no_emoji_shortcode,
            no_emoji_unicode,
            no_inline_svg,
        )
    except ValueError as e:
        console.print(f"[red]✗[/red] Configuration error: {e}", style="bold")
        raise typer.Exit(code=2)

    from markdeck.exporter import DeckExporter
    from markdeck.renderer import DeckRenderer

    exporter = DeckExporter(DeckRenderer(options), theme=theme)

    try:
        written = exporter.export_file(source, output, css_only=css_only)
    except FileNotFoundError as e:
        console.print(f"[red]✗[/red] {e}", style="bold")
        raise typer.Exit(code=3)
    except ThemeNotFoundError:
        console.print(f"[red]✗[/red] Unknown theme: {theme}", style="bold")
        raise typer.Exit(code=2)
    except OSError as e:
        console.print(f"[red]✗[/red] Error: {e}", style="bold")
        raise typer.Exit(code=1)

    console.print(f"[green]✓[/green] Rendered: {written}")


@app.command()
def serve(
    source: Path = typer.Argument(
        ...,
        help="Markdown deck to preview",
        exists=True,
    ),
    port: int = typer.Option(
        DEFAULT_PORT,
        "--port",
        "-p",
        help="Port to bind server (1024-65535)",
        min=1024,
        max=65535,
    ),
    host: str = typer.Option(
        DEFAULT_HOST,
        "--host",
        "-h",
        help="Host to bind server",
    ),
    theme: str = typer.Option(
        DEFAULT_THEME,
        "--theme",
        "-t",
        help=f"Deck theme ({'/'.join(VALID_THEMES)})",
    ),
    no_open: bool = typer.Option(
        False,
        "--no-open",
        help="Don't open browser automatically",
    ),
    log_level: str = typer.Option(
        DEFAULT_LOG_LEVEL,
        "--log-level",
        "-l",
        help="Logging level (DEBUG/INFO/WARNING/ERROR)",
    ),
) -> None:
    """Start the deck preview server."""
    _configure_logging(log_level)

    config = ServerConfig(
        host=host,
        port=port,
        deck_path=source.absolute(),
        theme=theme,
        open_browser=not no_open,
        log_level=log_level,
    )

    try:
        config.validate()
    except ValueError as e:
        console.print(f"[red]✗[/red] Configuration error: {e}", style="bold")
        raise typer.Exit(code=2)

    console.print(f"\n[bold blue]markdeck[/bold blue] serving {config.deck_path.name}")
    console.print(f"[green]✓[/green] http://{host}:{port}  (theme: {theme})\n")

    if config.open_browser:
        import threading
        import time

        def open_browser_delayed():
            time.sleep(1.5)  # Wait for server to start
            webbrowser.open(f"http://{host}:{port}")

        threading.Thread(target=open_browser_delayed, daemon=True).start()

    from markdeck.server.app import create_app

    try:
        uvicorn.run(
            create_app(config),
            host=host,
            port=port,
            log_level=log_level.lower(),
        )
    except KeyboardInterrupt:
        console.print("\n[yellow]Server stopped[/yellow]")
        raise typer.Exit(code=0)
    except OSError as e:
        if "address already in use" in str(e).lower():
            console.print(f"[red]✗[/red] Port {port} is already in use", style="bold")
            raise typer.Exit(code=5)
        console.print(f"[red]✗[/red] Error: {e}", style="bold")
        raise typer.Exit(code=1)


@app.command()
def themes() -> None:
    """List built-in themes."""
    for name in VALID_THEMES:
        marker = " [dim](default)[/dim]" if name == "default" else ""
        console.print(f"  • {name}{marker}")


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
