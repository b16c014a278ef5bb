"""
framescope CLI - Resolve navigation targets and probe selectors in frames.
"""

import logging

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from framescope.core.config import RunConfig
from framescope.core.errors import FrameScopeError

console = Console()


@click.group()
@click.option('--verbose', '-v', is_flag=True, help='Log scope switches and navigation')
def cli(verbose):
    """🖼️ framescope - scope-aware element queries for Selenium

    Inspect how URLs resolve and what selectors match inside nested iframes.
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(asctime)s %(name)s %(levelname)s %(message)s")


@cli.command()
@click.argument('base_url')
@click.argument('url', required=False, default='')
@click.option('--current-url', default=None, help='URL of the open page (scheme source for //host URLs)')
def resolve(base_url, url, current_url):
    """
    Print the address navigate_to_url would open.

    \b
    Examples:

        framescope resolve https://host:8080/app bar

        framescope resolve https://host:8080/app //cdn.example/x --current-url http://host/
    """
    from framescope.layers.action.navigator import resolve_url

    try:
        console.print(resolve_url(url, base_url, current_url))
    except FrameScopeError as e:
        console.print(f"[red]❌ Error: {e}[/red]")
        raise SystemExit(1)


@cli.command()
@click.argument('url')
@click.argument('selector')
@click.option('--frame', 'frames', multiple=True, help='Iframe selector to enter (repeat for nested frames)')
@click.option('--xpath', is_flag=True, help='Treat SELECTOR and frame selectors as XPath')
@click.option('--timeout', default=None, type=int, help='Milliseconds to wait for SELECTOR to match')
@click.option('--headless/--headed', default=True, help='Run browser in headless mode')
def probe(url, selector, frames, xpath, timeout, headless):
    """
    Open URL, enter the given frames and list what SELECTOR matches.

    \b
    Example:

        framescope probe https://example.com/frames.html "#frame2_text" --frame "#topframe"
    """
    from framescope.core.driver_factory import open_run
    from framescope.layers.elements.references import SelectBy

    config = RunConfig.from_env()
    config.headless = headless
    if timeout is not None:
        config.default_timeout_ms = timeout
    method = SelectBy.xpath if xpath else SelectBy.css_selector

    console.print(Panel.fit(
        f"[bold blue]🖼️ framescope probe[/bold blue]\n"
        f"[dim]{url}[/dim]",
        border_style="blue"
    ))
    if frames:
        console.print(f"[bold]Frames:[/bold] {' > '.join(frames)}")
    console.print(f"[bold]Selector:[/bold] {selector}")
    console.print()

    try:
        with open_run(config) as run:
            scope = run.browser()
            scope.select_method = method
            scope.navigate_to_url(url)

            for frame_selector in frames:
                scope = scope.retry_until_success(
                    lambda: scope.enter_frame(frame_selector),
                    message=f"Frame '{frame_selector}' did not appear.",
                )
                scope.select_method = method

            scope.wait_until(
                lambda: len(scope.find_elements(selector)) > 0,
                message=f"Nothing matched '{selector}' within {config.default_timeout_ms} ms.",
            )
            elements = scope.find_elements(selector)

            table = Table(show_header=True, header_style="bold cyan")
            table.add_column("#", style="dim", width=4)
            table.add_column("Tag", style="green")
            table.add_column("Text", style="yellow", max_width=40)
            table.add_column("Full selector")
            for i, element in enumerate(elements):
                text = (element.get_text() or "").strip()
                table.add_row(
                    str(i),
                    element.tag_name,
                    text[:40] + "..." if len(text) > 40 else text,
                    element.full_selector,
                )
            console.print(table)
            console.print(f"\n[bold green]✅ {len(elements)} element(s) matched.[/bold green]")
    except FrameScopeError as e:
        console.print(f"[red]❌ Error: {e}[/red]")
        raise SystemExit(1)


@cli.command()
def version():
    """Show version information."""
    from framescope import __version__
    console.print(f"framescope v{__version__}")


def main():
    """Entry point for the CLI."""
    cli()


if __name__ == '__main__':
    main()
