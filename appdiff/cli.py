"""
AppDiff CLI.

Command-line front end for browsing analyzed packages and comparing versions.
"""

from __future__ import annotations

import asyncio
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .core.config import Config, get_config
from .core.exceptions import AppDiffError
from .core.logging import bind_context, clear_context, setup_logging
from .diff.engine import SetDiff, StringEntry, StringPage
from .models.version import short_name
from .services.catalog import CatalogService, PackageDetails
from .services.waitlist import WaitlistService
from .storage import VersionStore, create_store
from .views.comparison import ComparisonState, ComparisonView

app = typer.Typer(
    name="appdiff",
    help="Browse analyzed Android packages and compare their versions",
    add_completion=False,
)

console = Console()


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        from . import __version__
        console.print(f"AppDiff v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Enable verbose logging"),
) -> None:
    """AppDiff: version diffs for analyzed Android packages."""
    config = get_config()
    if verbose:
        config.log_level = "DEBUG"
    clear_context()
    setup_logging(config)


def _open_store(config: Config) -> VersionStore:
    try:
        return create_store(config)
    except AppDiffError as e:
        console.print(f"[red]Store is not configured: {escape(str(e))}[/red]")
        raise typer.Exit(1)


async def _load_details(package_name: str) -> PackageDetails:
    bind_context(package_name=package_name)
    async with _open_store(get_config()) as store:
        result = await CatalogService(store).load_package(package_name)
    if not result.success or result.data is None:
        console.print(f"[red]{escape(result.error or '')}[/red]")
        raise typer.Exit(1)
    return result.data


def _build_state(details: PackageDetails, current: int | None) -> ComparisonState:
    state = ComparisonState(details.versions, page_size=get_config().display.strings_per_page)
    if current is not None:
        try:
            state.select_version(current)
        except AppDiffError as e:
            console.print(f"[red]{escape(str(e))}[/red]")
            raise typer.Exit(1)
    return state


def _default_pair(count: int, current: int | None, compare: int | None) -> tuple[int, int]:
    """Newest version against the one before it, unless told otherwise."""
    if current is None:
        current = count - 1 if compare != count - 1 else count - 2
    if compare is None:
        compare = current - 1 if current > 0 else 1
    return current, compare


def _header(details: PackageDetails, view: ComparisonView) -> None:
    count = len(details.versions)
    mode = (
        f"Comparing {escape(view.current.label)} with {escape(view.previous.label)}"
        if view.previous is not None
        else f"Viewing {escape(view.current.label)}"
    )
    console.print(Panel.fit(
        f"[bold]{escape(details.display_name)}[/bold]\n"
        f"[dim]{details.package_name}[/dim]\n"
        f"{count} version{'s' if count != 1 else ''} analyzed\n"
        f"{mode}",
        border_style="blue",
    ))


def _print_set(title: str, items: list[str], style: str = "", shorten: bool = False) -> None:
    if not items:
        return
    labels = [escape(short_name(i) if shorten else i) for i in items]
    styled = [f"[{style}]{label}[/{style}]" if style else label for label in labels]
    console.print(f"[bold]{title}[/bold]: " + ", ".join(styled))


def _print_set_diff(kind: str, diff: SetDiff, shorten: bool) -> None:
    _print_set(f"Added {kind}", diff.added, "green", shorten)
    _print_set(f"Removed {kind}", diff.removed, "red", shorten)
    console.print(f"[bold]Unchanged {kind}[/bold]: " + (", ".join(
        escape(short_name(i) if shorten else i) for i in diff.unchanged
    ) or "[dim]none[/dim]"))


def _strings_table(title: str, entries: list[StringEntry], style: str = "") -> Table:
    table = Table(title=title)
    table.add_column("Key", style=style or "cyan")
    table.add_column("Value", style=style or None)
    for key, value in entries:
        table.add_row(escape(key), escape(value))
    return table


def _print_strings_page(page: StringPage) -> None:
    console.print(_strings_table("Strings", page.page_items))
    if page.total_items > page.page_size:
        console.print(f"Page {page.page} of {page.total_pages}")


def _print_versions(state: ComparisonState) -> None:
    entries = []
    for option in state.version_options():
        label = f"{option.index}: {escape(option.label)}"
        entries.append(f"[bold]{label}[/bold]" if option.index == state.selected_index else label)
    console.print("[bold]Versions[/bold]: " + ", ".join(entries))


def _print_security(view: ComparisonView) -> None:
    if not view.security_issues:
        console.print("No security issues detected.")
        return
    console.print("[bold]Security Issues[/bold]")
    for issue in view.security_issues:
        console.print(f"  • [red]{escape(str(issue))}[/red]")


@app.command()
def apps(
    search: str = typer.Option("", "--search", "-s", help="Filter by package name or app name"),
) -> None:
    """List analyzed apps grouped by package."""
    config = get_config()

    async def run_async() -> None:
        async with _open_store(config) as store:
            result = await CatalogService(store).list_apps(search)

        if not result.success or result.data is None:
            console.print(f"[red]{escape(result.error or '')}[/red]")
            raise typer.Exit(1)

        if not result.metadata.get("total_records"):
            console.print("No apps found. Use the App Puller and App Extractor to analyze apps.")
            return

        shown_versions = config.display.preview_versions
        shown_permissions = config.display.preview_permissions

        table = Table(title="App Analysis Dashboard")
        table.add_column("App", style="cyan")
        table.add_column("Package")
        table.add_column("Versions")
        table.add_column("Permissions")
        table.add_column("Extracted")

        for group in result.data:
            latest = group.latest
            labels = [v.label for v in group.versions[:shown_versions]]
            if len(group.versions) > shown_versions:
                labels.append(f"+{len(group.versions) - shown_versions} more")
            permissions = latest.short_permissions[:shown_permissions] if latest else []
            if latest and len(latest.permissions) > shown_permissions:
                permissions.append(f"+{len(latest.permissions) - shown_permissions} more")
            extracted = latest.extracted_at.strftime("%Y-%m-%d %H:%M") if latest and latest.extracted_at else ""
            table.add_row(
                escape(group.display_name),
                escape(group.package_name),
                escape("\n".join(labels)),
                escape(", ".join(permissions)),
                extracted,
            )

        console.print(table)

    asyncio.run(run_async())


@app.command()
def show(
    package_name: str = typer.Argument(..., help="Package name, e.g. com.example.app"),
    version_index: Optional[int] = typer.Option(None, "--version", "-V", help="Index of the version to view (0 = oldest)"),
    search: str = typer.Option("", "--search", "-s", help="Filter strings by key or value"),
    page: int = typer.Option(1, "--page", "-p", help="Strings page"),
) -> None:
    """Show a single version of a package."""
    details = asyncio.run(_load_details(package_name))
    state = _build_state(details, version_index)
    state.set_query(search)
    state.go_to_page(page)
    view = state.view()

    _header(details, view)
    _print_versions(state)
    _print_set("Permissions", view.current.permissions, shorten=True)
    _print_set("Libraries", view.current.libraries)
    _print_strings_page(view.strings_page)
    _print_security(view)


@app.command()
def diff(
    package_name: str = typer.Argument(..., help="Package name, e.g. com.example.app"),
    current: Optional[int] = typer.Option(None, "--current", "-c", help="Index of the version to view"),
    compare: Optional[int] = typer.Option(None, "--compare", "-C", help="Index of the version to compare with"),
    search: str = typer.Option("", "--search", "-s", help="Filter strings by key or value"),
    page: int = typer.Option(1, "--page", "-p", help="Strings page"),
) -> None:
    """Compare two versions of a package."""
    details = asyncio.run(_load_details(package_name))
    if len(details.versions) < 2:
        console.print("[yellow]Only one version analyzed; nothing to compare.[/yellow]")
        raise typer.Exit(1)

    state = _build_state(details, None)
    try:
        state.select_pair(*_default_pair(len(details.versions), current, compare))
    except AppDiffError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1)
    state.set_query(search)
    state.go_to_page(page)
    view = state.view()

    _header(details, view)
    _print_set_diff("Permissions", view.comparison.permissions, shorten=True)
    _print_set_diff("Libraries", view.comparison.libraries, shorten=False)
    if view.comparison.strings.added:
        console.print(_strings_table("Added Strings", view.comparison.strings.added, "green"))
    if view.comparison.strings.removed:
        console.print(_strings_table("Removed Strings", view.comparison.strings.removed, "red"))
    _print_strings_page(view.strings_page)
    _print_security(view)


@app.command()
def strings(
    package_name: str = typer.Argument(..., help="Package name, e.g. com.example.app"),
    version_index: Optional[int] = typer.Option(None, "--version", "-V", help="Index of the version to view"),
    search: str = typer.Option("", "--search", "-s", help="Filter strings by key or value"),
    page: int = typer.Option(1, "--page", "-p", help="Strings page"),
) -> None:
    """Search the string resources of a version."""
    details = asyncio.run(_load_details(package_name))
    state = _build_state(details, version_index)
    state.set_query(search)
    state.go_to_page(page)
    view = state.view()

    console.print(f"[bold]{escape(view.current.label)}[/bold]: {view.strings_page.total_items} matching strings")
    _print_strings_page(view.strings_page)


@app.command()
def security(
    package_name: str = typer.Argument(..., help="Package name, e.g. com.example.app"),
    version_index: Optional[int] = typer.Option(None, "--version", "-V", help="Index of the version to inspect"),
) -> None:
    """List the security issues flagged for a version."""
    details = asyncio.run(_load_details(package_name))
    state = _build_state(details, version_index)
    view = state.view()

    console.print(f"[bold]{escape(details.display_name)}[/bold] {escape(view.current.label)}")
    _print_security(view)


@app.command()
def waitlist(
    email: str = typer.Argument(..., help="Email address to add"),
    referral: Optional[str] = typer.Option(None, "--referral", "-r", help="Referral source"),
    ip_address: Optional[str] = typer.Option(None, "--ip", help="Client IP address"),
) -> None:
    """Join the waitlist."""
    config = get_config()

    async def run_async() -> None:
        async with _open_store(config) as store:
            result = await WaitlistService(store).subscribe(email, ip_address, referral)
        if result.success:
            console.print(f"[green]{result.message}[/green]")
        else:
            console.print(f"[red]{result.message}[/red]")
            raise typer.Exit(1)

    asyncio.run(run_async())


@app.command()
def config() -> None:
    """Show the effective configuration."""
    cfg = get_config()

    table = Table(title="Current Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")

    table.add_row("Log Level", cfg.log_level)
    table.add_row("Store Backend", cfg.store.backend)
    table.add_row("Store URL", cfg.store.url or "[dim]not set[/dim]")
    table.add_row("Store API Key", "set" if cfg.store.api_key else "[dim]not set[/dim]")
    table.add_row("Store Path", str(cfg.store.base_path))
    table.add_row("Timeout", f"{cfg.store.timeout_seconds:g}s")
    table.add_row("Strings Per Page", str(cfg.display.strings_per_page))

    console.print(table)

    console.print("\n[dim]Configure via environment variables:[/dim]")
    console.print("  APPDIFF_LOG_LEVEL, APPDIFF_STORE_BACKEND, APPDIFF_STORE_PATH")
    console.print("  SUPABASE_URL, SUPABASE_KEY, APPDIFF_STRINGS_PER_PAGE, APPDIFF_TIMEOUT_SECONDS")


def run() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    run()
