from collections.abc import Iterator
from contextlib import contextmanager
import json as json_lib
from typing import NoReturn

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from sqlalchemy import create_engine
import typer

from .config import get_settings
from .errors import ResourceProviderError
from .factory import ResourceProviderFactory
from .logging import setup_logging
from .provider import ResourceProvider
from .resources import ResourceData

app = typer.Typer(
    name="db-resource-provider",
    help="Browse and edit database rows as a resource tree",
    add_completion=False,
)
console = Console()


def fail(message: str, code: int = 1) -> NoReturn:
    console.print(f"[bold red]Error:[/bold red] {escape(message)}")
    raise typer.Exit(code=code)


@contextmanager
def open_provider() -> Iterator[ResourceProvider]:
    """Bind a provider to the engine described by the settings.

    Provider errors (unbindable data source, strict-mode storage failures)
    are printed and end the command with exit code 1.
    """
    settings = get_settings()
    setup_logging(settings)
    if not settings.database_url:
        fail("DATABASE_URL is not set", code=2)

    engine = create_engine(settings.database_url)
    factory = ResourceProviderFactory()
    try:
        factory.activate(settings)
        factory.bind_data_source(settings.datasource_name, engine)
        yield factory.get_resource_provider()
    except ResourceProviderError as e:
        fail(str(e))
    finally:
        factory.deactivate()
        engine.dispose()


def print_resource(resource: ResourceData, json_output: bool) -> None:
    if json_output:
        typer.echo(json_lib.dumps(resource.model_dump(), indent=2))
        return

    table = Table(title=escape(resource.path))
    table.add_column("Property", style="cyan", no_wrap=True)
    table.add_column("Value", style="magenta")
    for name, value in resource.properties.items():
        table.add_row(name, escape(str(value)))
    console.print(table)


@app.command()
def get(
    path: str,
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """Show the resource at PATH."""
    with open_provider() as provider:
        resource = provider.get_resource(path)

    if resource is None:
        console.print(f"[yellow]Not found:[/yellow] {escape(path)}")
        raise typer.Exit(code=1)
    print_resource(resource, json_output)


@app.command()
def ls(
    path: str,
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """List the child resources of PATH."""
    with open_provider() as provider:
        children = [child.path for child in provider.list_children(path)]

    if json_output:
        typer.echo(json_lib.dumps(children, indent=2))
        return
    for child in children:
        console.print(escape(child))


@app.command()
def put(
    path: str,
    name: str | None = typer.Option(None, "--name", "-n", help="Account holder name"),
    email: str | None = typer.Option(None, "--email", "-e", help="Contact email"),
    balance: int | None = typer.Option(None, "--balance", "-b", help="Account balance"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """Create or overwrite the record at PATH."""
    properties = {
        key: value
        for key, value in {"name": name, "email": email, "balance": balance}.items()
        if value is not None
    }
    with open_provider() as provider:
        resource = provider.create(path, properties)

    if resource is None:
        fail(f"Nothing stored at {path}")
    print_resource(resource, json_output)


@app.command()
def rm(path: str):
    """Delete the record at PATH."""
    with open_provider() as provider:
        deleted = provider.delete(path)

    if not deleted:
        fail(f"Nothing deleted at {path}")
    console.print(f"[green]Deleted[/green] {escape(path)}")


if __name__ == "__main__":
    app()
