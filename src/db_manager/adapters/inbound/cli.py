"""Command-line adapter for the database manager.

The ``dbm`` command offers an interactive menu plus one subcommand per
operation for scripting.

Commands:
    interactive        - Menu-driven session (backend, database, actions)
    create-db          - Create a database
    collections        - List collections or tables
    create-collection  - Create a collection or table
    insert             - Insert one record given as JSON
    read               - Print every record of a collection as JSON
    update             - Set fields on the record with an id
    delete             - Delete the record with an id
    schema             - Print the schema report of a collection
    export             - Export a collection to CSV or JSON
    import             - Import records from a CSV or JSON file
    backup             - Dump the database with the native tool

Examples:
    dbm interactive
    dbm -v insert -b sqlite -d shop users '{"id": 1, "name": "Ada"}'
    dbm export -b mongodb -d shop users -f json -o users.json
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import click

from db_manager import __version__
from db_manager.adapters.inbound import console
from db_manager.application import DatabaseService
from db_manager.domain.errors import DatabaseManagerError
from db_manager.domain.services import parse_record
from db_manager.domain.value_objects import BackendType, ExportFormat
from db_manager.infrastructure.config import Config
from db_manager.infrastructure.container import Container

BACKEND_CHOICES = [b.value for b in BackendType]
FORMAT_CHOICES = [f.value for f in ExportFormat]

# Errors reported to the user without a traceback
REPORTED_ERRORS = (DatabaseManagerError, ValueError, OSError)


# ============================================================================
# Helpers
# ============================================================================


def _container(ctx: click.Context) -> Container:
    verbose = bool((ctx.find_object(dict) or {}).get("verbose"))
    return Container.create(log_level="DEBUG" if verbose else None)


@contextmanager
def _reporting(ctx: click.Context) -> Iterator[None]:
    """Print handled errors and exit with status 1."""
    try:
        yield
    except REPORTED_ERRORS as e:
        console.error(str(e))
        ctx.exit(1)


def _service(ctx: click.Context, backend: str, database: str) -> DatabaseService:
    return _container(ctx).service(backend, database)


def backend_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Add the --backend and --database options to a command."""
    func = click.option(
        "-d", "--database", required=True, help="Database name (a file path for sqlite)"
    )(func)
    func = click.option(
        "-b",
        "--backend",
        required=True,
        type=click.Choice(BACKEND_CHOICES, case_sensitive=False),
        help="Database backend",
    )(func)
    return func


def _record_count(count: int) -> str:
    return f"{count} record" if count == 1 else f"{count} records"


# ============================================================================
# Root group
# ============================================================================


@click.group()
@click.version_option(version=__version__, prog_name="dbm")
@click.option("--verbose", "-v", is_flag=True, help="Debug logging on stderr")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """CRUD, schema reports, import/export and backups for MongoDB, MySQL and SQLite.

    \b
    Quick start:
      dbm interactive
      dbm collections -b sqlite -d shop
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose


# ============================================================================
# Direct commands
# ============================================================================


@cli.command("create-db")
@backend_options
@click.pass_context
def create_db(ctx: click.Context, backend: str, database: str) -> None:
    """Create a database."""
    with _reporting(ctx):
        service = _service(ctx, backend, database)
        service.create_database()
        console.success(f"Database {service.database} created on {service.backend_type.value}")


@cli.command("collections")
@backend_options
@click.pass_context
def collections(ctx: click.Context, backend: str, database: str) -> None:
    """List collections or tables, one per line."""
    with _reporting(ctx):
        service = _service(ctx, backend, database)
        names = service.list_collections()
        if not names:
            console.warning(f"No {service.backend_type.collection_label}s found in {service.database}")
        for name in names:
            click.echo(name)


@cli.command("create-collection")
@backend_options
@click.argument("name")
@click.option(
    "--columns",
    "-c",
    default="",
    help='Column definitions for SQL backends, e.g. "id INTEGER PRIMARY KEY, name TEXT"',
)
@click.pass_context
def create_collection(ctx: click.Context, backend: str, database: str, name: str, columns: str) -> None:
    """Create a collection (MongoDB) or table (MySQL, SQLite)."""
    with _reporting(ctx):
        service = _service(ctx, backend, database)
        service.create_collection(name, columns)
        console.success(f"{service.backend_type.collection_label.capitalize()} {name} created")


@cli.command("insert")
@backend_options
@click.argument("collection")
@click.argument("data")
@click.pass_context
def insert(ctx: click.Context, backend: str, database: str, collection: str, data: str) -> None:
    """Insert one record given as a JSON object."""
    with _reporting(ctx):
        service = _service(ctx, backend, database)
        record_id = service.create_record(collection, parse_record(data))
        suffix = f" with id {record_id}" if record_id is not None else ""
        console.success(f"Record created in {collection}{suffix}")


@cli.command("read")
@backend_options
@click.argument("collection")
@click.pass_context
def read(ctx: click.Context, backend: str, database: str, collection: str) -> None:
    """Print every record of a collection as a JSON array."""
    with _reporting(ctx):
        service = _service(ctx, backend, database)
        console.records(service.read_records(collection))


@cli.command("update")
@backend_options
@click.argument("collection")
@click.argument("record_id")
@click.argument("data")
@click.pass_context
def update(
    ctx: click.Context, backend: str, database: str, collection: str, record_id: str, data: str
) -> None:
    """Set the fields in DATA on the record with RECORD_ID."""
    with _reporting(ctx):
        service = _service(ctx, backend, database)
        matched = service.update_record(collection, record_id, parse_record(data))
        if matched:
            console.success(f"Record {record_id} updated")
        else:
            console.warning(f"No record found with id {record_id}")


@cli.command("delete")
@backend_options
@click.argument("collection")
@click.argument("record_id")
@click.pass_context
def delete(ctx: click.Context, backend: str, database: str, collection: str, record_id: str) -> None:
    """Delete the record with RECORD_ID."""
    with _reporting(ctx):
        service = _service(ctx, backend, database)
        if service.delete_record(collection, record_id):
            console.success(f"Record {record_id} deleted")
        else:
            console.warning(f"No record found with id {record_id}")


@cli.command("schema")
@backend_options
@click.argument("collection")
@click.pass_context
def schema(ctx: click.Context, backend: str, database: str, collection: str) -> None:
    """Print the schema report of a collection as JSON."""
    with _reporting(ctx):
        service = _service(ctx, backend, database)
        report = service.generate_schema_report(collection)
        click.echo(console.to_json(report.to_dict()))


@cli.command("export")
@backend_options
@click.argument("collection")
@click.option(
    "--format",
    "-f",
    "fmt",
    type=click.Choice(FORMAT_CHOICES, case_sensitive=False),
    default="json",
    show_default=True,
    help="Output format",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Output file [default: <export dir>/<collection>.<format>]",
)
@click.pass_context
def export(
    ctx: click.Context,
    backend: str,
    database: str,
    collection: str,
    fmt: str,
    output: Path | None,
) -> None:
    """Export every record of a collection to a file."""
    with _reporting(ctx):
        service = _service(ctx, backend, database)
        result = service.export_data(collection, fmt, output)
        console.success(f"Exported {_record_count(result.count)} to {result.path}")


@cli.command("import")
@backend_options
@click.argument("collection")
@click.argument("path", type=click.Path(dir_okay=False, path_type=Path))
@click.pass_context
def import_(ctx: click.Context, backend: str, database: str, collection: str, path: Path) -> None:
    """Import records from a CSV or JSON file into a collection."""
    with _reporting(ctx):
        service = _service(ctx, backend, database)
        result = service.import_data(collection, path)
        console.success(f"Imported {_record_count(result.count)} into {collection}")


@cli.command("backup")
@backend_options
@click.option(
    "--output-dir",
    "-o",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Backup directory [default: backup.output_dir]",
)
@click.pass_context
def backup(ctx: click.Context, backend: str, database: str, output_dir: Path | None) -> None:
    """Dump the database with mongodump, mysqldump or sqlite3."""
    with _reporting(ctx):
        service = _service(ctx, backend, database)
        result = service.backup_database(output_dir)
        console.success(f"Backup written to {result.path} ({result.duration_seconds:.2f}s)")


# ============================================================================
# Interactive session
# ============================================================================


@dataclass
class Session:
    """State kept between menu actions."""

    service: DatabaseService
    config: Config
    collection: str | None = None

    @property
    def label(self) -> str:
        return self.service.backend_type.collection_label

    def ask_collection(self) -> str:
        """Prompt for a collection, offering the last one used."""
        name = click.prompt(f"Enter the {self.label} name", default=self.collection)
        self.collection = name.strip()
        return self.collection


def _list_collections(session: Session) -> None:
    names = session.service.list_collections()
    if not names:
        console.info(f"No {session.label}s found in {session.service.database}.")
        return
    console.section(f"{session.label.capitalize()}s in {session.service.database}")
    for name in names:
        console.bullet(name)


def _create_collection(session: Session) -> None:
    mode = click.prompt(
        f"Select an existing {session.label} or create a new one?",
        type=click.Choice(["select", "create"], case_sensitive=False),
        default="select",
    )
    if mode.lower() == "select":
        names = session.service.list_collections()
        if not names:
            console.info(f"No {session.label}s found. Create one first.")
            return
        console.menu(names)
        index = click.prompt(f"Choose a {session.label}", type=click.IntRange(1, len(names)))
        session.collection = names[index - 1]
        console.success(f"Selected {session.label} {session.collection}")
        return

    name = click.prompt(f"Enter the new {session.label} name")
    columns = ""
    if session.service.backend_type.is_relational:
        columns = click.prompt(
            "Enter column definitions (e.g. id INT PRIMARY KEY, name VARCHAR(255))"
        )
    session.service.create_collection(name, columns)
    session.collection = name.strip()
    console.success(f"{session.label.capitalize()} {session.collection} created")


def _create_record(session: Session) -> None:
    collection = session.ask_collection()
    document = parse_record(click.prompt("Enter the record as JSON"))
    record_id = session.service.create_record(collection, document)
    suffix = f" with id {record_id}" if record_id is not None else ""
    console.success(f"Record created{suffix}")


def _read_records(session: Session) -> None:
    collection = session.ask_collection()
    rows = session.service.read_records(collection)
    if not rows:
        console.info(f"No records found in {collection}.")
        return
    console.records(rows)


def _update_record(session: Session) -> None:
    collection = session.ask_collection()
    record_id = click.prompt("Enter the record id")
    changes = parse_record(click.prompt("Enter the fields to update as JSON"))
    if session.service.update_record(collection, record_id, changes):
        console.success(f"Record {record_id} updated")
    else:
        console.warning(f"No record found with id {record_id}")


def _delete_record(session: Session) -> None:
    collection = session.ask_collection()
    record_id = click.prompt("Enter the record id")
    if session.service.delete_record(collection, record_id):
        console.success(f"Record {record_id} deleted")
    else:
        console.warning(f"No record found with id {record_id}")


def _schema_report(session: Session) -> None:
    collection = session.ask_collection()
    report = session.service.generate_schema_report(collection)
    console.section(f"Schema of {collection}")
    width = max(len(name) for name in report.fields) + 2
    for name, type_name in report.fields.items():
        console.kv(name, type_name, key_width=width)
    if report.indexes:
        console.section("Indexes")
        for index in report.indexes:
            console.bullet(console.to_json(index).replace("\n", " "))
    if report.is_inferred:
        console.info(f"Types inferred from {report.sampled_documents} sampled documents.")


def _export_data(session: Session) -> None:
    collection = session.ask_collection()
    fmt = click.prompt(
        "Choose the export format",
        type=click.Choice(FORMAT_CHOICES, case_sensitive=False),
        default="json",
    )
    default_path = session.config.export.output_dir / f"{collection}.{fmt.lower()}"
    output = click.prompt("Enter the output file path", default=str(default_path))
    result = session.service.export_data(collection, fmt, output)
    console.success(f"Exported {_record_count(result.count)} to {result.path}")


def _import_data(session: Session) -> None:
    collection = session.ask_collection()
    path = click.prompt("Enter the path of the CSV or JSON file to import")
    result = session.service.import_data(collection, path)
    console.success(f"Imported {_record_count(result.count)} into {collection}")


def _backup_database(session: Session) -> None:
    target = click.prompt(
        "Enter the backup directory", default=str(session.config.backup.output_dir)
    )
    result = session.service.backup_database(target)
    console.success(f"Backup written to {result.path} ({result.duration_seconds:.2f}s)")


MenuAction = Callable[[Session], None]


def _menu_actions(label: str) -> list[tuple[str, MenuAction | None]]:
    plural = f"{label.capitalize()}s"
    return [
        (f"List {plural}", _list_collections),
        (f"Create a {label.capitalize()}", _create_collection),
        ("Create a New Record", _create_record),
        ("Read Records", _read_records),
        ("Update a Record", _update_record),
        ("Delete a Record", _delete_record),
        ("Generate Schema Report", _schema_report),
        ("Export Data", _export_data),
        ("Import Data", _import_data),
        ("Backup Database", _backup_database),
        ("Exit", None),
    ]


def _open_session(ctx: click.Context, container: Container) -> Session:
    backend = click.prompt(
        "Select the database type",
        type=click.Choice(BACKEND_CHOICES, case_sensitive=False),
    )
    mode = click.prompt(
        "Create a new database or select an existing one?",
        type=click.Choice(["select", "create"], case_sensitive=False),
        default="select",
    )
    database = click.prompt("Enter the database name")

    with _reporting(ctx):
        service = container.service(backend, database)
        if mode.lower() == "create":
            service.create_database()
            console.success(f"Database {service.database} created")
        elif service.select_database():
            console.success(f"Connected to {service.database}")
        else:
            console.warning(f"Database {service.database} is empty or does not exist yet")
        return Session(service=service, config=container.config)


@cli.command("interactive")
@click.pass_context
def interactive(ctx: click.Context) -> None:
    """Run the menu-driven session."""
    with _reporting(ctx):
        container = _container(ctx)

    session = _open_session(ctx, container)

    actions = _menu_actions(session.label)
    while True:
        console.section(f"{session.service.backend_type.value} / {session.service.database}")
        console.menu([label for label, _ in actions])
        choice = click.prompt("Choose an action", type=click.IntRange(1, len(actions)))
        label, handler = actions[choice - 1]
        if handler is None:
            console.info("Goodbye.")
            break

        try:
            handler(session)
        except REPORTED_ERRORS as e:
            console.error(str(e))
        console.pause()


def main() -> None:
    """Console script entry point."""
    cli(obj={})
