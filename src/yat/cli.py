"""
Command Line Interface for yat.
"""

import click
from pathlib import Path
from .version import VERSION
from .config import load_config
from .codec import format_task
from .data import SaveStore, list_backups
from .models import Location
from .recovery import CorruptionError, FileOperationError, ParseError, YatError
from .session import Session
from . import logs

FILE_TYPE = click.Path(dir_okay=False, path_type=Path)


@click.group(invoke_without_command=True)
@click.version_option(version=VERSION, prog_name="yat")
@click.option('-c', '--config', 'config_path', type=FILE_TYPE, help='Config file (default: ~/.todo/config.yml)')
@click.pass_context
def main(ctx, config_path):
    """
    yat - a hierarchical todo list for the terminal.

    Run without a command to open the default list in the terminal UI.
    """
    ctx.obj = load_config(config_path)
    if ctx.invoked_subcommand is None:
        ctx.invoke(open_list, file=None)


def _open_session(ctx, file, autosave=True) -> Session:
    store = SaveStore.locate(file)
    try:
        session = Session.open(store, autosave=autosave)
    except FileOperationError as e:
        click.echo(f"❌ {e}", err=True)
        ctx.exit(1)
    for error in session.load_errors:
        click.echo(f"⚠️  {store.path}: {error}", err=True)
    return session


@main.command('open')
@click.argument('file', required=False, type=FILE_TYPE)
@click.pass_context
def open_list(ctx, file):
    """Open a todo list in the terminal UI."""
    from .tui import TodoApp

    config = ctx.obj
    session = _open_session(ctx, file, autosave=config.autosave)
    try:
        app = TodoApp(session, config)
    except YatError as e:
        click.echo(f"❌ {e}", err=True)
        ctx.exit(1)

    logs.detach_console()
    try:
        app.run()
    finally:
        logs.attach_console()

    if app.exit_error:
        click.echo(f"❌ Quit without saving: {app.exit_error}", err=True)
        ctx.exit(1)


@main.command()
@click.argument('file', required=False, type=FILE_TYPE)
@click.pass_context
def show(ctx, file):
    """Print the todo list."""
    session = _open_session(ctx, file, autosave=False)

    if not session.tree.tasks:
        click.echo("📭 No tasks")
        return

    for i, task in enumerate(session.tree.tasks):
        click.echo(f"{str(Location(root=i)):<5} {format_task(task)}")
        for j, subtask in enumerate(task.subtasks):
            click.echo(f"{str(Location(root=i, child=j)):<5}     {format_task(subtask)}")


@main.command()
@click.argument('file', required=False, type=FILE_TYPE)
@click.option('--strict', is_flag=True, help='Stop at the first malformed line')
@click.pass_context
def check(ctx, file, strict):
    """Check a save file for malformed lines."""
    store = SaveStore.locate(file)
    if not store.exists():
        click.echo(f"❌ No save file at {store.path}")
        ctx.exit(1)

    try:
        result = store.load(strict=strict)
    except ParseError as e:
        click.echo(f"❌ {store.path}:{e.line}: {e.reason}")
        ctx.exit(1)
    except (CorruptionError, FileOperationError) as e:
        click.echo(f"❌ {e}")
        ctx.exit(1)

    for error in result.errors:
        click.echo(f"⚠️  {store.path}:{error.line}: {error.reason}")

    backups = list_backups(store.path)
    if backups:
        click.echo(f"💾 {len(backups)} backup(s) of earlier unreadable content, latest {backups[-1].name}")

    if result.errors:
        click.echo(f"❌ {len(result.errors)} malformed line(s)")
        ctx.exit(1)

    click.echo(f"✅ {result.tree.count()} tasks, no errors")


@main.command()
@click.argument('text')
@click.option('-p', '--parent', type=int, help='Index of the top-level task to add a sub-task under')
@click.option('-f', '--file', type=FILE_TYPE, help='Save file (default: ~/.todo/save.txt)')
@click.pass_context
def add(ctx, text, parent, file):
    """Add a task and save."""
    session = _open_session(ctx, file)
    tree = session.tree

    if parent is not None and not 0 <= parent < len(tree.tasks):
        click.echo(f"❌ No top-level task {parent}")
        ctx.exit(1)

    try:
        index = tree.add(text, parent=parent)
    except ValueError as e:
        click.echo(f"❌ Invalid task: {e}")
        ctx.exit(1)

    try:
        session.save()
    except FileOperationError as e:
        click.echo(f"❌ {e}")
        ctx.exit(1)

    location = Location(root=index) if parent is None else Location(root=parent, child=index)
    click.echo(f"✅ Added task {location}")


if __name__ == "__main__":
    main()
