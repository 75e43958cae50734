"""
Command Line Interface for daylist.
"""

import click
from pathlib import Path
from .version import VERSION
from .config import Settings, default_config_path, load_settings
from .data import DataCore
from .data.io import atomic_write, DATA_YAML
from .models import Priority, TaskField
from .classify import PriorityFilter
from .recovery import DaylistError
from .render import render_board, render_task_detail

PRIORITY_CHOICES = [p.value for p in Priority]
FILTER_CHOICES = [f.value for f in PriorityFilter]


def _fail(message: str):
    click.echo(f"❌ {message}", err=True)
    raise SystemExit(1)


@click.group()
@click.version_option(version=VERSION, prog_name="daylist")
@click.option('--config', 'config_file', type=click.Path(dir_okay=False, path_type=Path),
              help='Path to the YAML config file')
@click.pass_context
def main(ctx, config_file):
    """
    daylist - your tasks, sorted by when they are due.

    Tasks are grouped into overdue, today, tomorrow, upcoming and completed.
    """
    ctx.ensure_object(dict)
    ctx.obj['config_file'] = config_file
    ctx.obj['settings'] = load_settings(config_file)


def _context(ctx):
    return DataCore.open_context(ctx.obj['settings'])


@main.command()
@click.pass_context
def init(ctx):
    """Write a config file with the default settings."""
    path = ctx.obj['config_file'] or default_config_path()
    if path.exists():
        click.echo(f"❌ Config already exists at {path}")
        return

    try:
        atomic_write(DATA_YAML, path, Settings().to_yaml_dict(), create_dirs=True)
    except DaylistError as e:
        _fail(f"Error writing config: {e}")
    click.echo(f"✅ Created {path}")


@main.command()
@click.argument('title')
@click.option('-d', '--description', default="", help='Longer notes for the task')
@click.option('--date', 'due_date', default=None, metavar='YYYY-MM-DD', help='Due date')
@click.option('--time', 'due_time', default=None, metavar='HH:MM', help='Due time')
@click.option('-p', '--priority', type=click.Choice(PRIORITY_CHOICES), default=None,
              help='Priority (defaults to the configured one)')
@click.pass_context
def add(ctx, title, description, due_date, due_time, priority):
    """Add a new task."""
    try:
        with _context(ctx) as app:
            task = app.create(title, description, due_date, due_time, priority)
    except DaylistError as e:
        _fail(f"Error adding task: {e}")
    click.echo(f"✅ Added task #{task.id}: {task.title}")


@main.command(name='list')
@click.option('-f', '--filter', 'priority_filter', type=click.Choice(FILTER_CHOICES), default=None,
              help='Only show pending tasks with this priority')
@click.option('--show-done/--hide-done', default=None, help='Expand or collapse the completed section')
@click.pass_context
def list_tasks(ctx, priority_filter, show_done):
    """Show the task board."""
    try:
        with _context(ctx) as app:
            if priority_filter is not None:
                app.set_filter(priority_filter)
            if show_done is not None and show_done != app.view.show_completed:
                app.toggle_completed_section_visibility()
            click.echo(render_board(app.snapshot(), app.view))
    except DaylistError as e:
        _fail(f"Error loading tasks: {e}")


@main.command()
@click.argument('task_id', type=int)
@click.pass_context
def done(ctx, task_id):
    """Mark a task done, or pending again if it was done."""
    try:
        with _context(ctx) as app:
            task = app.toggle_completed(task_id)
    except DaylistError as e:
        _fail(f"Error updating task: {e}")
    if task is None:
        click.echo(f"🤷 No task #{task_id}")
    else:
        click.echo(f"{'✅' if task.completed else '↩️ '} #{task.id} {task.title}: {'done' if task.completed else 'pending'}")


@main.command()
@click.argument('task_id', type=int)
@click.pass_context
def rm(ctx, task_id):
    """Delete a task."""
    try:
        with _context(ctx) as app:
            removed = app.delete(task_id)
    except DaylistError as e:
        _fail(f"Error deleting task: {e}")
    click.echo(f"🗑️  Deleted task #{task_id}" if removed else f"🤷 No task #{task_id}")


@main.command()
@click.argument('task_id', type=int)
@click.pass_context
def show(ctx, task_id):
    """Show one task with its checklist."""
    try:
        with _context(ctx) as app:
            click.echo(render_task_detail(app.get(task_id)))
    except DaylistError as e:
        _fail(str(e))


@main.command()
@click.argument('task_id', type=int)
@click.option('--title', default=None, help='New title')
@click.option('--description', default=None, help='New description')
@click.option('--date', 'due_date', default=None, metavar='YYYY-MM-DD', help='New due date')
@click.option('--time', 'due_time', default=None, metavar='HH:MM', help='New due time')
@click.option('--clear-date', is_flag=True, help='Remove the due date')
@click.option('--clear-time', is_flag=True, help='Remove the due time')
@click.pass_context
def edit(ctx, task_id, title, description, due_date, due_time, clear_date, clear_time):
    """Edit a task's title, description, date or time."""
    edits = []
    if title is not None:
        edits.append((TaskField.TITLE, title))
    if description is not None:
        edits.append((TaskField.DESCRIPTION, description))
    if clear_date:
        edits.append((TaskField.DUE_DATE, None))
    elif due_date is not None:
        edits.append((TaskField.DUE_DATE, due_date))
    if clear_time:
        edits.append((TaskField.DUE_TIME, None))
    elif due_time is not None:
        edits.append((TaskField.DUE_TIME, due_time))

    if not edits:
        click.echo("💡 Nothing to change, see 'daylist edit --help'")
        return

    try:
        with _context(ctx) as app:
            app.open_task(task_id)
            try:
                for field, value in edits:
                    app.stage_field_edit(field, value)
            except DaylistError:
                app.cancel_edit()
                raise
            task = app.close_task()
    except DaylistError as e:
        _fail(f"Error editing task: {e}")
    click.echo(f"✏️  Updated #{task.id}: {task.title}")


@main.group()
def subtask():
    """Manage a task's checklist."""
    pass


@subtask.command(name='add')
@click.argument('task_id', type=int)
@click.argument('text')
@click.pass_context
def subtask_add(ctx, task_id, text):
    """Add a checklist item to a task."""
    try:
        with _context(ctx) as app:
            task = app.open_task(task_id)
            app.add_subtask(text)
            count = len(task.subtasks)
            app.close_task()
    except DaylistError as e:
        _fail(f"Error adding subtask: {e}")
    click.echo(f"✅ Added subtask {count} to #{task_id}")


@subtask.command(name='toggle')
@click.argument('task_id', type=int)
@click.argument('index', type=int)
@click.pass_context
def subtask_toggle(ctx, task_id, index):
    """Check or uncheck checklist item INDEX (starting at 1)."""
    try:
        with _context(ctx) as app:
            app.open_task(task_id)
            item = app.toggle_subtask(index - 1)
            app.close_task()
    except IndexError as e:
        _fail(str(e))
    except DaylistError as e:
        _fail(f"Error updating subtask: {e}")
    click.echo(f"{'✅' if item.completed else '↩️ '} {item.text}")


@main.command()
@click.pass_context
def summary(ctx):
    """Show today's status line."""
    try:
        with _context(ctx) as app:
            click.echo(app.snapshot().summary.status_line)
    except DaylistError as e:
        _fail(str(e))


if __name__ == "__main__":
    main()
