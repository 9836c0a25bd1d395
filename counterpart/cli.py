#!/usr/bin/env python3
"""
cli.py
------
Counterpart command line interface.

Settings come from, in increasing priority: a YAML config file, environment
variables, command line flags. They are loaded once, on the first command
that needs them.

Usage:
    counterpart --repo /src/wiggin check          # everything
    counterpart check --skip-db --skip-lib        # repository checks only
    counterpart repo all --format json            # machine-readable report
    counterpart repo policies                     # a single check
    counterpart lib update                        # regenerate the library
    counterpart lib build                         # compile the library
    counterpart db test                           # run database tests
"""
import click

from counterpart import __version__
from counterpart.core.cli import RunStats, get_settings
from counterpart.core.exceptions import CollaboratorError, ConfigurationError
from counterpart.core.logging_manager import handle_cli_error
from counterpart.validators.cli import repo


@click.group()
@click.option(
    "--config",
    "config_file",
    type=click.Path(exists=True, dir_okay=False),
    envvar="COUNTERPART_CONFIG",
    help="YAML config file",
)
@click.option(
    "--repo",
    "repo_path",
    type=click.Path(file_okay=False),
    envvar="COUNTERPART_REPO",
    help="Repository checkout to validate",
)
@click.option(
    "--generator-repo",
    type=click.Path(file_okay=False),
    envvar="COUNTERPART_GENERATOR_REPO",
    help="Library generator checkout",
)
@click.option("--server", envvar="COUNTERPART_SERVER", help="Database server")
@click.option("--database", envvar="COUNTERPART_DB", help="Database name")
@click.option("--uid", envvar="COUNTERPART_UID", help="Database user")
@click.option("--pwd", envvar="COUNTERPART_PWD", help="Database password")
@click.option(
    "--conn-str",
    envvar="COUNTERPART_CONN_STR",
    help="SQLAlchemy connection URL (overrides server/database/uid/pwd)",
)
@click.option(
    "--log-dir",
    type=click.Path(),
    envvar="COUNTERPART_LOG_DIR",
    help="Directory for log files",
)
@click.option("-v", "--verbose", is_flag=True, help="Show tracebacks on errors")
@click.version_option(__version__, prog_name="counterpart")
@click.pass_context
def cli(
    ctx: click.Context,
    config_file: str,
    repo_path: str,
    generator_repo: str,
    server: str,
    database: str,
    uid: str,
    pwd: str,
    conn_str: str,
    log_dir: str,
    verbose: bool,
) -> None:
    """
    Counterpart - repository consistency checker.

    Validates that RLS functions, security policies and generated library
    folders have their counterpart tables and schemas, builds the generated
    library and runs the database test suite.
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["options"] = {
        "config_file": config_file,
        "repo": repo_path,
        "generator_repo": generator_repo,
        "server": server,
        "database": database,
        "uid": uid,
        "pwd": pwd,
        "connection_string": conn_str,
        "log_dir": log_dir,
    }


cli.add_command(repo)


# ═══════════════════════════════════════════════════════════════════════════
# FULL RUN
# ═══════════════════════════════════════════════════════════════════════════

@cli.command()
@click.option("--skip-lib", is_flag=True, help="Skip library update and build")
@click.option("--skip-db", is_flag=True, help="Skip database tests")
@click.option("--jobs", type=click.IntRange(min=1), default=None, help="Concurrent work items")
@click.pass_context
def check(ctx: click.Context, skip_lib: bool, skip_db: bool, jobs: int) -> None:
    """
    Run every check.

    Repository checks, the library update/build queue and the database
    tests run concurrently. Exits non-zero on any violation or failure.
    """
    from counterpart.builders.libbuilder import LibBuilder
    from counterpart.database.suite_runner import DatabaseTestRunner
    from counterpart.pipeline.runner import Runner, Work, print_run_report
    from counterpart.validators.repo import RepoValidator, print_violation_report

    settings = get_settings(ctx)
    logger = ctx.obj["logger"]
    stats = RunStats()

    validator = RepoValidator(settings.paths, logger=logger)
    runner = Runner(jobs=jobs, logger=logger)
    for name, fn in validator.checks():
        runner.add_work(fn, "repo", name)

    if not skip_lib:
        builder = LibBuilder(settings.paths, settings.generator_repo, settings.connection, logger)
        runner.add_queue([
            Work(builder.update, "lib", "update"),
            Work(builder.build, "lib", "build"),
        ])

    db_runner = None
    if not skip_db:
        try:
            url = settings.database_url()
        except ConfigurationError as e:
            handle_cli_error(ctx, e, "check", {"hint": "use --skip-db to run without a database"})
        db_runner = DatabaseTestRunner(url, settings.connection, logger)
        runner.add_work(db_runner.run_tests, "db", "running tests")

    click.echo(f"🚀 Running {len(runner)} work items against {settings.repo_root}")
    results = runner.execute()
    click.echo()

    if db_runner is not None:
        db_runner.print_results()
    print_violation_report(validator.violations)
    # db failures recorded by the test runner are already printed above
    db_printed = db_runner is not None and bool(db_runner.errors)
    print_run_report([r for r in results if not (r.group == "db" and db_printed)])

    stats.work_items = len(results)
    stats.violations = validator.violations.total
    stats.failures = sum(1 for r in results if not r.ok)
    logger.log_operation("check_complete", stats.to_dict())

    click.echo(stats.summary())
    click.echo("\ndone.")

    if not stats.is_clean:
        raise click.ClickException(
            f"{stats.violations} violation(s), {stats.failures} failed work item(s)"
        )


# ═══════════════════════════════════════════════════════════════════════════
# COLLABORATORS
# ═══════════════════════════════════════════════════════════════════════════

@cli.group()
def lib() -> None:
    """Update and build the generated library."""
    pass


def _lib_builder(ctx: click.Context):
    from counterpart.builders.libbuilder import LibBuilder

    settings = get_settings(ctx)
    return LibBuilder(
        settings.paths, settings.generator_repo, settings.connection, ctx.obj["logger"]
    )


def _fail(ctx: click.Context, error: Exception, operation: str) -> None:
    if isinstance(error, CollaboratorError) and error.output:
        click.echo(error.output, err=True)
    handle_cli_error(ctx, error, operation)


@lib.command()
@click.pass_context
def update(ctx: click.Context) -> None:
    """Regenerate library folders from the database model."""
    builder = _lib_builder(ctx)
    click.echo(f"🔄 Updating {builder.paths.lib}...")
    try:
        builder.update()
    except (ConfigurationError, CollaboratorError) as e:
        _fail(ctx, e, "lib_update")
    click.echo("✅ Library updated")


@lib.command()
@click.pass_context
def build(ctx: click.Context) -> None:
    """Compile the library project."""
    builder = _lib_builder(ctx)
    click.echo(f"🔨 Building {builder.paths.lib_project}...")
    try:
        builder.build()
    except CollaboratorError as e:
        _fail(ctx, e, "lib_build")
    click.echo("✅ Library built")


@cli.group()
def db() -> None:
    """Run the database test suite."""
    pass


@db.command(name="test")
@click.pass_context
def run_db_tests(ctx: click.Context) -> None:
    """Run every tSQLt test in the database."""
    from counterpart.database.suite_runner import DatabaseTestRunner

    settings = get_settings(ctx)
    try:
        url = settings.database_url()
    except ConfigurationError as e:
        handle_cli_error(ctx, e, "db_test")

    runner = DatabaseTestRunner(url, settings.connection, ctx.obj["logger"])
    click.echo("🧪 Running database tests...")
    try:
        runner.run_tests()
    except CollaboratorError as e:
        runner.print_results()
        handle_cli_error(ctx, e, "db_test")
    click.echo("✅ All database tests passed")


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
