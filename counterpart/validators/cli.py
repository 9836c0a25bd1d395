"""
Repository Validation Commands
------------------------------

Commands for checking naming-convention counterparts in the repository.

Commands:
    - empty: Find empty .sql/.cs files
    - functions: Find RLS read functions without a table
    - policies: Find security policies without a table
    - libs: Find generated library folders without a schema
    - all: Run all four checks concurrently
"""
from typing import Callable, List

import click

from counterpart.core.cli import get_settings
from counterpart.core.exceptions import StructuralError
from counterpart.core.logging_manager import handle_cli_error


def _validator(ctx: click.Context):
    from counterpart.validators.repo import RepoValidator

    settings = get_settings(ctx)
    return RepoValidator(settings.paths, logger=ctx.obj.get("logger"))


def _run_single(
    ctx: click.Context,
    check: Callable[[], List[str]],
    operation: str,
    label: str,
) -> None:
    """Run one check, print its report and fail on violations."""
    from counterpart.validators.repo import print_violation_report

    try:
        items = check()
    except StructuralError as e:
        handle_cli_error(ctx, e, operation, {"path": str(e.path)})

    if items:
        print_violation_report(ctx.obj["validator"].violations)
        raise click.ClickException(f"Found {len(items)} {label}")
    click.echo(f"✅ No {label}")


@click.group()
@click.pass_context
def repo(ctx: click.Context) -> None:
    """
    Validate repository naming conventions.

    Check that RLS functions and security policies have a table file, that
    generated library folders have a schema file, and that no source file
    is empty.
    """
    ctx.ensure_object(dict)


@repo.command()
@click.pass_context
def empty(ctx: click.Context) -> None:
    """Find .sql and .cs files smaller than 3 bytes."""
    validator = ctx.obj["validator"] = _validator(ctx)
    click.echo(f"🔍 Scanning {validator.paths.root} for empty files...\n")
    _run_single(ctx, validator.check_empty_files, "repo_empty", "empty files")


@repo.command()
@click.pass_context
def functions(ctx: click.Context) -> None:
    """Find RLS read functions whose table file is missing."""
    validator = ctx.obj["validator"] = _validator(ctx)
    click.echo(f"🔍 Checking RLS functions in {validator.paths.functions}...\n")
    _run_single(
        ctx, validator.check_functions_missing_table, "repo_functions", "rls functions missing table"
    )


@repo.command()
@click.pass_context
def policies(ctx: click.Context) -> None:
    """Find security policies whose table file is missing."""
    validator = ctx.obj["validator"] = _validator(ctx)
    click.echo(f"🔍 Checking security policies in {validator.paths.policies}...\n")
    _run_single(
        ctx, validator.check_policies_missing_table, "repo_policies", "policies missing table"
    )


@repo.command()
@click.pass_context
def libs(ctx: click.Context) -> None:
    """Find generated library folders whose schema file is missing."""
    validator = ctx.obj["validator"] = _validator(ctx)
    click.echo(f"🔍 Checking library folders in {validator.paths.lib}...\n")
    _run_single(ctx, validator.check_libs_missing_schema, "repo_libs", "libs missing schema")


@repo.command(name="all")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Report format",
)
@click.option("--jobs", type=click.IntRange(min=1), default=4, help="Concurrent checks")
@click.pass_context
def all_checks(ctx: click.Context, output_format: str, jobs: int) -> None:
    """
    Run all repository checks.

    The checks run concurrently. A check that cannot read its directory is
    reported as failed; the others still report their violations.
    """
    from counterpart.pipeline.runner import Runner, print_run_report
    from counterpart.validators.repo import print_violation_report, render_json

    validator = _validator(ctx)
    runner = Runner(jobs=jobs, logger=ctx.obj.get("logger"))
    for name, check in validator.checks():
        runner.add_work(check, "repo", name)

    if output_format == "text":
        click.echo(f"🔍 Validating repository {validator.paths.root}\n")

    results = runner.execute()
    failures = [r for r in results if not r.ok]
    violations = validator.violations

    if output_format == "json":
        click.echo(render_json(violations, [(r.name, r.error) for r in failures]))
    else:
        print_violation_report(violations)
        print_run_report(results)

    if failures:
        raise click.ClickException(f"{len(failures)} check(s) could not run")
    if not violations.is_clean:
        raise click.ClickException(f"Found {violations.total} violation(s)")
    if output_format == "text":
        click.echo("✅ Repository follows all naming conventions")
