"""Command-line front end: ``modforge module`` and ``modforge component``."""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated, NoReturn
from uuid import uuid4

import typer
from pydantic import BaseModel, ValidationError

from modforge_common.errors import ConfigurationError, ErrorCode, ModforgeError, get_type_uri
from modforge_common.logging import LoggerAdapter, get_logger, setup_logging, with_fields
from modforge_common.problem_details import build_problem_details, render_problem
from modforge_common.settings import ModforgeSettings, load_settings

from modforge import __version__
from modforge.engine import execute_plan
from modforge.generators import generate_component, generate_module
from modforge.host import Host
from modforge.options import ComponentOptions, ModuleOptions, RoutingScope
from modforge.plan import Action, CreateFile, GenerationPlan, LintFix, OverwriteFile

CLI_COMMAND = "modforge"

LOGGER = get_logger(__name__)

EXIT_FAILURE = 1
EXIT_CONFIGURATION = 2

app = typer.Typer(
    help=f"Generate and register Angular-style modules and components ({__version__}).",
    no_args_is_help=True,
    add_completion=False,
)

NameArgument = Annotated[
    str,
    typer.Argument(help="Name of the unit to generate; may include directories."),
]
ProjectOption = Annotated[
    str | None,
    typer.Option("--project", help="Workspace project (default or sole project when omitted)."),
]
PathOption = Annotated[
    str | None,
    typer.Option("--path", help="Directory to generate under, relative to the workspace root."),
]
ModuleOption = Annotated[
    str | None,
    typer.Option("--module", "-m", help="Module descriptor to register the new unit in."),
]
FlatOption = Annotated[
    bool,
    typer.Option("--flat", help="Generate files without a dedicated folder."),
]
LintFixOption = Annotated[
    bool,
    typer.Option("--lint-fix", help="Run the configured lint-fix command afterwards."),
]
RootOption = Annotated[
    Path,
    typer.Option(
        "--root",
        file_okay=False,
        dir_okay=True,
        resolve_path=True,
        help="Workspace root directory.",
    ),
]
DryRunOption = Annotated[
    bool,
    typer.Option("--dry-run", "-d", help="Report the changes without writing them."),
]
VerboseOption = Annotated[
    bool,
    typer.Option("--verbose", "-v", help="Log at DEBUG level to stderr."),
]

type Generator = Callable[[Host, ModforgeSettings], GenerationPlan]


@dataclass(slots=True)
class _CommandContext:
    """Structured metadata shared across a single command invocation."""

    subcommand: str
    correlation_id: str
    logger: LoggerAdapter
    start: float

    def elapsed(self) -> float:
        return time.monotonic() - self.start

    def instance(self) -> str:
        return f"urn:{CLI_COMMAND}:{self.subcommand}:{self.correlation_id}"


def _display_path(path: str) -> str:
    return path.lstrip("/")


def _echo_action(action: Action) -> None:
    match action:
        case CreateFile(path=path, content=content) | OverwriteFile(path=path, content=content):
            typer.echo(f"{action.verb} {_display_path(path)} ({len(content)} bytes)")
        case LintFix(path=path):
            typer.echo(f"{action.verb} {_display_path(path)}")


def _build_options[T: BaseModel](model: type[T], **fields: object) -> T:
    """Validate CLI values into ``model``, raising ConfigurationError on failure."""
    try:
        return model.model_validate(fields)
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in exc.errors()
        )
        msg = f"Invalid options: {problems}"
        raise ConfigurationError(msg, cause=exc, context={"options": model.__name__}) from exc


def _exit_code_for(exc: ModforgeError) -> int:
    return EXIT_CONFIGURATION if isinstance(exc, ConfigurationError) else EXIT_FAILURE


def _fail_command(context: _CommandContext, exc: ModforgeError) -> NoReturn:
    problem = exc.to_problem_details(instance=context.instance())
    context.logger.log(
        exc.log_level,
        "Command failed: %s",
        exc.message,
        extra={
            "status": "error",
            "error_code": exc.code.value,
            "duration_ms": round(context.elapsed() * 1000, 2),
        },
    )
    typer.echo(exc.message, err=True)
    typer.echo(render_problem(problem), err=True)
    raise typer.Exit(code=_exit_code_for(exc))


def _fail_io(context: _CommandContext, exc: OSError) -> NoReturn:
    detail = f"Failed to write the workspace: {exc}"
    problem = build_problem_details(
        problem_type=get_type_uri(ErrorCode.RUNTIME_ERROR),
        title="OSError",
        status=500,
        detail=detail,
        instance=context.instance(),
        code=ErrorCode.RUNTIME_ERROR.value,
    )
    context.logger.error(
        "Command failed: %s", detail, extra={"status": "error"}, exc_info=exc
    )
    typer.echo(detail, err=True)
    typer.echo(render_problem(problem), err=True)
    raise typer.Exit(code=EXIT_FAILURE)


def _load_settings_or_exit(*, verbose: bool) -> ModforgeSettings:
    try:
        return load_settings(log_level="DEBUG") if verbose else load_settings()
    except ConfigurationError as exc:
        problem = exc.to_problem_details(instance=f"urn:{CLI_COMMAND}:settings")
        typer.echo(exc.message, err=True)
        typer.echo(render_problem(problem), err=True)
        raise typer.Exit(code=EXIT_CONFIGURATION) from exc


def _run(
    subcommand: str,
    generate: Generator,
    *,
    root: Path,
    dry_run: bool,
    verbose: bool,
) -> None:
    settings = _load_settings_or_exit(verbose=verbose)
    setup_logging(settings.log_level)
    correlation_id = uuid4().hex
    with with_fields(
        LOGGER,
        correlation_id=correlation_id,
        operation=subcommand,
        command=CLI_COMMAND,
    ) as logger:
        context = _CommandContext(
            subcommand=subcommand,
            correlation_id=correlation_id,
            logger=logger,
            start=time.monotonic(),
        )
        logger.info("Command started", extra={"status": "start", "root": str(root)})
        try:
            plan = generate(Host(root), settings)
            report = execute_plan(plan, root, settings, dry_run=dry_run, on_action=_echo_action)
        except ModforgeError as exc:
            _fail_command(context, exc)
        except OSError as exc:
            _fail_io(context, exc)
        logger.info(
            "Command completed",
            extra={
                "status": "success",
                "written": len(report.written),
                "duration_ms": round(context.elapsed() * 1000, 2),
            },
        )
        if dry_run:
            typer.echo('\nNOTE: The "--dry-run" option means no changes were made.')


@app.command("module")
def module_command(  # noqa: PLR0913 - one parameter per CLI option
    name: NameArgument,
    project: ProjectOption = None,
    path: PathOption = None,
    module: ModuleOption = None,
    route: Annotated[
        str | None,
        typer.Option("--route", help="Route path of a lazy loaded module; requires --module."),
    ] = None,
    routing_scope: Annotated[
        RoutingScope,
        typer.Option("--routing-scope", help="Scope of the generated routing module."),
    ] = RoutingScope.CHILD,
    flat: FlatOption = False,
    routing: Annotated[
        bool,
        typer.Option("--routing", help="Generate a routing module alongside the module."),
    ] = False,
    common_module: Annotated[
        bool,
        typer.Option("--common-module/--no-common-module", help="Import CommonModule."),
    ] = True,
    lint_fix: LintFixOption = False,
    root: RootOption = Path(),
    dry_run: DryRunOption = False,
    verbose: VerboseOption = False,
) -> None:
    """Create a module and import it, or lazily route to it with --route."""

    def generate(host: Host, settings: ModforgeSettings) -> GenerationPlan:
        options = _build_options(
            ModuleOptions,
            name=name,
            path=path,
            project=project,
            module=module,
            route=route,
            routing_scope=routing_scope,
            flat=flat,
            routing=routing,
            common_module=common_module,
            lint_fix=lint_fix,
        )
        return generate_module(host, options, settings)

    _run("module", generate, root=root, dry_run=dry_run, verbose=verbose)


@app.command("component")
def component_command(  # noqa: PLR0913 - one parameter per CLI option
    name: NameArgument,
    project: ProjectOption = None,
    path: PathOption = None,
    module: ModuleOption = None,
    flat: FlatOption = False,
    skip_import: Annotated[
        bool,
        typer.Option("--skip-import", help="Do not declare the component in a module."),
    ] = False,
    skip_tests: Annotated[
        bool,
        typer.Option("--skip-tests", help="Do not create the spec file."),
    ] = False,
    prefix: Annotated[
        str | None,
        typer.Option("--prefix", "-p", help="Selector prefix (project prefix when omitted)."),
    ] = None,
    selector: Annotated[
        str | None,
        typer.Option("--selector", help="Explicit element selector."),
    ] = None,
    style: Annotated[
        str | None,
        typer.Option("--style", help="Stylesheet extension (settings default when omitted)."),
    ] = None,
    lint_fix: LintFixOption = False,
    root: RootOption = Path(),
    dry_run: DryRunOption = False,
    verbose: VerboseOption = False,
) -> None:
    """Create a component and declare it in its module."""

    def generate(host: Host, settings: ModforgeSettings) -> GenerationPlan:
        options = _build_options(
            ComponentOptions,
            name=name,
            path=path,
            project=project,
            module=module,
            flat=flat,
            skip_import=skip_import,
            skip_tests=skip_tests,
            prefix=prefix,
            selector=selector,
            style=style,
            lint_fix=lint_fix,
        )
        return generate_component(host, options, settings)

    _run("component", generate, root=root, dry_run=dry_run, verbose=verbose)


def main() -> None:
    """Console-script entry point."""
    app()


if __name__ == "__main__":
    main()
