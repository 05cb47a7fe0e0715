"""Top-level orchestration: argv in, exit code out.

Global options are pulled out of argv first so they work on every command.
Resource commands are generated from the endpoint registry as plain click
commands and hung off the root Typer group; every one of them runs the same
pipeline: token -> request builder -> transport -> classifier or renderer.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, Sequence

import click
import typer
from rich.console import Console

from vector_cli.config import AppContext, GlobalOptions, build_context
from vector_cli.errors import RegistryError, UnknownCommandError, ValidationError, VectorError
from vector_cli.log import setup_logging
from vector_cli.registry import EndpointDescriptor, EndpointRegistry, FieldSpec, FieldType
from vector_cli.services import classifier, renderer, request_builder
from vector_cli.services.output_mode import OutputMode, is_terminal, resolve
from vector_cli.services.transport import ApiResponse
from vector_common.constants import EXIT_GENERAL_ERROR, EXIT_INTERRUPTED, EXIT_SUCCESS

log = logging.getLogger(__name__)

PROG_NAME = "vector"

_FLAGS = {"--json", "--no-json", "--compact", "-v", "--verbose"}
_VALUED = {"--token": "token", "--api-url": "api_url"}

ContextFactory = Callable[[GlobalOptions, OutputMode], AppContext]


def extract_global_options(argv: Sequence[str]) -> tuple[GlobalOptions, list[str]]:
    """Split universal options out of *argv*; everything after ``--`` is left alone."""
    options = GlobalOptions()
    json_flag = no_json_flag = False
    rest: list[str] = []
    args = list(argv)
    index = 0
    while index < len(args):
        arg = args[index]
        index += 1
        if arg == "--":
            rest.append(arg)
            rest.extend(args[index:])
            break
        if arg in _FLAGS:
            if arg == "--json":
                json_flag = True
            elif arg == "--no-json":
                no_json_flag = True
            elif arg == "--compact":
                options.compact = True
            else:
                options.verbose = True
            continue
        name, _, inline = arg.partition("=")
        if name in _VALUED:
            if inline:
                value = inline
            elif "=" in arg or index >= len(args):
                raise ValidationError(f"Option {name} requires a value")
            else:
                value = args[index]
                index += 1
            setattr(options, _VALUED[name], value)
            continue
        rest.append(arg)

    if json_flag:
        options.json = True
    elif no_json_flag:
        options.json = False
    return options, rest


def make_command(descriptor: EndpointDescriptor) -> click.Command:
    """Generate the click command for one descriptor."""
    params: list[click.Parameter] = [
        click.Argument([name], required=False, metavar=name.upper()) for name in descriptor.params
    ]
    for spec in descriptor.fields:
        params.extend(_options_for(spec))
    if descriptor.confirm:
        if descriptor.field("force"):
            raise RegistryError(f"'{descriptor.command}': 'force' clashes with --force")
        params.append(click.Option(["--force"], is_flag=True, help="Skip confirmation prompt"))

    def callback(**kwargs: Any) -> None:
        app_ctx = click.get_current_context().find_object(AppContext)
        if app_ctx is None:
            raise VectorError("No application context")
        path_args = [kwargs.pop(name) for name in descriptor.params]
        force = bool(kwargs.pop("force", False))
        execute(app_ctx, descriptor, path_args, _collect_fields(descriptor, kwargs), force=force)

    return click.Command(
        descriptor.verb,
        params=params,
        callback=callback,
        help=descriptor.help or None,
        short_help=descriptor.help or None,
    )


def _options_for(spec: FieldSpec) -> list[click.Option]:
    help_text = spec.help
    if spec.choices:
        help_text = f"{help_text} [{'|'.join(spec.choices)}]".strip()
    if spec.default is not None:
        help_text = f"{help_text} (default: {spec.default})".strip()
    if spec.required:
        help_text = f"{help_text} (required)".strip()

    if spec.type is FieldType.BOOLEAN:
        return [
            click.Option([spec.option, spec.name], is_flag=True, default=False, help=help_text),
            click.Option([spec.off_option, f"{spec.name}__off"], is_flag=True, default=False),
        ]
    if spec.type is FieldType.LIST:
        return [click.Option([spec.option, spec.name], multiple=True, help=help_text)]
    return [click.Option([spec.option, spec.name], default=None, help=help_text)]


def _collect_fields(descriptor: EndpointDescriptor, kwargs: Mapping[str, Any]) -> dict[str, Any]:
    fields: dict[str, Any] = {}
    for spec in descriptor.fields:
        if spec.type is FieldType.BOOLEAN:
            if kwargs.get(spec.name):
                fields[spec.name] = True
            elif kwargs.get(f"{spec.name}__off"):
                fields[spec.name] = False
            continue
        value = kwargs.get(spec.name)
        if value is None or value == ():
            continue
        fields[spec.name] = list(value) if isinstance(value, tuple) else value
    return fields


def attach_registry(
    root: click.Group,
    registry: EndpointRegistry,
    help_texts: Mapping[str, str] | None = None,
) -> click.Group:
    """Hang one click command per descriptor off *root*, creating noun groups."""
    help_texts = help_texts or {}
    for descriptor in registry:
        group = root
        for depth, part in enumerate(descriptor.noun):
            sub = group.commands.get(part)
            if sub is None:
                key = " ".join(descriptor.noun[: depth + 1])
                sub = click.Group(part, no_args_is_help=True, help=help_texts.get(key))
                group.add_command(sub, part)
            elif not isinstance(sub, click.Group):
                raise RegistryError(f"'{part}' is both a command and a noun")
            group = sub
        if descriptor.verb in group.commands:
            raise RegistryError(f"Duplicate command '{descriptor.command}'")
        group.add_command(make_command(descriptor), descriptor.verb)
    return root


def execute(
    app_ctx: AppContext,
    descriptor: EndpointDescriptor,
    path_args: Sequence[Any],
    fields: Mapping[str, Any],
    *,
    force: bool = False,
) -> ApiResponse | None:
    """Run one descriptor through the full pipeline and write its output."""
    log.debug("Dispatching '%s'", descriptor.command)
    token = None if descriptor.anonymous else app_ctx.credentials.resolve()
    request = request_builder.build(descriptor, path_args, fields, token, app_ctx.api_url)

    context = {name: value for name, value in zip(descriptor.params, path_args)}
    if descriptor.confirm and not force:
        prompt = renderer.format_template(descriptor.confirm, None, context)
        try:
            confirmed = typer.confirm(prompt, default=False, err=True)
        except click.Abort:
            # EOF on stdin counts as "no"
            confirmed = False
        if not confirmed:
            app_ctx.console.out("Aborted.", highlight=False)
            return None

    response = app_ctx.transport.execute(request)
    if not response.ok:
        raise classifier.to_error(response)

    context.update((k, v) for k, v in fields.items() if v is not None)
    output = renderer.render(
        response.body,
        descriptor.shape,
        app_ctx.output_mode,
        context=context,
        pretty=app_ctx.pretty,
    )
    output.write(app_ctx.console, app_ctx.err_console)
    return response


def report_error(
    err: VectorError,
    mode: OutputMode,
    err_console: Console,
    *,
    pretty: bool = True,
) -> int:
    """Write *err* to stderr in the invocation's output mode; return its exit code."""
    if mode is OutputMode.JSON:
        err_console.out(renderer.to_json({"error": err.to_dict()}, pretty), highlight=False)
    else:
        err_console.out(f"Error: {err.message}", highlight=False)
        for line in err.details():
            err_console.out(f"  {line}", highlight=False)
    return err.exit_code


def _resolve_path(root: click.Group, args: Sequence[str]) -> tuple[list[str], click.Command, int]:
    """Follow subcommand names through the click tree until the first option or leaf."""
    path: list[str] = []
    node: click.Command = root
    index = 0
    while index < len(args) and isinstance(node, click.Group):
        token = args[index]
        if token.startswith("-"):
            break
        sub = node.commands.get(token)
        if sub is None:
            raise _Unknown(path + [token], node)
        path.append(token)
        node = sub
        index += 1
    return path, node, index


class _Unknown(Exception):
    def __init__(self, path: list[str], group: click.Group):
        super().__init__(" ".join(path))
        self.path = path
        self.group = group


def _group_help(root: click.Group, path: Sequence[str]) -> str:
    ctx = click.Context(root, info_name=PROG_NAME)
    node: click.Command = root
    for name in path:
        node = node.commands[name]  # type: ignore[attr-defined]
        ctx = click.Context(node, info_name=name, parent=ctx)
    return ctx.get_help()


def _json_flag(argv: Sequence[str]) -> bool | None:
    """``--json`` / ``--no-json`` as given before any ``--``, for errors raised during extraction."""
    args = list(argv)
    if "--" in args:
        args = args[: args.index("--")]
    if "--json" in args:
        return True
    if "--no-json" in args:
        return False
    return None


def run(
    argv: Sequence[str],
    *,
    root: click.Group,
    registry: EndpointRegistry,
    context_factory: ContextFactory | None = None,
    stdout_is_terminal: bool | None = None,
    console: Console | None = None,
    err_console: Console | None = None,
) -> int:
    """Execute one CLI invocation and return the process exit code."""
    err_console = err_console or Console(stderr=True)
    terminal = is_terminal() if stdout_is_terminal is None else stdout_is_terminal

    try:
        options, args = extract_global_options(argv)
    except ValidationError as exc:
        return report_error(exc, resolve(_json_flag(argv), terminal), err_console)

    mode = resolve(options.json, terminal)
    setup_logging(options.verbose, console=err_console)

    try:
        path, node, consumed = _resolve_path(root, args)
    except _Unknown as unknown:
        command = " ".join(unknown.path)
        err = UnknownCommandError(
            command,
            suggestions=registry.suggestions(command),
            available=sorted(unknown.group.commands),
        )
        return report_error(err, mode, err_console, pretty=not options.compact)

    if isinstance(node, click.Group) and consumed == len(args):
        (console or Console()).out(_group_help(root, path), highlight=False)
        return EXIT_SUCCESS

    factory = context_factory or (
        lambda opts, m: build_context(opts, m, console=console, err_console=err_console)
    )
    try:
        app_ctx = factory(options, mode)
    except VectorError as exc:
        return report_error(exc, mode, err_console, pretty=not options.compact)

    try:
        rv = root.main(list(args), prog_name=PROG_NAME, standalone_mode=False, obj=app_ctx)
    except VectorError as exc:
        return report_error(exc, mode, app_ctx.err_console, pretty=app_ctx.pretty)
    except click.UsageError as exc:
        err = ValidationError(exc.format_message())
        return report_error(err, mode, app_ctx.err_console, pretty=app_ctx.pretty)
    except click.ClickException as exc:
        err = VectorError(exc.format_message(), exit_code=EXIT_GENERAL_ERROR)
        return report_error(err, mode, app_ctx.err_console, pretty=app_ctx.pretty)
    except (click.Abort, KeyboardInterrupt):
        app_ctx.err_console.out("", highlight=False)
        return EXIT_INTERRUPTED
    finally:
        app_ctx.close()
    return rv if isinstance(rv, int) else EXIT_SUCCESS
