"""
Gridslot CLI - Command-line interface for the engine.

Usage:
    gridslot templates                 List catalog templates
    gridslot run <script>              Replay a command script and print the grid
    gridslot serve [--host --port]     Run the REST API

Script format (one command per line, # starts a comment):
    place Card 1 0
    move card-1 3
    expand card-1
    remove card-2
"""

import argparse
import shlex
import sys

from .config import load_settings
from .engine_core import Command, GridState, PlacementEngine
from .engine_core.ids import ID_STRATEGIES
from .logging_config import configure_logging


class ScriptError(ValueError):
    """A command script line could not be parsed."""

    def __init__(self, line_number: int, message: str):
        super().__init__(f"line {line_number}: {message}")
        self.line_number = line_number


def _slot(token: str, line_number: int) -> int:
    try:
        return int(token)
    except ValueError:
        raise ScriptError(line_number, f"slot must be an integer, got {token!r}") from None


def parse_script(text: str) -> list[Command]:
    """
    Parse a command script into commands.

    Template names may contain spaces; the last token of a place
    line is always the slot.
    """
    commands = []
    for line_number, raw in enumerate(text.splitlines(), start=1):
        line = raw.split("#", 1)[0].strip()
        if not line:
            continue

        try:
            parts = shlex.split(line)
        except ValueError as e:
            raise ScriptError(line_number, str(e)) from None

        verb, args = parts[0].lower(), parts[1:]

        if verb == "place" and len(args) >= 2:
            commands.append(Command.place(" ".join(args[:-1]), _slot(args[-1], line_number)))
        elif verb == "move" and len(args) == 2:
            commands.append(Command.move(args[0], _slot(args[1], line_number)))
        elif verb in ("expand", "toggle") and len(args) == 1:
            commands.append(Command.toggle_expand(args[0]))
        elif verb == "remove" and len(args) == 1:
            commands.append(Command.remove(args[0]))
        elif verb == "reset" and not args:
            commands.append(Command.reset())
        else:
            raise ScriptError(line_number, f"cannot parse {line!r}")

    return commands


def render_rows(state: GridState, cell_width: int = 14) -> str:
    """Plain-text view of the grid, one line per row."""
    if not state.cards:
        return "(empty grid)"

    lines = []
    for row_number, (left, right) in enumerate(state.rows()):
        if left is not None and left is right:
            label = f"{left.title} [{left.card_id}]"
            cells = label.center(cell_width * 2 + 3)
        else:
            cells = " | ".join(
                (f"{c.title} [{c.card_id}]" if c else ".").ljust(cell_width)
                for c in (left, right)
            )
        lines.append(f"{row_number:>3}: {cells}")
    return "\n".join(lines)


def main(argv: list[str] | None = None):
    """Main CLI entry point."""
    try:
        settings = load_settings()
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    parser = argparse.ArgumentParser(
        description="Gridslot - Two-column card grid placement engine",
        prog="gridslot",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    parser.add_argument("--log-json", action="store_true", help="JSON log lines on stderr")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    subparsers.add_parser("templates", help="List catalog templates")

    run_parser = subparsers.add_parser("run", help="Replay a command script")
    run_parser.add_argument("script", help="Path to script file")
    run_parser.add_argument(
        "--id-strategy",
        choices=sorted(ID_STRATEGIES),
        default=settings.id_strategy,
        help="Card id strategy",
    )

    serve_parser = subparsers.add_parser("serve", help="Run the REST API")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)

    args = parser.parse_args(argv)

    configure_logging(
        settings,
        verbose=args.verbose or None,
        log_json=args.log_json or None,
    )

    if args.command == "templates":
        cmd_templates(args)
    elif args.command == "run":
        cmd_run(args)
    elif args.command == "serve":
        cmd_serve(args, settings)
    else:
        parser.print_help()
        sys.exit(1)


def cmd_templates(args):
    """List catalog templates."""
    engine = PlacementEngine()
    for template in engine.catalog:
        print(f"{template.template_type}\t{template.title}")


def cmd_run(args):
    """Replay a command script."""
    from .engine_core import make_id_generator

    try:
        with open(args.script, "r", encoding="utf-8") as f:
            text = f.read()
    except OSError as e:
        print(f"Error: cannot read {args.script}: {e}", file=sys.stderr)
        sys.exit(1)

    try:
        commands = parse_script(text)
    except ScriptError as e:
        print(f"Error: {args.script}: {e}", file=sys.stderr)
        sys.exit(1)

    engine = PlacementEngine(id_generator=make_id_generator(args.id_strategy))
    for command in commands:
        result = engine.apply(command)
        if result.applied:
            for change in result.changes:
                print(change)
        else:
            print(f"Skipped {command.command_type.value}: {result.reason.value}")

    print()
    print(render_rows(engine.state))


def cmd_serve(args, settings):
    """Run the REST API with uvicorn."""
    import uvicorn

    from .api.app import create_app

    uvicorn.run(create_app(settings=settings), host=args.host, port=args.port, log_config=None)


if __name__ == "__main__":
    main()
