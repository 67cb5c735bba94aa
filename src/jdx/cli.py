"""Non-interactive command line front end.

Arguments use chz's ``name=value`` syntax::

    jdx file=store.json query='.books[price < 10] :sort price :pick title'
    jdx file=- schema=True < store.json
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import TextIO

import chz
from rich.console import Console

from .config import get_config, load_config, set_config
from .engine import run_query
from .errors import JdxError
from .runtime.logging import configure_logging, get_logger
from .schema import format_schema, infer_schema
from .values import JsonValue, compact_print, pretty_print


@chz.chz
class QueryCommand:
    file: str = chz.field(default="-", doc="JSON file to read, or '-' for stdin.")
    query: str = chz.field(default=".", doc="Path query with optional transform chain.")
    schema: bool = chz.field(default=False, doc="Print the inferred schema instead.")
    compact: bool = chz.field(default=False, doc="Print JSON on a single line.")
    max_samples: int | None = chz.field(
        default=None, doc="Array elements sampled for schema=True."
    )


def run(
    command: QueryCommand,
    *,
    stdin: TextIO | None = None,
    console: Console | None = None,
    err_console: Console | None = None,
) -> int:
    out = console if console is not None else Console()
    err = err_console if err_console is not None else Console(stderr=True)
    logger = get_logger()

    try:
        data = _load_input(command.file, stdin if stdin is not None else sys.stdin)
        if command.schema:
            root = run_query(data, command.query)
            rendered = format_schema(infer_schema(root, command.max_samples))
        else:
            result = run_query(data, command.query)
            rendered = _render(result, compact=command.compact)
    except (JdxError, json.JSONDecodeError, OSError) as exc:
        logger.debug("cli: %s failed: %s", command.query, exc)
        err.print(f"jdx: {exc}", markup=False, highlight=False)
        return 1

    out.print(rendered, markup=False, highlight=False, soft_wrap=True)
    return 0


def _load_input(file: str, stdin: TextIO) -> JsonValue:
    if file == "-":
        return json.loads(stdin.read())
    return json.loads(Path(file).expanduser().read_text(encoding="utf-8"))


def _render(value: JsonValue, *, compact: bool) -> str:
    if compact:
        return compact_print(value)
    return pretty_print(value, indent=get_config().indent)


def main(argv: list[str] | None = None) -> int:
    set_config(load_config())
    configure_logging()
    command = chz.entrypoint(QueryCommand, argv=argv)
    return run(command)


if __name__ == "__main__":
    raise SystemExit(main())
