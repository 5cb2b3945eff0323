"""Command-line front door for walked.

Parses CLI options, resolves the start directory, and runs the browser.
On exit the last visited directory is printed so a shell function can
``cd`` into it.
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path

from .errors import FilesystemError
from .runtime import run_browser
from .runtime.config import default_config_data

LOG_ENV_VAR = "WALKED_LOG"

SHELL_FUNCTION_TEMPLATE = """\
{name}() {{
    _walked_dir="$(command walked "$@")" || return
    [ -n "$_walked_dir" ] && [ -d "$_walked_dir" ] && cd -- "$_walked_dir"
}}
"""


def _configure_logging() -> None:
    """Log to the file named by ``WALKED_LOG``; the terminal is busy otherwise."""
    log_path = os.environ.get(LOG_ENV_VAR)
    if not log_path:
        return
    logging.basicConfig(
        filename=log_path,
        level=logging.DEBUG,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def _write_last_dir(path: Path, directory: Path) -> None:
    try:
        path.write_text(f"{directory}\n", encoding="utf-8")
    except OSError as exc:
        raise SystemExit(f"Cannot write {path}: {exc.strerror or exc}") from exc


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="walked",
        description="Keyboard-driven multi-pane file browser that prints the last visited directory on exit.",
    )
    parser.add_argument("path", nargs="?", default=None, help="Start directory. Defaults to current directory.")
    parser.add_argument("--config", metavar="FILE", default=None, help="Config file (created with defaults if missing).")
    parser.add_argument("--print-config", action="store_true", help="Print the default config as JSON and exit.")
    parser.add_argument("--last-dir-path", metavar="FILE", default=None, help="Also write the exit directory to FILE.")
    parser.add_argument(
        "--shell-function",
        metavar="NAME",
        default=None,
        help="Print a shell function NAME that cds into the exit directory, then exit.",
    )
    return parser


def main(argv: list[str] | None = None, default_path: Path | None = None) -> None:
    """Parse CLI arguments and launch walked.

    ``default_path`` is primarily for tests; when omitted the current working
    directory is used.
    """
    args = build_parser().parse_args(argv)

    if args.print_config:
        sys.stdout.write(json.dumps(default_config_data(), indent=2) + "\n")
        return
    if args.shell_function is not None:
        sys.stdout.write(SHELL_FUNCTION_TEMPLATE.format(name=args.shell_function))
        return

    if default_path is None:
        default_path = Path.cwd()
    path = Path(args.path) if args.path is not None else default_path
    if not path.is_dir():
        raise SystemExit(f"Not a directory: {path}")

    _configure_logging()
    config_path = Path(args.config) if args.config is not None else None
    try:
        exit_directory = run_browser(path, config_path=config_path, create_missing=config_path is not None)
    except FilesystemError as exc:
        raise SystemExit(exc.message) from exc
    except OSError as exc:
        raise SystemExit(f"Cannot open terminal: {exc.strerror or exc}") from exc
    if exit_directory is None:
        return
    if args.last_dir_path is not None:
        _write_last_dir(Path(args.last_dir_path), exit_directory)
    sys.stdout.write(f"{exit_directory}\n")


if __name__ == "__main__":
    main()
