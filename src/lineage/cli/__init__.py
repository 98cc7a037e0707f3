"""Command-line front end for the lineage index."""

from .app import JsonFormatter, build_tree, configure_logging, console_main, emit_success, main
from .commands import CLIContext, register_subcommands

__all__ = [
    "CLIContext",
    "JsonFormatter",
    "build_tree",
    "configure_logging",
    "console_main",
    "emit_success",
    "main",
    "register_subcommands",
]
