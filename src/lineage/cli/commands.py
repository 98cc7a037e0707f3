"""CLI command registration and handlers for the lineage index."""

from __future__ import annotations

import argparse
import importlib
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from lineage.contracts.error import BadInputError, Exit, InvariantError, NotFoundError
from lineage.genealogy import FamilyTree, Person


@dataclass(frozen=True)
class CLIContext:
    """Runtime hooks supplied by the top-level CLI entrypoint."""

    emit_success: Callable[..., None]
    build_tree: Callable[[argparse.Namespace], FamilyTree]
    service_settings: Callable[[], tuple[str, int]]
    logger: logging.Logger
    json_enabled: Callable[[], bool]
    guard: Callable[[Callable[[argparse.Namespace], int]], Callable[[argparse.Namespace], int]]


def register_subcommands(
    subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
    ctx: CLIContext,
) -> Dict[str, Callable[[argparse.Namespace], int]]:
    """Define CLI subcommands and return their handlers."""

    handlers: Dict[str, Callable[[argparse.Namespace], int]] = {}

    def _register(
        name: str,
        help_text: Optional[str],
        configure: Callable[[argparse.ArgumentParser], Callable[[argparse.Namespace], int]],
    ) -> None:
        parser = subparsers.add_parser(name, help=help_text)
        handler = configure(parser)
        handlers[name] = ctx.guard(handler)

    _register("lookup", "Show the record indexed under a name or nickname.", lambda p: _configure_lookup(p, ctx))
    _register("matches", "List people whose name contains a substring.", lambda p: _configure_matches(p, ctx))
    _register("ancestors", "List the known ancestors of a person.", lambda p: _configure_ancestors(p, ctx))
    _register("generation", "List the members of a generation (1 = roots).", lambda p: _configure_generation(p, ctx))
    _register("titles", "List holders of a title.", lambda p: _configure_titles(p, ctx))
    _register("stats", "Print index statistics.", lambda p: _configure_stats(p, ctx))
    _register("verify", "Audit hash table invariants.", lambda p: _configure_verify(p, ctx))
    _register("serve", "Serve the read-only lookup API.", lambda p: _configure_serve(p, ctx))

    return handlers


def _names(people: List[Person]) -> List[str]:
    return [person.name for person in people]


def _configure_lookup(
    parser: argparse.ArgumentParser, ctx: CLIContext
) -> Callable[[argparse.Namespace], int]:
    parser.add_argument("name")

    def handler(args: argparse.Namespace) -> int:
        tree = ctx.build_tree(args)
        person = tree.get_person(args.name)
        if person is None:
            raise NotFoundError(f"Person not found: {args.name}")
        text = "\n".join(f"{label}: {value}" for label, value in person.details())
        ctx.emit_success("lookup", text=text, data={"person": person.to_dict()})
        return int(Exit.OK)

    return handler


def _configure_matches(
    parser: argparse.ArgumentParser, ctx: CLIContext
) -> Callable[[argparse.Namespace], int]:
    parser.add_argument("substring")

    def handler(args: argparse.Namespace) -> int:
        tree = ctx.build_tree(args)
        names = _names(tree.find_matches(args.substring))
        text = "\n".join(names) if names else f"No matches found for: {args.substring}"
        ctx.emit_success("matches", text=text, data={"query": args.substring, "matches": names})
        return int(Exit.OK)

    return handler


def _configure_ancestors(
    parser: argparse.ArgumentParser, ctx: CLIContext
) -> Callable[[argparse.Namespace], int]:
    parser.add_argument("name")

    def handler(args: argparse.Namespace) -> int:
        tree = ctx.build_tree(args)
        if not tree.contains(args.name):
            raise NotFoundError(f"Person not found: {args.name}")
        ancestors = tree.ancestors(args.name)
        text = "\n".join(ancestors) if ancestors else "No known ancestors"
        ctx.emit_success("ancestors", text=text, data={"name": args.name, "ancestors": ancestors})
        return int(Exit.OK)

    return handler


def _configure_generation(
    parser: argparse.ArgumentParser, ctx: CLIContext
) -> Callable[[argparse.Namespace], int]:
    parser.add_argument("number", type=int)

    def handler(args: argparse.Namespace) -> int:
        tree = ctx.build_tree(args)
        members = tree.generation(args.number)
        text = "\n".join(members) if members else f"Generation {args.number} is empty"
        ctx.emit_success(
            "generation", text=text, data={"generation": args.number, "members": members}
        )
        return int(Exit.OK)

    return handler


def _configure_titles(
    parser: argparse.ArgumentParser, ctx: CLIContext
) -> Callable[[argparse.Namespace], int]:
    parser.add_argument("title")

    def handler(args: argparse.Namespace) -> int:
        tree = ctx.build_tree(args)
        holders = [(p.name, p.title) for p in tree.title_holders(args.title)]
        text = "\n".join(f"{name}: {title}" for name, title in holders) or "No title holders"
        data = {"title": args.title, "holders": [name for name, _ in holders]}
        ctx.emit_success("titles", text=text, data=data)
        return int(Exit.OK)

    return handler


def _configure_stats(
    parser: argparse.ArgumentParser, ctx: CLIContext
) -> Callable[[argparse.Namespace], int]:
    def handler(args: argparse.Namespace) -> int:
        tree = ctx.build_tree(args)
        stats = tree.stats()
        text = "\n".join(f"{key}: {value}" for key, value in stats.items())
        ctx.emit_success("stats", text=text, data={"stats": stats})
        return int(Exit.OK)

    return handler


def _configure_verify(
    parser: argparse.ArgumentParser, ctx: CLIContext
) -> Callable[[argparse.Namespace], int]:
    parser.add_argument("--verbose", action="store_true")

    def handler(args: argparse.Namespace) -> int:
        tree = ctx.build_tree(args)
        problems = tree.verify()
        if problems:
            for problem in problems:
                ctx.logger.error("verify: %s", problem)
            raise InvariantError(f"{len(problems)} invariant violation(s): {problems[0]}")
        lines = ["OK: index verified"]
        if args.verbose:
            stats = tree.stats()
            lines.append(
                f"Capacity={stats['capacity']}, Keys={stats['keys']}, "
                f"People={stats['people']}, MaxChain={stats['max_chain_length']}"
            )
        ctx.emit_success("verify", text="\n".join(lines), data={"problems": []})
        return int(Exit.OK)

    return handler


def _configure_serve(
    parser: argparse.ArgumentParser, ctx: CLIContext
) -> Callable[[argparse.Namespace], int]:
    parser.add_argument("--host", default=None, help="Interface to bind (default: config).")
    parser.add_argument("--port", type=int, default=None, help="Port to bind (default: config).")

    def handler(args: argparse.Namespace) -> int:
        tree = ctx.build_tree(args)
        default_host, default_port = ctx.service_settings()
        host = args.host or default_host
        port = default_port if args.port is None else args.port
        if not 0 <= port <= 65535:
            raise BadInputError(f"--port must be within [0, 65535], got {port}")

        from lineage.service import create_app

        app = create_app(tree)
        uvicorn: Any = importlib.import_module("uvicorn")
        ctx.logger.info("Serving lookup API on http://%s:%d", host, port)
        uvicorn.run(app, host=host, port=port, log_level="info")
        return int(Exit.OK)

    return handler


__all__ = ["CLIContext", "register_subcommands"]
