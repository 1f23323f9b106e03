"""CLI entrypoints for aurora commands."""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from .config import ConfigError, load_config
from .engine import EngineError, ReadmeEngine
from .factory import build_engine
from .generators.base import GenerationError
from .locator import RepositoryLocatorError, locate
from .logging import configure_logging
from .postproc.badges import BADGE_KINDS, build_badge_markdown
from .prompting.constants import SECTION_TITLES, STYLES


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_style_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--style",
        choices=STYLES,
        default=None,
        help="Writing style for generated content (defaults to readme.style).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="aurora",
        description="Assemble README files from model-generated sections.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to .aurora.yml (defaults to $AURORA_CONFIG or the working directory).",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP service.")
    _add_verbose_option(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default=None, help="Interface to bind.")
    serve_parser.add_argument("--port", type=int, default=None, help="Port to listen on.")

    generate_parser = subparsers.add_parser(
        "generate",
        help="Generate every standard README section for a repository.",
    )
    _add_verbose_option(generate_parser, suppress_default=True)
    _add_style_option(generate_parser)
    generate_parser.add_argument("repo", help="GitHub URL or owner/repo string.")
    generate_parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=Path("README.md"),
        help="File to write (defaults to README.md).",
    )
    generate_parser.add_argument(
        "--logo",
        action="store_true",
        help="Also generate a logo and embed it above the title.",
    )

    improve_parser = subparsers.add_parser(
        "improve",
        help="Revise an existing README for wording and formatting.",
    )
    _add_verbose_option(improve_parser, suppress_default=True)
    _add_style_option(improve_parser)
    improve_parser.add_argument(
        "path",
        nargs="?",
        type=Path,
        default=Path("README.md"),
        help="README to revise (defaults to README.md).",
    )
    improve_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the revised README instead of writing it.",
    )

    badge_parser = subparsers.add_parser("badge", help="Print badge markdown for a repository.")
    _add_verbose_option(badge_parser, suppress_default=True)
    badge_parser.add_argument("repo", help="GitHub URL or owner/repo string.")
    badge_parser.add_argument("kind", choices=sorted(BADGE_KINDS))
    badge_parser.add_argument("--badge-style", default=None, help="shields.io visual style.")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for aurora commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose))

    if args.command == "badge":
        try:
            identity = locate(args.repo)
        except RepositoryLocatorError:
            parser.exit(1, "Invalid URL: provide a GitHub repository URL or owner/repo string.\n")
        print(build_badge_markdown(identity, args.kind, args.badge_style))
        return

    try:
        config = load_config(args.config)
    except ConfigError as exc:
        parser.exit(1, f"{exc}\n")

    if args.command == "serve":
        from .service import run_service

        run_service(host=args.host or config.service.host, port=args.port or config.service.port)
    elif args.command == "generate":
        engine = build_engine(config, persist=False)
        try:
            engine.set_repository(args.repo)
        except RepositoryLocatorError:
            parser.exit(1, "Invalid URL: provide a GitHub repository URL or owner/repo string.\n")
        try:
            content, complete = asyncio.run(
                _generate(engine, args.style, with_logo=bool(args.logo))
            )
        except EngineError as exc:
            parser.exit(1, f"aurora generate failed: {exc}\nRun with --verbose for more details.\n")
        args.output.write_text(content.rstrip() + "\n", encoding="utf-8")
        print(f"README written to {_relativize(args.output)}")
        if not complete:
            parser.exit(1, "aurora generate finished with errors; the README is incomplete.\n")
    elif args.command == "improve":
        if not args.path.exists():
            parser.exit(1, f"{args.path} not found\n")
        engine = build_engine(config, persist=False)
        engine.set_document(args.path.read_text(encoding="utf-8"))
        try:
            improved = asyncio.run(engine.revise_all(style=args.style))
        except (EngineError, GenerationError) as exc:
            parser.exit(1, f"aurora improve failed: {exc}\nRun with --verbose for more details.\n")
        if args.dry_run:
            print(improved)
        else:
            args.path.write_text(improved.rstrip() + "\n", encoding="utf-8")
            print(f"README improved at {_relativize(args.path)}")
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


async def _generate(
    engine: ReadmeEngine, style: str | None, *, with_logo: bool
) -> tuple[str, bool]:
    """Run generate-all (and the logo), returning the document and whether every step succeeded."""
    outcome = await engine.generate_all(style=style)
    complete = outcome.ok
    if not outcome.ok:
        title = SECTION_TITLES.get(outcome.failed_section or "", outcome.failed_section)
        print(f"Stopped at {title}: {outcome.error}", file=sys.stderr)
    if not with_logo:
        return engine.document, complete
    try:
        await engine.generate_logo()
    except GenerationError as exc:
        print(f"Logo failed: {exc}", file=sys.stderr)
        return engine.document, False
    return engine.compose_for_display(), complete


def _relativize(path: Path) -> str:
    try:
        return str(path.resolve().relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
