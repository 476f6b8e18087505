"""Console entry point: argument parsing, pre-flight checks and the play session."""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Sequence

from nebula.core.logging import configure_logging, get_logger
from nebula.data.errors import DataError
from nebula.data.repositories import StoryRepository
from nebula.presentation.cli.config import CliConfig, load_config, save_config
from nebula.presentation.cli.render import ConsolePresenter, debug_enabled
from nebula.services import InputClosedError, InputValidator, MissingSceneError, StoryService
from nebula.services.story_graph_validator import EntryRoot, Issue, format_issue, has_errors, validate_story_graph

EXIT_OK = 0
EXIT_MISSING_SCENE = 1
EXIT_INVALID_STORY = 2
EXIT_INPUT_CLOSED = 3

_DEFAULT_TITLE = "Untitled Story"
_DEFAULT_FAREWELL = "Farewell, traveller."

log = get_logger(__name__)


def _non_negative_int(value: str) -> int:
    if not value.isascii() or not value.isdigit():
        raise argparse.ArgumentTypeError(f"expected a non-negative integer, got {value!r}")
    return int(value)


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="nebula", description="Play a branching text narrative.")
    parser.add_argument("--story", type=Path, help="Path to a story JSON file (defaults to the bundled story).")
    parser.add_argument("--start", type=_non_negative_int, help="Scene id to start from (defaults to the story's start).")
    parser.add_argument("--config", type=Path, help="Path to the options file.")
    parser.add_argument(
        "--validate",
        action="store_true",
        help="Only run the pre-flight graph checks and report the result.",
    )
    parser.add_argument(
        "--no-preflight",
        action="store_true",
        help="Start playing without validating the scene graph first.",
    )
    parser.add_argument(
        "--eof-policy",
        choices=("fallback", "abort"),
        help="What to do when input closes: pick option 1, or end the session.",
    )
    parser.add_argument("--typewriter", action="store_true", help="Print scene text one character at a time.")
    parser.add_argument("--pause-ms", type=_non_negative_int, help="Delay between the dots shown between scenes.")
    parser.add_argument("--save-config", action="store_true", help="Persist the effective options and continue.")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Increase log verbosity.")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    """Run the CLI and return the process exit status."""
    args = parse_args(argv)
    configure_logging(max(args.verbose, 2) if debug_enabled() else args.verbose)
    config = _resolve_config(args)

    story_repo = StoryRepository.from_file(args.story) if args.story else StoryRepository()
    try:
        story_service = StoryService.from_repository(story_repo)
    except DataError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return EXIT_INVALID_STORY
    start_id = args.start if args.start is not None else story_service.start_scene_id

    if args.validate:
        return _run_validation_report(story_service, start_id)
    if not args.no_preflight:
        issues = _preflight(story_service, start_id)
        if has_errors(issues):
            for issue in issues:
                if issue.severity == "ERROR":
                    print(format_issue(issue), file=sys.stderr)
            return EXIT_INVALID_STORY

    presenter = ConsolePresenter(config)
    validator = InputValidator(eof_policy=config.eof_policy)
    presenter.banner(story_repo.title or _DEFAULT_TITLE, story_repo.tagline)
    try:
        story_service.play(presenter, validator, start_id)
    except MissingSceneError as exc:
        print(f"ERROR: Missing scene {exc.scene_id}", file=sys.stderr)
        return EXIT_MISSING_SCENE
    except InputClosedError:
        print("Input closed. Ending the session.", file=sys.stderr)
        return EXIT_INPUT_CLOSED
    presenter.farewell(story_repo.farewell or _DEFAULT_FAREWELL)
    return EXIT_OK


def _resolve_config(args: argparse.Namespace) -> CliConfig:
    config = load_config(args.config).with_overrides(
        eof_policy=args.eof_policy,
        text_display_mode="typewriter" if args.typewriter else None,
        pause_ms=args.pause_ms,
    )
    if args.save_config:
        save_config(config, args.config)
    return config


def _entry_roots(start_id: int) -> List[EntryRoot]:
    return [
        EntryRoot(
            scene_id=start_id,
            source_type="story_start",
            source_id="session",
            source_field="start",
        )
    ]


def _preflight(story_service: StoryService, start_id: int) -> List[Issue]:
    issues = validate_story_graph(story_service.graph, _entry_roots(start_id))
    for issue in issues:
        if issue.severity == "WARN":
            log.warning("story_graph_issue", issue=format_issue(issue))
    return issues


def _run_validation_report(story_service: StoryService, start_id: int) -> int:
    issues = validate_story_graph(story_service.graph, _entry_roots(start_id))
    errors = [issue for issue in issues if issue.severity == "ERROR"]
    warnings = [issue for issue in issues if issue.severity == "WARN"]
    for issue in issues:
        print(format_issue(issue))
    print(
        "Story graph validation summary: "
        f"scenes={len(story_service.graph)} start={start_id} "
        f"errors={len(errors)} warnings={len(warnings)}"
    )
    return EXIT_INVALID_STORY if errors else EXIT_OK
