"""CLI entry point for the hidden jobs engine."""

import argparse
import asyncio
import json
import logging
import sys

from hiddenjobs.core.config import Settings
from hiddenjobs.core.db import SqliteProfileStore
from hiddenjobs.core.errors import ValidationError
from hiddenjobs.core.schemas import EventType, LocationFilter, SearchEvent, TimeFilter
from hiddenjobs.platforms.catalog import ALL_SCOPE


def _add_common(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        default="config/settings.yaml",
        help="Path to settings YAML file (default: config/settings.yaml)",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose (DEBUG) logging",
    )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Hidden jobs engine - find postings mainstream boards do not surface",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # --- search ---
    search_parser = subparsers.add_parser("search", help="Search job platforms")
    search_parser.add_argument("query", help="Job title or keywords")
    search_parser.add_argument(
        "--platform",
        default=ALL_SCOPE,
        help=f"Platform scope id or '{ALL_SCOPE}' (default: {ALL_SCOPE})",
    )
    search_parser.add_argument(
        "--location",
        default=LocationFilter.ALL.value,
        choices=[f.value for f in LocationFilter],
    )
    search_parser.add_argument(
        "--time-filter",
        default=TimeFilter.ALL.value,
        choices=[f.value for f in TimeFilter],
    )
    search_parser.add_argument("--page", type=int, default=1)
    search_parser.add_argument("--limit", type=int, default=25)
    search_parser.add_argument("--user", help="Record the search in this user's history")
    search_parser.add_argument(
        "--stream",
        action="store_true",
        help="Print events as platforms finish instead of one page at the end",
    )
    search_parser.add_argument(
        "--export",
        choices=["json"],
        help="Export results to format (json)",
    )
    _add_common(search_parser)

    # --- recommend ---
    recommend_parser = subparsers.add_parser("recommend", help="Personalized recommendations for a user")
    recommend_parser.add_argument("--user", required=True, help="User id in the profile store")
    recommend_parser.add_argument("--limit", type=int, default=10)
    recommend_parser.add_argument("--export", choices=["json"], help="Export results to format (json)")
    _add_common(recommend_parser)

    # --- refresh-recommendations ---
    refresh_parser = subparsers.add_parser(
        "refresh-recommendations",
        help="Recompute cached recommendations for every user in the store",
    )
    _add_common(refresh_parser)

    # --- import-profile ---
    import_parser = subparsers.add_parser(
        "import-profile",
        help="Load preferences, resume analysis and history from a YAML file",
    )
    import_parser.add_argument("--user", required=True, help="User id to import into")
    import_parser.add_argument("--file", required=True, help="Path to profile YAML")
    _add_common(import_parser)

    # --- serve ---
    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", help="Bind host (default: from settings)")
    serve_parser.add_argument("--port", type=int, help="Bind port (default: from settings)")
    _add_common(serve_parser)

    return parser.parse_args(argv)


def setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def _print_event(event: SearchEvent) -> None:
    label = f"[{event.platform}] " if event.platform else ""
    if event.jobs:
        print(f"{label}{len(event.jobs)} new jobs ({event.total} so far)")
        for job in event.jobs:
            print(f"  {job.title} @ {job.company}  {job.url}")
    elif event.message:
        done = f" ({event.progress}%)" if event.progress is not None else ""
        print(f"{label}{event.type.value}: {event.message}{done}")


async def cmd_search(args: argparse.Namespace, settings: Settings) -> None:
    from hiddenjobs.api.container import build_container
    from hiddenjobs.pipeline.streaming import pump_events

    container = build_container(settings)
    raw = {
        "query": args.query,
        "platform": args.platform,
        "location": args.location,
        "time_filter": args.time_filter,
        "page": args.page,
        "limit": args.limit,
    }
    try:
        if args.stream:
            errors: list[str] = []

            async def send(event: SearchEvent) -> None:
                if event.type is EventType.ERROR:
                    errors.append(event.message or "invalid request")
                    return
                _print_event(event)

            await pump_events(container.streamer.stream(raw), send)
            if errors:
                msg = "; ".join(errors)
                raise ValidationError(msg)
            return

        response = await container.search.search(raw, user_id=args.user)
        if args.export == "json":
            print(json.dumps(response.to_api(), indent=2))
            return
        p = response.pagination
        print(f"\n{p.total_jobs} jobs found (page {p.current_page} of {max(p.total_pages, 1)})")
        for job in response.jobs:
            where = f" - {job.location}" if job.location else ""
            print(f"  [{job.platform}] {job.title} @ {job.company}{where}")
            print(f"      {job.url}")
    finally:
        await container.aclose()


async def cmd_recommend(args: argparse.Namespace, settings: Settings) -> None:
    from hiddenjobs.api.container import build_container

    container = build_container(settings)
    try:
        results = await container.ranking.recommend(args.user, args.limit)
    finally:
        await container.aclose()

    if args.export == "json":
        print(json.dumps([r.to_api() for r in results], indent=2))
        return
    print(f"\n{len(results)} recommendations for {args.user}")
    for r in results:
        print(f"  {r.score:3d}  {r.job.title} @ {r.job.company}")
        for reason in r.reasons:
            print(f"         - {reason}")


async def cmd_refresh(settings: Settings) -> None:
    from hiddenjobs.api.container import build_container

    container = build_container(settings)
    try:
        counts = await container.ranking.refresh_all(container.store.list_user_ids())
    finally:
        await container.aclose()
    print(f"Refreshed {len(counts)} users")
    for user_id, count in counts.items():
        print(f"  {user_id}: {count} recommendations")


def cmd_import_profile(args: argparse.Namespace, settings: Settings) -> None:
    from hiddenjobs.profile.schema import ProfileDocument

    document = ProfileDocument.from_yaml(args.file)
    store = SqliteProfileStore.open(settings.database.path)
    try:
        store.import_profile(
            args.user,
            preferences=document.preferences,
            resume_text=document.resume_text,
            analysis=document.resume_analysis,
            applications=document.application_pairs(),
            saved_titles=document.saved_jobs,
        )
    finally:
        store.close()
    print(f"Imported profile for {args.user} into {settings.database.path}")
    print(f"  Applications: {len(document.applications)}")
    print(f"  Saved jobs: {len(document.saved_jobs)}")


def cmd_serve(args: argparse.Namespace, settings: Settings) -> None:
    import uvicorn

    from hiddenjobs.api.app import create_app
    from hiddenjobs.api.container import build_container

    app = create_app(build_container(settings))
    uvicorn.run(
        app,
        host=args.host or settings.server.host,
        port=args.port or settings.server.port,
    )


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    setup_logging(args.verbose)

    try:
        settings = Settings.from_yaml(args.config)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        sys.exit(1)

    try:
        if args.command == "search":
            asyncio.run(cmd_search(args, settings))
        elif args.command == "recommend":
            asyncio.run(cmd_recommend(args, settings))
        elif args.command == "refresh-recommendations":
            asyncio.run(cmd_refresh(settings))
        elif args.command == "import-profile":
            cmd_import_profile(args, settings)
        elif args.command == "serve":
            cmd_serve(args, settings)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
