#!/usr/bin/env python3
"""
Warm the Redis cache for frequently requested lesson paths.

Resolves each path through the same ContentResolver the service uses, so a
successful run leaves ``github:{path}`` keys in Redis for the next hour.
Run it after a deploy or before a new quarter goes live.
"""

import argparse
import asyncio
import json
from pathlib import Path
from typing import Dict, List, Optional
import sys
import os

sys.path.append(os.path.join(os.path.dirname(__file__), '..'))

from shared.config import get_config  # noqa: E402
from shared.errors import ProxyException  # noqa: E402
from shared.logging import configure_logging  # noqa: E402
from service_lessons.app.cache.redis_cache import RedisCache, cache_key  # noqa: E402
from service_lessons.app.models import LessonPath  # noqa: E402
from service_lessons.app.origin.github_client import GitHubContentsClient  # noqa: E402
from service_lessons.app.resolver import ContentResolver  # noqa: E402


async def warm_paths(resolver: ContentResolver, paths: List[LessonPath], concurrency: int) -> Dict:
    """Resolve every path with bounded concurrency and return the summary."""
    semaphore = asyncio.Semaphore(max(1, concurrency))
    errors: Dict[str, str] = {}

    async def _warm(path: LessonPath) -> bool:
        async with semaphore:
            try:
                await resolver.resolve(path)
                return True
            except ProxyException as exc:
                errors[path.canonical] = exc.message
                return False

    results = await asyncio.gather(*(_warm(path) for path in paths))
    return {
        "requested": len(paths),
        "warmed": sum(1 for ok in results if ok),
        "failed": len(errors),
        "errors": errors,
    }


async def warm(
    *,
    paths: List[LessonPath],
    redis_url: Optional[str],
    concurrency: int,
    dry_run: bool,
) -> dict:
    """Execute cache warming and return the summary."""
    if dry_run:
        return {
            "requested": len(paths),
            "planned_keys": [cache_key(path.canonical) for path in paths],
        }

    overrides = {"redis_url": redis_url} if redis_url else {}
    config = get_config("lessons", 8020, **overrides)
    configure_logging("lessons", config.log_level)

    cache = RedisCache(config.redis_url)
    origin = GitHubContentsClient(
        config.origin_base_url,
        config.require_token(),
        timeout=config.origin_timeout_seconds,
    )
    resolver = ContentResolver(
        cache,
        origin,
        ttl_seconds=config.cache_ttl_seconds,
        allow_empty_listings=config.allow_empty_listings,
    )

    await cache.start()
    try:
        return await warm_paths(resolver, paths, concurrency)
    finally:
        await cache.stop()


def load_paths(cli_paths: List[str], paths_file: Optional[Path]) -> List[LessonPath]:
    """Collect paths from the command line and an optional file, one per line."""
    raw = list(cli_paths)
    if paths_file:
        for line in paths_file.read_text().splitlines():
            line = line.strip()
            if line and not line.startswith("#"):
                raw.append(line)

    seen = {}
    for item in raw:
        path = LessonPath.parse(item)
        seen.setdefault(path.canonical, path)
    return list(seen.values())


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Warm Redis caches for lesson paths.")
    parser.add_argument("--path", dest="paths", action="append", default=[], help="Lesson path, e.g. en/2024-q1 (repeatable)")
    parser.add_argument("--paths-file", type=Path, default=None, help="File with one lesson path per line")
    parser.add_argument("--redis-url", default=None, help="Redis connection URL (defaults to LESSONS_REDIS_URL)")
    parser.add_argument("--concurrency", type=int, default=5, help="Concurrent warm operations")
    parser.add_argument("--dry-run", action="store_true", help="Do not contact Redis or GitHub; print planned keys")
    parser.add_argument("--output", type=Path, default=None, help="Optional path to write JSON summary")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = _parse_args(argv)
    try:
        paths = load_paths(args.paths, args.paths_file)
    except ProxyException as exc:
        print(f"[cache-warm] invalid path: {exc.message}", file=sys.stderr)
        return 2

    if not paths:
        print("[cache-warm] no paths given", file=sys.stderr)
        return 2

    try:
        summary = asyncio.run(
            warm(
                paths=paths,
                redis_url=args.redis_url,
                concurrency=args.concurrency,
                dry_run=args.dry_run,
            )
        )
    except KeyboardInterrupt:
        return 130
    except ProxyException as exc:
        print(f"[cache-warm] failed: {exc.message}", file=sys.stderr)
        return 1

    if args.dry_run:
        print("[cache-warm] DRY RUN - no Redis writes executed")

    print(json.dumps(summary, indent=2))

    if args.output:
        args.output.write_text(json.dumps(summary, indent=2))

    return 0 if not summary.get("failed") else 1


if __name__ == "__main__":
    raise SystemExit(main())
