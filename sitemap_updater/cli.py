"""
Command-line interface for the sitemap updater.

Usage:
    sitemap-updater [site options] update
    sitemap-updater [site options] add-page <filename> [priority] [changefreq]
    sitemap-updater [site options] status
    sitemap-updater [site options] watch
    sitemap-updater serve [--host HOST] [--port PORT]

Site options (--base-url, --source-dir, --output, --home) go before the
command and override the values loaded from the environment / .env file.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
import threading

from sitemap_updater.core.config import settings
from sitemap_updater.schemas.sitemap import ChangeFreq, SitemapConfig
from sitemap_updater.services.sitemap_generator import SitemapError, SitemapGenerator

ADD_PAGE_USAGE = """\
Usage: sitemap-updater add-page <filename> [priority] [changefreq]

Examples:
  sitemap-updater add-page portafolio.html
  sitemap-updater add-page blog.html 0.7 weekly
  sitemap-updater add-page nueva-pagina.html 0.9 monthly

Arguments:
  filename    - HTML file name (required)
  priority    - Priority (0.0 - 1.0, default: 0.8)
  changefreq  - Frequency: {freqs} (default: monthly)
""".format(freqs=", ".join(c.value for c in ChangeFreq))


def build_config(args: argparse.Namespace) -> SitemapConfig:
    config = settings.sitemap_config()
    overrides = {
        "base_url": args.base_url,
        "source_directory": args.source_dir,
        "destination_path": args.output,
        "home_filename": args.home,
    }
    overrides = {k: v for k, v in overrides.items() if v}
    if args.source_dir and not args.output and not settings.SITEMAP_PATH:
        overrides["destination_path"] = os.path.join(args.source_dir, "sitemap.xml")
    if not overrides:
        return config
    return SitemapConfig(**{**config.model_dump(), **overrides})


def run_update(args: argparse.Namespace) -> int:
    generator = SitemapGenerator(build_config(args))
    try:
        pages = generator.update()
    except SitemapError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    print(f"Sitemap updated successfully with {len(pages)} pages")
    return 0


def run_add_page(args: argparse.Namespace) -> int:
    if not args.filename:
        print(ADD_PAGE_USAGE)
        return 1

    priority = args.priority or "0.8"
    changefreq = args.changefreq or "monthly"

    print("Adding page to the sitemap...")
    print(f"   File:      {args.filename}")
    print(f"   Priority:  {priority}")
    print(f"   Frequency: {changefreq}")
    print()

    generator = SitemapGenerator(build_config(args))
    try:
        generator.add_page(args.filename, priority, changefreq)
    except SitemapError as e:
        print(f"Error adding the page: {e}", file=sys.stderr)
        return 1
    print(f"Page added to {generator.config.destination_path} successfully")
    return 0


def run_status(args: argparse.Namespace) -> int:
    generator = SitemapGenerator(build_config(args))
    try:
        pages = generator.status()
    except SitemapError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    print(f"{len(pages)} pages:")
    for page in pages:
        print(f"  {page.priority}  {page.changefreq:8s}  {page.url}")
    return 0


def run_watch(args: argparse.Namespace) -> int:
    from sitemap_updater.tasks.file_watcher import SitemapWatcher

    generator = SitemapGenerator(build_config(args))
    print("Watching HTML files...")
    print("   The sitemap is rewritten whenever an HTML file is created, modified or deleted")
    print("   Press Ctrl+C to stop\n")
    try:
        with SitemapWatcher(generator, debounce=settings.WATCH_DEBOUNCE_SECONDS):
            threading.Event().wait()
    except KeyboardInterrupt:
        print("\nStopping watcher...")
    except OSError as e:
        print(f"Watcher error: {e}", file=sys.stderr)
        return 1
    return 0


def run_serve(args: argparse.Namespace) -> int:
    import uvicorn

    uvicorn.run(
        "sitemap_updater.main:app",
        host=args.host or settings.HOST,
        port=args.port or settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sitemap-updater",
        description="Keep sitemap.xml in sync with the HTML pages of a static site.",
    )
    parser.add_argument("--base-url", default="", help="Site origin (default: BASE_URL)")
    parser.add_argument("--source-dir", default="", help="Directory with the HTML pages (default: SOURCE_DIRECTORY)")
    parser.add_argument("--output", default="", help="Sitemap file to write (default: <source-dir>/sitemap.xml)")
    parser.add_argument("--home", default="", help="File published as the site root (default: index.html)")
    sub = parser.add_subparsers(dest="command", required=True)

    p_update = sub.add_parser("update", help="Rescan pages and rewrite the sitemap")
    p_update.set_defaults(func=run_update)

    p_add = sub.add_parser("add-page", help="Add a page to the sitemap")
    p_add.add_argument("filename", nargs="?", help="HTML file name")
    p_add.add_argument("priority", nargs="?", help="Priority (0.0 - 1.0, default: 0.8)")
    p_add.add_argument("changefreq", nargs="?", help="Change frequency (default: monthly)")
    p_add.set_defaults(func=run_add_page)

    p_status = sub.add_parser("status", help="List the pages the sitemap describes")
    p_status.set_defaults(func=run_status)

    p_watch = sub.add_parser("watch", help="Rewrite the sitemap whenever pages change")
    p_watch.set_defaults(func=run_watch)

    p_serve = sub.add_parser("serve", help="Run the HTTP API")
    p_serve.add_argument("--host", default="", help="Bind address (default: HOST)")
    p_serve.add_argument("--port", type=int, default=0, help="Port (default: PORT)")
    p_serve.set_defaults(func=run_serve)

    return parser


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(level=settings.LOG_LEVEL)
    parser = build_parser()
    args = parser.parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())
