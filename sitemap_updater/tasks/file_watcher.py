"""
File watcher — rewrites the sitemap when HTML pages change on disk.

A watchdog observer reports create/modify/delete/move events for page files
in the source directory. Events do not trigger updates directly: they mark
an update as pending and a single worker thread runs it. Bursts of events
(an editor saving several files, a deploy copying a folder) therefore
collapse into one full rescan instead of queueing one rescan per event.
"""

from __future__ import annotations

import logging
import os
import threading
from typing import Optional

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from sitemap_updater.services.sitemap_generator import SitemapError, SitemapGenerator

logger = logging.getLogger(__name__)


class CoalescingUpdater:
    """
    Runs generator.update() on a background thread, at most one pending run.

    request() is cheap and thread-safe; calls made while a run is pending
    are absorbed by that run, calls made while a run is in progress schedule
    exactly one follow-up.
    """

    def __init__(self, generator: SitemapGenerator, debounce: float = 0.5):
        self.generator = generator
        self.debounce = debounce
        self.runs = 0
        self._cond = threading.Condition()
        self._pending = False
        self._running = False
        self._stopping = False
        self._thread: Optional[threading.Thread] = None

    def start(self) -> None:
        if self._thread is not None:
            return
        with self._cond:
            self._stopping = False
        self._thread = threading.Thread(target=self._run, name="sitemap-updater", daemon=True)
        self._thread.start()

    def stop(self, timeout: Optional[float] = 5.0) -> None:
        with self._cond:
            self._stopping = True
            self._cond.notify_all()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None

    def request(self) -> None:
        with self._cond:
            self._pending = True
            self._cond.notify_all()

    def wait_idle(self, timeout: Optional[float] = None) -> bool:
        """Block until no update is pending or running."""
        with self._cond:
            return self._cond.wait_for(lambda: not (self._pending or self._running), timeout)

    def _run(self) -> None:
        while True:
            with self._cond:
                self._cond.wait_for(lambda: self._pending or self._stopping)
                if self._stopping:
                    break
                # Let the rest of a burst arrive before rescanning
                if self.debounce and self._cond.wait_for(lambda: self._stopping, self.debounce):
                    break
                self._pending = False
                self._running = True
            try:
                self._update_once()
            finally:
                with self._cond:
                    self._running = False
                    self._cond.notify_all()
        with self._cond:
            self._pending = False
            self._cond.notify_all()

    def _update_once(self) -> None:
        try:
            pages = self.generator.update()
        except SitemapError as e:
            logger.error(f"Error updating sitemap: {e}")
            return
        except Exception as e:
            logger.error(f"Unexpected error updating sitemap: {e}", exc_info=True)
            return
        self.runs += 1
        logger.info(f"Sitemap updated with {len(pages)} pages")


class PageEventHandler(FileSystemEventHandler):
    """Forwards page-file events to the updater; everything else is ignored."""

    def __init__(self, updater: CoalescingUpdater, extension: str = ".html"):
        super().__init__()
        self.updater = updater
        self.extension = extension

    def is_page(self, path) -> bool:
        if isinstance(path, bytes):
            path = os.fsdecode(path)
        return bool(path) and os.path.basename(path).endswith(self.extension)

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.is_directory:
            return
        if event.event_type not in ("created", "modified", "deleted", "moved"):
            return
        paths = [event.src_path, getattr(event, "dest_path", "")]
        if not any(self.is_page(p) for p in paths):
            return

        filename = os.path.basename(os.fsdecode(event.src_path))
        if event.event_type == "created":
            logger.info(f"New file detected: {filename}")
        elif event.event_type == "modified":
            logger.info(f"File modified: {filename}")
        elif event.event_type == "deleted":
            logger.info(f"File deleted: {filename}")
        else:
            logger.info(f"File moved: {filename} -> {os.path.basename(os.fsdecode(event.dest_path))}")
        self.updater.request()


class SitemapWatcher:
    """
    Watches a SitemapGenerator's source directory and keeps its sitemap current.

    Usage:
        with SitemapWatcher(generator):
            ...  # sitemap is rewritten whenever a page changes
    """

    def __init__(self, generator: SitemapGenerator, debounce: float = 0.5):
        self.generator = generator
        self.updater = CoalescingUpdater(generator, debounce=debounce)
        self.handler = PageEventHandler(self.updater, generator.config.page_extension)
        self.observer: Optional[Observer] = None

    def start(self) -> None:
        directory = self.generator.config.source_directory
        observer = Observer()
        observer.schedule(self.handler, directory, recursive=False)
        self.updater.start()
        try:
            observer.start()
        except Exception:
            self.updater.stop()
            raise
        self.observer = observer
        logger.info(f"Watching {directory} for *{self.generator.config.page_extension} changes")

    def stop(self) -> None:
        if self.observer is not None:
            self.observer.stop()
            self.observer.join()
            self.observer = None
        self.updater.stop()
        logger.info("File watcher stopped")

    def __enter__(self) -> "SitemapWatcher":
        self.start()
        return self

    def __exit__(self, *exc_info) -> None:
        self.stop()
