"""
Sitemap Generator — Rebuilds sitemap.xml from a directory of HTML pages.

Every update is a full rescan followed by a full rewrite:
    1. Scan the source directory → ordered list of PageRecords
    2. Merge one optional extra record (skipped if its url already exists)
    3. Render the <urlset> document
    4. Replace the destination file atomically

Nothing is cached between calls; the XML file is the only persisted state.
This module never logs or prints — callers decide how to report errors.
"""

from __future__ import annotations

import os
import tempfile
import threading
from datetime import datetime, timezone
from typing import Optional
from xml.sax.saxutils import escape

from sitemap_updater.schemas.sitemap import (
    DEFAULT_CHANGEFREQ,
    DEFAULT_PRIORITY,
    ChangeFreq,
    PageRecord,
    SitemapConfig,
)


SITEMAP_NS = "http://www.sitemaps.org/schemas/sitemap/0.9"

HOME_PRIORITY = "1.0"
HOME_CHANGEFREQ = ChangeFreq.WEEKLY.value

# Each rule is checked in order; first match wins. Matching is case-sensitive.
_RULES: list[tuple[tuple[str, ...], str, Optional[str]]] = [
    (("service", "servicio"),     "0.9", None),
    (("about", "nosotros"),       "0.8", None),
    (("contact", "contacto"),     "0.8", None),
    (("blog",),                   "0.7", ChangeFreq.WEEKLY.value),
    (("portafolio", "portfolio"), "0.9", None),
]

# One lock per destination path, shared by every generator in the process
_write_locks: dict[str, threading.Lock] = {}
_write_locks_guard = threading.Lock()


class SitemapError(Exception):
    """Base exception for sitemap generation failures"""
    pass


class ScanError(SitemapError):
    """The source directory could not be listed"""
    pass


class WriteError(SitemapError):
    """The sitemap file could not be written"""
    pass


class InvalidPageError(SitemapError, ValueError):
    """A page supplied by a caller is missing a filename or has bad values"""
    pass


def classify_page(filename: str) -> tuple[str, str]:
    """Return (priority, changefreq) for a page file name."""
    for markers, priority, changefreq in _RULES:
        if any(marker in filename for marker in markers):
            return priority, changefreq or DEFAULT_CHANGEFREQ
    return DEFAULT_PRIORITY, DEFAULT_CHANGEFREQ


def normalize_priority(value) -> str:
    """
    Format a priority as a one-decimal string.

    Raises:
        InvalidPageError: if the value is not a number in [0.0, 1.0]
    """
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidPageError(f"Invalid priority: {value!r}")
    if not 0.0 <= number <= 1.0:
        raise InvalidPageError(f"Priority must be between 0.0 and 1.0, got {value!r}")
    return f"{number:.1f}"


def normalize_changefreq(value) -> str:
    """
    Validate a change frequency and return its plain string value.

    Raises:
        InvalidPageError: if the value is not one of the sitemap enum values
    """
    try:
        return ChangeFreq(value).value
    except ValueError:
        allowed = ", ".join(c.value for c in ChangeFreq)
        raise InvalidPageError(f"Invalid changefreq {value!r} (expected one of: {allowed})")


def _destination_lock(path: str) -> threading.Lock:
    key = os.path.abspath(path)
    with _write_locks_guard:
        lock = _write_locks.get(key)
        if lock is None:
            lock = _write_locks[key] = threading.Lock()
        return lock


def _today() -> str:
    return datetime.now(timezone.utc).date().isoformat()


def _is_utf8(name: str) -> bool:
    """False for names os.scandir decoded with surrogate escapes."""
    try:
        name.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


class SitemapGenerator:
    """
    Stateless sitemap service.

    Holds only its SitemapConfig, so one instance can be shared by the API,
    the CLI and the file watcher, or a fresh one built per call.
    """

    def __init__(self, config: SitemapConfig):
        self.config = config

    # ------------------------------------------------------------------
    # Scanning
    # ------------------------------------------------------------------

    def home_record(self) -> PageRecord:
        return PageRecord(
            url=self.config.home_url,
            filename=self.config.home_filename,
            priority=HOME_PRIORITY,
            changefreq=HOME_CHANGEFREQ,
        )

    def list_page_files(self) -> list[str]:
        """
        Page files in the source directory, home file excluded, sorted by name.

        Raises:
            ScanError: if the directory cannot be listed
        """
        try:
            with os.scandir(self.config.source_directory) as entries:
                names = [
                    entry.name
                    for entry in entries
                    if entry.name.endswith(self.config.page_extension)
                    and entry.name != self.config.home_filename
                    and _is_utf8(entry.name)
                    and entry.is_file()
                ]
        except OSError as e:
            raise ScanError(
                f"Cannot read directory {self.config.source_directory}: {e.strerror or e}"
            ) from e
        return sorted(names)

    def scan_pages(self) -> list[PageRecord]:
        """Home record first, then one record per page file."""
        pages = [self.home_record()]
        for filename in self.list_page_files():
            priority, changefreq = classify_page(filename)
            pages.append(PageRecord(
                url=self.config.page_url(filename),
                filename=filename,
                priority=priority,
                changefreq=changefreq,
            ))
        return pages

    def status(self) -> list[PageRecord]:
        """Records the next update would write, without writing anything."""
        return self.scan_pages()

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def last_modified(self, filename: Optional[str]) -> str:
        """File mtime as a UTC YYYY-MM-DD date; today if it cannot be read."""
        if not filename:
            return _today()
        try:
            mtime = os.stat(os.path.join(self.config.source_directory, filename)).st_mtime
        except OSError:
            return _today()
        return datetime.fromtimestamp(mtime, tz=timezone.utc).date().isoformat()

    def render_xml(self, pages: list[PageRecord]) -> str:
        lines = [
            '<?xml version="1.0" encoding="UTF-8"?>',
            f'<urlset xmlns="{SITEMAP_NS}">',
        ]
        for page in pages:
            changefreq = getattr(page.changefreq, "value", page.changefreq)
            lines.extend([
                "  <url>",
                f"    <loc>{escape(page.url)}</loc>",
                f"    <lastmod>{escape(self.last_modified(page.filename))}</lastmod>",
                f"    <changefreq>{escape(changefreq)}</changefreq>",
                f"    <priority>{escape(page.priority)}</priority>",
                "  </url>",
            ])
        lines.append("</urlset>")
        return "\n".join(lines) + "\n"

    # ------------------------------------------------------------------
    # Merge & persist
    # ------------------------------------------------------------------

    def build_page(
        self,
        filename: Optional[str],
        priority=None,
        changefreq=None,
        url: Optional[str] = None,
    ) -> PageRecord:
        """
        Build a caller-supplied record with defaults applied.

        Raises:
            InvalidPageError: if filename is blank or a value is out of range
        """
        filename = (filename or "").strip()
        if not filename:
            raise InvalidPageError('The "filename" field is required')
        return PageRecord(
            url=self._resolve_url(url, filename),
            filename=filename,
            priority=normalize_priority(priority) if priority not in (None, "") else DEFAULT_PRIORITY,
            changefreq=normalize_changefreq(changefreq) if changefreq else DEFAULT_CHANGEFREQ,
        )

    def _resolve_url(self, url: Optional[str], filename: str) -> str:
        """Explicit url if given, the bare origin mapped to the home url."""
        url = (url or "").strip()
        if not url:
            return self.config.page_url(filename)
        if url.rstrip("/") == self.config.base_url:
            return self.config.home_url
        return url

    def merge(self, pages: list[PageRecord], new_page: Optional[PageRecord]) -> list[PageRecord]:
        """Append new_page unless a record with the same url already exists."""
        if new_page is None:
            return pages
        if any(p.url == new_page.url for p in pages):
            return pages
        return pages + [new_page]

    def write(self, content: str) -> None:
        """
        Replace the destination file with content.

        The XML is written to a temp file beside the destination and moved
        into place, so a failed write never leaves a truncated sitemap.

        Raises:
            WriteError: if the file cannot be written or replaced
        """
        destination = self.config.destination_path
        directory = os.path.dirname(os.path.abspath(destination))
        tmp_path = None
        try:
            with _destination_lock(destination):
                with tempfile.NamedTemporaryFile(
                    "w",
                    encoding="utf-8",
                    dir=directory,
                    prefix=".sitemap-",
                    suffix=".tmp",
                    delete=False,
                ) as tmp:
                    tmp_path = tmp.name
                    tmp.write(content)
                # temp files are created 0600; the published sitemap must be world-readable
                os.chmod(tmp_path, 0o644)
                os.replace(tmp_path, destination)
                tmp_path = None
        except (OSError, UnicodeError) as e:
            raise WriteError(f"Cannot write sitemap {destination}: {getattr(e, 'strerror', None) or e}") from e
        finally:
            if tmp_path is not None:
                try:
                    os.unlink(tmp_path)
                except OSError:
                    pass

    def update(self, new_page: Optional[PageRecord] = None) -> list[PageRecord]:
        """
        Rescan, merge new_page, render and overwrite the sitemap.

        Returns:
            The records written, in sitemap order

        Raises:
            ScanError, WriteError
        """
        pages = self.merge(self.scan_pages(), new_page)
        self.write(self.render_xml(pages))
        return pages

    def add_page(
        self,
        filename: Optional[str],
        priority=None,
        changefreq=None,
        url: Optional[str] = None,
    ) -> list[PageRecord]:
        """Build one record from a filename and merge it via update()."""
        return self.update(self.build_page(filename, priority, changefreq, url))
