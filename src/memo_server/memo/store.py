"""Memo store: one plain-text file per memo, optional YAML frontmatter.

Files are the source of truth. A memo's identity is its filename, derived
from the title by ``sanitize()``. There is no in-memory index: listing,
search and filters rescan the directory on every call.
"""

from __future__ import annotations

import logging
import re
from collections import Counter
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import date, datetime, time
from pathlib import Path
from typing import Iterator

import yaml
from frontmatter.default_handlers import YAMLHandler

from memo_server.memo.errors import (
    MemoAlreadyExistsError,
    MemoNotFoundError,
    MemoStorageError,
)

logger = logging.getLogger(__name__)

_ILLEGAL_CHARS = re.compile(r'[<>:"/\\|?*]')
_WHITESPACE = re.compile(r"\s+")
_YAML = YAMLHandler()
_FRONTMATTER = re.compile(
    r"\A---[ \t]*\r?\n(.*?)^---[ \t]*(?:\r?\n|\Z)", re.DOTALL | re.MULTILINE
)


@dataclass
class MemoMetadata:
    """Listing entry for a single memo."""

    title: str
    filename: str
    created_at: datetime
    updated_at: datetime
    size: int
    category: str | None = None
    tags: list[str] = field(default_factory=list)


@dataclass
class Memo:
    """A memo read in full. ``frontmatter`` is None for raw memos."""

    meta: MemoMetadata
    body: str
    frontmatter: dict | None = None


@contextmanager
def _storage_errors(action: str) -> Iterator[None]:
    try:
        yield
    except OSError as e:
        raise MemoStorageError(f"{action}: {e}") from e


class MemoStore:
    """Read/write access to a directory of memo files."""

    def __init__(
        self,
        root: Path,
        extension: str = ".txt",
        max_filename_length: int = 50,
    ) -> None:
        self.root = Path(root)
        self.extension = extension
        self.max_filename_length = max_filename_length

    # ── Naming & paths ────────────────────────────────────────

    def sanitize(self, title: str) -> str:
        """Map a title to its filename: drop illegal chars, spaces to underscores, lowercase."""
        name = _ILLEGAL_CHARS.sub("", title)
        name = _WHITESPACE.sub("_", name).lower()
        return name[: self.max_filename_length] + self.extension

    def title_from_filename(self, filename: str) -> str:
        """Best-effort inverse of sanitize() for memos without frontmatter."""
        stem = filename[: -len(self.extension)] if filename.endswith(self.extension) else filename
        return stem.replace("_", " ")

    def ensure_directory(self) -> None:
        """Create the storage root (and parents). Idempotent."""
        with _storage_errors("Could not create memo directory"):
            self.root.mkdir(parents=True, exist_ok=True)

    def path_for(self, filename: str) -> Path:
        return self.root / filename

    def _memo_paths(self) -> list[Path]:
        """Memo files in the root, in lexical filename order."""
        return sorted(
            p for p in self.root.iterdir() if p.is_file() and p.name.endswith(self.extension)
        )

    # ── Frontmatter ───────────────────────────────────────────

    @staticmethod
    def parse(content: str) -> tuple[dict | None, str]:
        """Split content into (metadata, body).

        Content without a leading ``---`` block, or whose block is not a YAML
        mapping, is a raw memo: metadata is None and the body is the full text.
        """
        match = _FRONTMATTER.match(content)
        if not match:
            return None, content
        try:
            metadata = _YAML.load(match.group(1))
        except yaml.YAMLError as e:
            logger.warning("Unparseable frontmatter, treating memo as raw: %s", e)
            return None, content
        if not isinstance(metadata, dict) or not metadata:
            return None, content

        # render() puts one blank line between the block and the body
        body = content[match.end() :]
        if body.startswith("\r\n"):
            body = body[2:]
        elif body.startswith("\n"):
            body = body[1:]
        return metadata, body

    @staticmethod
    def render(
        title: str,
        body: str,
        category: str | None = None,
        tags: list[str] | None = None,
    ) -> str:
        """Render a memo file with a frontmatter block. The body is written verbatim."""
        now = datetime.now().isoformat(timespec="microseconds")
        metadata: dict = {"title": title}
        if category:
            metadata["category"] = category
        metadata["tags"] = list(dict.fromkeys(tags or []))
        metadata["createdAt"] = now
        metadata["updatedAt"] = now
        block = _YAML.export(metadata, sort_keys=False)
        return f"---\n{block}\n---\n\n{body}"

    def _load(self, path: Path) -> Memo:
        text = path.read_text(encoding="utf-8", errors="replace")
        stat = path.stat()
        fs_created = datetime.fromtimestamp(getattr(stat, "st_birthtime", stat.st_mtime))
        fs_updated = datetime.fromtimestamp(stat.st_mtime)

        fm, body = self.parse(text)
        if fm is None:
            meta = MemoMetadata(
                title=self.title_from_filename(path.name),
                filename=path.name,
                created_at=fs_created,
                updated_at=fs_updated,
                size=stat.st_size,
            )
            return Memo(meta=meta, body=body)

        tags = fm.get("tags") or []
        if isinstance(tags, str):
            tags = [tags]
        category = fm.get("category")
        meta = MemoMetadata(
            title=str(fm.get("title") or self.title_from_filename(path.name)),
            filename=path.name,
            created_at=_to_datetime(fm.get("createdAt"), fs_created),
            updated_at=_to_datetime(fm.get("updatedAt"), fs_updated),
            size=stat.st_size,
            category=str(category) if category else None,
            tags=[str(t) for t in tags],
        )
        return Memo(meta=meta, body=body, frontmatter=fm)

    def _scan(self) -> list[Memo]:
        self.ensure_directory()
        with _storage_errors("Could not read memos"):
            return [self._load(p) for p in self._memo_paths()]

    # ── Queries ───────────────────────────────────────────────

    def list_memos(self) -> list[MemoMetadata]:
        """All memos, newest first. Ties fall back to filename order."""
        memos = [m.meta for m in self._scan()]
        memos.sort(key=lambda m: m.created_at, reverse=True)
        return memos

    def search(self, query: str) -> list[MemoMetadata]:
        """Case-insensitive substring match on title or body."""
        q = query.lower()
        memos = [m for m in self._scan() if q in m.meta.title.lower() or q in m.body.lower()]
        memos.sort(key=lambda m: m.meta.created_at, reverse=True)
        return [m.meta for m in memos]

    def find_by_title(self, title: str) -> str | None:
        """Exact sanitized filename first, then the newest memo whose title contains *title*.

        The fallback walks list_memos() order: newest first, ties by filename.
        """
        filename = self.sanitize(title)
        if self.path_for(filename).is_file():
            return filename

        q = title.lower()
        for meta in self.list_memos():
            if q in meta.title.lower():
                return meta.filename
        return None

    def filter_by_category(self, category: str) -> list[MemoMetadata]:
        c = category.lower()
        return [m for m in self.list_memos() if m.category and m.category.lower() == c]

    def filter_by_tag(self, tag: str) -> list[MemoMetadata]:
        t = tag.lower()
        return [m for m in self.list_memos() if any(x.lower() == t for x in m.tags)]

    def category_counts(self) -> Counter[str]:
        """Memos per category, keyed by the exact category string."""
        return Counter(m.category for m in self.list_memos() if m.category)

    def tag_counts(self) -> Counter[str]:
        """Memos per tag, keyed by the exact tag string."""
        return Counter(t for m in self.list_memos() for t in dict.fromkeys(m.tags))

    def categories(self) -> list[str]:
        return sorted(self.category_counts())

    def tags(self) -> list[str]:
        return sorted(self.tag_counts())

    # ── Reads ─────────────────────────────────────────────────

    def read(self, title: str) -> Memo:
        """Look up a memo by title and load it."""
        filename = self.find_by_title(title)
        if filename is None:
            raise MemoNotFoundError(title)
        with _storage_errors(f"Could not read {filename}"):
            return self._load(self.path_for(filename))

    def read_file(self, filename: str) -> str:
        """Raw file content for a memo filename (no title lookup)."""
        path = self.path_for(filename)
        if Path(filename).name != filename or not path.is_file():
            raise MemoNotFoundError(filename)
        with _storage_errors(f"Could not read {filename}"):
            return path.read_text(encoding="utf-8", errors="replace")

    # ── Writes ────────────────────────────────────────────────

    def _write_new(self, title: str, content: str) -> str:
        self.ensure_directory()
        filename = self.sanitize(title)
        path = self.path_for(filename)
        try:
            with path.open("x", encoding="utf-8") as f:
                f.write(content)
        except FileExistsError as e:
            raise MemoAlreadyExistsError(title, filename) from e
        except OSError as e:
            raise MemoStorageError(f"Could not write {filename}: {e}") from e
        return filename

    def create(self, title: str, content: str) -> str:
        """Create a raw memo. Returns its filename."""
        filename = self._write_new(title, content)
        logger.info("Created memo: %s (%s)", title, filename)
        return filename

    def create_with_metadata(
        self,
        title: str,
        content: str,
        category: str | None = None,
        tags: list[str] | None = None,
    ) -> str:
        """Create a memo with a frontmatter block. Returns its filename."""
        rendered = self.render(title, content, category=category, tags=tags)
        filename = self._write_new(title, rendered)
        logger.info("Created memo: %s (%s, category=%s, tags=%s)", title, filename, category, tags)
        return filename

    def delete(self, title: str) -> str:
        """Delete the memo found by title. Returns the removed filename."""
        filename = self.find_by_title(title)
        if filename is None:
            raise MemoNotFoundError(title)
        with _storage_errors(f"Could not delete {filename}"):
            self.path_for(filename).unlink()
        logger.info("Deleted memo: %s (%s)", title, filename)
        return filename


def _to_datetime(value: object, fallback: datetime) -> datetime:
    """Coerce a frontmatter timestamp (str, date or datetime) to a naive local datetime."""
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value)
        except ValueError:
            return fallback
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone().replace(tzinfo=None)
        return value
    if isinstance(value, date):
        return datetime.combine(value, time())
    return fallback
