"""MCP tools for memo access.

These functions are exposed to the client as tools. Every handler returns
text; memo-layer failures are reported in the text rather than raised.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable

from memo_server.memo.errors import MemoAlreadyExistsError, MemoError, MemoNotFoundError

if TYPE_CHECKING:
    from datetime import datetime

    from memo_server.memo.store import MemoMetadata, MemoStore

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _date(value: datetime) -> str:
    return value.strftime(DATE_FORMAT)


def _format_entry(
    memo: MemoMetadata,
    *,
    show_category: bool = True,
    show_tags: bool = True,
    show_size: bool = True,
) -> str:
    lines = [f"📝 {memo.title}", f"   Created: {_date(memo.created_at)}"]
    if show_category and memo.category:
        lines.append(f"   Category: {memo.category}")
    if show_tags and memo.tags:
        lines.append(f"   Tags: {', '.join(memo.tags)}")
    if show_size:
        lines.append(f"   Size: {memo.size} bytes")
    return "\n".join(lines) + "\n\n"


def get_memo_tools(store: MemoStore) -> dict[str, Callable[..., str]]:
    """Return a dict of tool_name -> callable for memo operations."""

    def create_memo(title: str, content: str) -> str:
        """Create a raw memo file."""
        try:
            filename = store.create(title, content)
        except MemoAlreadyExistsError:
            return f'Error: a memo titled "{title}" already exists.'
        except MemoError as e:
            return f"Failed to create memo: {e}"
        return f'Created memo "{title}".\nFile: {filename}'

    def create_memo_with_category(
        title: str,
        content: str,
        category: str | None = None,
        tags: list[str] | None = None,
    ) -> str:
        """Create a memo with category/tags stored in frontmatter."""
        tags = tags or []
        try:
            filename = store.create_with_metadata(title, content, category=category, tags=tags)
        except MemoAlreadyExistsError:
            return f'Error: a memo titled "{title}" already exists.'
        except MemoError as e:
            return f"Failed to create memo: {e}"
        text = f'Created memo "{title}".\nFile: {filename}'
        if category:
            text += f"\nCategory: {category}"
        if tags:
            text += f"\nTags: {', '.join(tags)}"
        return text

    def list_memos() -> str:
        try:
            memos = store.list_memos()
        except MemoError as e:
            return f"Failed to list memos: {e}"
        if not memos:
            return "No memos found."
        text = f"Saved memos ({len(memos)}):\n\n"
        return text + "".join(_format_entry(m) for m in memos)

    def read_memo(title: str) -> str:
        try:
            memo = store.read(title)
        except MemoNotFoundError:
            return f'Memo "{title}" not found.'
        except MemoError as e:
            return f"Failed to read memo: {e}"

        meta = memo.meta
        text = f"📝 {meta.title}\n"
        if memo.frontmatter is None:
            return text + f"\n{memo.body}"
        if meta.category:
            text += f"Category: {meta.category}\n"
        if meta.tags:
            text += f"Tags: {', '.join(meta.tags)}\n"
        text += f"Created: {_date(meta.created_at)}\n"
        text += f"Updated: {_date(meta.updated_at)}\n"
        return text + "\n---\n\n" + memo.body

    def delete_memo(title: str) -> str:
        try:
            store.delete(title)
        except MemoNotFoundError:
            return f'Memo "{title}" not found.'
        except MemoError as e:
            return f"Failed to delete memo: {e}"
        return f'Deleted memo "{title}".'

    def search_memo(query: str) -> str:
        try:
            memos = store.search(query)
        except MemoError as e:
            return f"Failed to search memos: {e}"
        if not memos:
            return f'No memos match "{query}".'
        text = f'Search results for "{query}" ({len(memos)}):\n\n'
        return text + "".join(_format_entry(m, show_size=False) for m in memos)

    def list_memos_by_category(category: str) -> str:
        try:
            memos = store.filter_by_category(category)
        except MemoError as e:
            return f"Failed to list memos by category: {e}"
        if not memos:
            return f'No memos in category "{category}".'
        text = f'Memos in category "{category}" ({len(memos)}):\n\n'
        return text + "".join(_format_entry(m, show_category=False) for m in memos)

    def list_memos_by_tag(tag: str) -> str:
        try:
            memos = store.filter_by_tag(tag)
        except MemoError as e:
            return f"Failed to list memos by tag: {e}"
        if not memos:
            return f'No memos tagged "{tag}".'
        text = f'Memos tagged "{tag}" ({len(memos)}):\n\n'
        return text + "".join(_format_entry(m) for m in memos)

    def list_categories() -> str:
        try:
            counts = store.category_counts()
        except MemoError as e:
            return f"Failed to list categories: {e}"
        if not counts:
            return "No memos have a category."
        text = f"Available categories ({len(counts)}):\n\n"
        return text + "".join(f"📁 {c} ({counts[c]} memos)\n" for c in sorted(counts))

    def list_tags() -> str:
        try:
            counts = store.tag_counts()
        except MemoError as e:
            return f"Failed to list tags: {e}"
        if not counts:
            return "No memos have tags."
        text = f"Available tags ({len(counts)}):\n\n"
        return text + "".join(f"🏷️ {t} ({counts[t]} memos)\n" for t in sorted(counts))

    return {
        "create_memo": create_memo,
        "list_memos": list_memos,
        "read_memo": read_memo,
        "delete_memo": delete_memo,
        "search_memo": search_memo,
        "create_memo_with_category": create_memo_with_category,
        "list_memos_by_category": list_memos_by_category,
        "list_memos_by_tag": list_memos_by_tag,
        "list_categories": list_categories,
        "list_tags": list_tags,
    }
