"""Flat-file memo storage.

Layout:
    <memos_dir>/
    ├── meeting_notes.txt       # Raw memo: body only, timestamps from the filesystem
    └── shopping_list.txt       # Memo with YAML frontmatter (title, category, tags, dates)

The directory is the only source of truth; every operation re-reads it.
"""
