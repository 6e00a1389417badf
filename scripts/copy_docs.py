"""
Mirror a fetched docs folder into the site's content tree.

Every file is copied byte for byte. Markdown pages are then passed through
normalize_front_matter so each one ends up with a title. The section index
(_index.md) is never copied; sync_docs writes its own.
"""

from __future__ import annotations
import pathlib
import shutil
import sys
from dataclasses import dataclass

from normalize_front_matter import normalize_file

INDEX_NAME = "_index.md"
MARKDOWN_SUFFIX = ".md"


@dataclass
class CopyStats:
    copied: int = 0
    normalized: int = 0
    failed: int = 0

    def __add__(self, other: "CopyStats") -> "CopyStats":
        return CopyStats(
            self.copied + other.copied,
            self.normalized + other.normalized,
            self.failed + other.failed,
        )


def copy_file(src: pathlib.Path, dest: pathlib.Path) -> CopyStats:
    shutil.copyfile(src, dest)
    if dest.suffix != MARKDOWN_SUFFIX:
        return CopyStats(copied=1)
    try:
        changed = normalize_file(dest)
    except (OSError, ValueError) as e:
        print(f"[ERROR] {dest}: {e}", file=sys.stderr)
        return CopyStats(copied=1, failed=1)
    return CopyStats(copied=1, normalized=int(changed))


def copy_tree(src: pathlib.Path, dest: pathlib.Path) -> CopyStats:
    """Recursively copy `src` into `dest`; returns the summed stats."""
    dest.mkdir(parents=True, exist_ok=True)
    stats = CopyStats()
    for entry in sorted(src.iterdir()):
        target = dest / entry.name
        if entry.is_symlink():
            print(f"[SKIP] {entry} (symlink)")
        elif entry.is_dir():
            stats = stats + copy_tree(entry, target)
        elif entry.is_file():
            if entry.name == INDEX_NAME:
                continue
            stats = stats + copy_file(entry, target)
        else:
            print(f"[SKIP] {entry} (not a regular file)")
    return stats
