#!/usr/bin/env python3
"""
Report Markdown pages whose front matter has no usable title.

Usage:
  python scripts/check_titles.py                    # checks content/docs
  python scripts/check_titles.py content/docs/foo   # one synced repository

Unlike normalize_front_matter.py this parses the block as real YAML, so it also
catches front matter that Hugo would refuse to read.

Dependencies:
  pip install python-frontmatter pyyaml
"""

from __future__ import annotations
import argparse
import pathlib
import sys
import frontmatter
import yaml

ROOT = pathlib.Path(__file__).resolve().parent.parent
DEFAULT_CONTENT = ROOT / "content" / "docs"


def check_page(md_path: pathlib.Path) -> str | None:
    """Return a problem description, or None if the page has a title."""
    try:
        post = frontmatter.load(md_path)
    except (yaml.YAMLError, UnicodeError) as e:
        return f"front matter does not parse: {e}"
    except OSError as e:
        return f"cannot read: {e}"
    title = post.metadata.get("title")
    if title is None:
        return "no title"
    if not str(title).strip():
        return "blank title"
    return None


def find_untitled(content_dir: pathlib.Path) -> list[tuple[pathlib.Path, str]]:
    problems = []
    for md_path in sorted(content_dir.rglob("*.md")):
        if not md_path.is_file():
            continue
        problem = check_page(md_path)
        if problem:
            problems.append((md_path, problem))
    return problems


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Check that every page has a title.")
    parser.add_argument("dirs", nargs="*", type=pathlib.Path, default=[DEFAULT_CONTENT])
    args = parser.parse_args(argv)

    total = 0
    for d in args.dirs:
        if not d.is_dir():
            print(f"[ERROR] Content directory not found: {d}", file=sys.stderr)
            return 1
        for md_path, problem in find_untitled(d):
            print(f"[WARN] {md_path}: {problem}")
            total += 1

    print(f"{total} page(s) without a usable title")
    return 1 if total else 0


if __name__ == "__main__":
    sys.exit(main())
