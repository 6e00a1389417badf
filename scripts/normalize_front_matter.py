#!/usr/bin/env python3
"""
Make sure every Markdown page has a front matter block with a non-empty title.

Usage:
  python scripts/normalize_front_matter.py content/docs/my-repo
  python scripts/normalize_front_matter.py --dry-run content/docs/my-repo/intro.md

Accepts files and directories (directories are walked recursively for *.md).

Pages whose title is already usable are never rewritten. Otherwise the title is
taken from the first Markdown heading, or from the file name
(api-reference-guide.md -> "Api Reference Guide"), and written as
title: "..." inside the --- block. The page body is left untouched.
"""

from __future__ import annotations
import argparse
import pathlib
import sys
from dataclasses import dataclass

MARKER = "---"
TITLE_KEY = "title:"
QUOTES = ("'", '"')


@dataclass(frozen=True)
class FrontMatterBlock:
    lines: list[str]  # without line terminators
    body: str

    @property
    def fields(self) -> dict[str, str]:
        """Top-level `key: value` lines, in file order (first occurrence wins)."""
        out: dict[str, str] = {}
        for line in self.lines:
            if not line or line[0] in " \t#-":
                continue
            key, sep, value = line.partition(":")
            if sep and key.strip() not in out:
                out[key.strip()] = value.strip()
        return out


def _strip_eol(line: str) -> str:
    if line.endswith("\n"):
        line = line[:-1]
    if line.endswith("\r"):
        line = line[:-1]
    return line


def split_front_matter(text: str) -> FrontMatterBlock | None:
    """Return the leading --- block of `text`, or None if there is none.

    The opening marker must be the very first line. The first later line that
    is exactly --- closes the block, even inside a YAML block scalar.
    """
    lines = text.splitlines(keepends=True)
    if not lines or _strip_eol(lines[0]) != MARKER:
        return None
    for i in range(1, len(lines)):
        if _strip_eol(lines[i]) == MARKER:
            inner = [_strip_eol(l) for l in lines[1:i]]
            return FrontMatterBlock(lines=inner, body="".join(lines[i + 1:]))
    return None


def title_value(lines: list[str]) -> str | None:
    for line in lines:
        if line.startswith(TITLE_KEY):
            return line[len(TITLE_KEY):]
    return None


def is_valid_title(value: str | None) -> bool:
    if value is None:
        return False
    v = value.strip()
    if len(v) >= 2 and v[0] == v[-1] and v[0] in QUOTES:
        v = v[1:-1].strip()
    return len(v) > 0


def _heading_text(line: str) -> str | None:
    hashes = len(line) - len(line.lstrip("#"))
    if hashes == 0:
        return None
    rest = line[hashes:]
    if not rest or not rest[0].isspace():
        return None
    return rest.strip() or None


def extract_title(body: str, identifier: str) -> str:
    """First Markdown heading of `body`, else a title made from `identifier`."""
    for line in body.splitlines():
        heading = _heading_text(line)
        if heading:
            return heading
    title = " ".join(w[:1].upper() + w[1:] for w in identifier.split("-"))
    if not title.strip():
        raise ValueError(f"cannot derive a title from file name {identifier!r}")
    return title


def escape_title(title: str) -> str:
    return title.replace('"', '\\"')


def _trim_blank_lines(lines: list[str]) -> list[str]:
    start, end = 0, len(lines)
    while start < end and not lines[start].strip():
        start += 1
    while end > start and not lines[end - 1].strip():
        end -= 1
    return lines[start:end]


def normalize_text(text: str, identifier: str) -> str:
    """Return `text` with a valid title in its front matter.

    If the title is already valid the very same string is returned.
    """
    block = split_front_matter(text)
    if block is None:
        title = extract_title(text, identifier)
        return f'{MARKER}\n{TITLE_KEY} "{escape_title(title)}"\n{MARKER}\n{text}'

    if is_valid_title(title_value(block.lines)):
        return text

    title = extract_title(block.body, identifier)
    fields = _trim_blank_lines([l for l in block.lines if not l.startswith(TITLE_KEY)])
    fields.append(f'{TITLE_KEY} "{escape_title(title)}"')
    return f"{MARKER}\n" + "\n".join(fields) + f"\n{MARKER}\n{block.body}"


def normalize_file(path: pathlib.Path, dry_run: bool = False) -> bool:
    """Normalize one page in place. Returns True if it needed a change.

    I/O and decoding errors are left to the caller.
    """
    # newline="" keeps \r\n bodies byte-identical
    with path.open("r", encoding="utf-8", newline="") as f:
        text = f.read()
    fixed = normalize_text(text, path.stem)
    if fixed == text:
        return False
    if not dry_run:
        with path.open("w", encoding="utf-8", newline="") as f:
            f.write(fixed)
    return True


def iter_markdown(paths: list[pathlib.Path]):
    for p in paths:
        if p.is_dir():
            yield from sorted(f for f in p.rglob("*.md") if f.is_file())
        elif p.suffix == ".md":
            yield p


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Add missing titles to Markdown front matter.")
    parser.add_argument("paths", nargs="+", type=pathlib.Path, help="Markdown files or directories")
    parser.add_argument("--dry-run", action="store_true", help="Report pages that need a title, write nothing")
    args = parser.parse_args(argv)

    fixed = errors = 0
    for md_path in iter_markdown(args.paths):
        try:
            changed = normalize_file(md_path, dry_run=args.dry_run)
        except (OSError, ValueError) as e:
            print(f"[ERROR] {md_path}: {e}", file=sys.stderr)
            errors += 1
            continue
        if changed:
            fixed += 1
            print(f"[{'DRY' if args.dry_run else 'FIX'}]  {md_path}")

    print(f"{fixed} page(s) {'need' if args.dry_run else 'got'} a title, {errors} error(s)")
    return 1 if errors else 0


if __name__ == "__main__":
    sys.exit(main())
