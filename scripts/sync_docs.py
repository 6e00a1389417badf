#!/usr/bin/env python3
"""
Sync documentation folders from external repositories into content/docs.

Usage:
  python scripts/sync_docs.py                      # every repo in repos.json
  python scripts/sync_docs.py --only my-lib        # just one (repeatable)
  python scripts/sync_docs.py --check              # also audit titles afterwards

Input:
  repos.json (or any YAML file via --config):
    {"repositories": [{"name": "my-lib",
                       "url": "https://github.com/org/my-lib",
                       "docs_path": "docs",
                       "display_name": "My Lib",
                       "description": "..."}]}

Output:
  content/docs/<name>/...        (mirrored docs, every page with a title)
  content/docs/<name>/_index.md  (generated from display_name/description)

Each run replaces content/docs/<name> entirely.

Environment:
  GITHUB_TOKEN - required, used to clone private repositories

Dependencies:
  pip install pyyaml python-frontmatter
"""

from __future__ import annotations
import argparse
import os
import pathlib
import shutil
import sys
import tempfile
from dataclasses import dataclass
import yaml

from check_titles import find_untitled
from copy_docs import INDEX_NAME, copy_tree
from fetch_repo import FetchError, scratch_dir, shallow_clone
from normalize_front_matter import escape_title

ROOT = pathlib.Path(__file__).resolve().parent.parent
DEFAULT_CONFIG = ROOT / "repos.json"
DEFAULT_DEST = ROOT / "content" / "docs"
DEFAULT_SCRATCH = pathlib.Path(tempfile.gettempdir()) / "repos-sync"
TOKEN_ENV = "GITHUB_TOKEN"


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class RepoSpec:
    name: str
    url: str
    docs_path: str = "docs"
    display_name: str | None = None
    description: str | None = None


@dataclass(frozen=True)
class SyncConfig:
    repositories: tuple[RepoSpec, ...]
    token: str
    dest: pathlib.Path
    scratch: pathlib.Path
    check: bool = False


def _optional_str(entry: dict, key: str, where: str) -> str | None:
    value = entry.get(key)
    if value is not None and not isinstance(value, str):
        raise ConfigError(f"{where}: '{key}' must be a string")
    return value


def parse_repo(entry, i: int) -> RepoSpec:
    where = f"repositories[{i}]"
    if not isinstance(entry, dict):
        raise ConfigError(f"{where}: expected a mapping")
    name, url = entry.get("name"), entry.get("url")
    if not isinstance(name, str) or not name.strip():
        raise ConfigError(f"{where}: 'name' is required")
    if not isinstance(url, str) or not url.strip():
        raise ConfigError(f"{where}: 'url' is required")
    if name in (".", "..") or "/" in name or "\\" in name:
        raise ConfigError(f"{where}: name {name!r} is not a safe directory name")

    docs_path = _optional_str(entry, "docs_path", where) or "docs"
    rel = pathlib.PurePosixPath(docs_path)
    if rel.is_absolute() or ".." in rel.parts:
        raise ConfigError(f"{where}: docs_path {docs_path!r} must stay inside the repository")

    return RepoSpec(
        name=name,
        url=url,
        docs_path=docs_path,
        display_name=_optional_str(entry, "display_name", where),
        description=_optional_str(entry, "description", where),
    )


def load_repositories(config_path: pathlib.Path) -> list[RepoSpec]:
    """Read the repository list. JSON is valid YAML, so repos.json works too."""
    if not config_path.exists():
        raise ConfigError(f"Configuration file not found: {config_path}")
    try:
        data = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    except (yaml.YAMLError, UnicodeError) as e:
        raise ConfigError(f"Cannot parse {config_path}: {e}") from None
    if not isinstance(data, dict) or not isinstance(data.get("repositories"), list):
        raise ConfigError("Invalid configuration format: expected repositories array")

    repos = [parse_repo(entry, i) for i, entry in enumerate(data["repositories"])]
    seen = set()
    for repo in repos:
        if repo.name in seen:
            raise ConfigError(f"Duplicate repository name: {repo.name}")
        seen.add(repo.name)
    return repos


def select_repositories(repos: list[RepoSpec], only: list[str] | None) -> list[RepoSpec]:
    if not only:
        return repos
    known = {r.name for r in repos}
    unknown = [n for n in only if n not in known]
    if unknown:
        raise ConfigError(f"Unknown repository name(s): {', '.join(unknown)}")
    return [r for r in repos if r.name in only]


def render_index(repo: RepoSpec) -> str:
    title = escape_title(repo.display_name or repo.name)
    description = escape_title(repo.description or "")
    return f'---\ntitle: "{title}"\ndescription: "{description}"\nweight: 1\n---\n'


def sync_repository(repo: RepoSpec, config: SyncConfig) -> bool:
    try:
        with scratch_dir(config.scratch, repo.name) as checkout:
            print(f"[SYNC] Cloning {repo.name}...")
            shallow_clone(repo.url, checkout, config.token)

            source = checkout / repo.docs_path
            if not source.is_dir():
                print(f"[WARN] Folder {repo.docs_path} not found in {repo.name}, skipping", file=sys.stderr)
                return False

            target = config.dest / repo.name
            if target.exists():
                shutil.rmtree(target)
            print(f"[SYNC] Copying documentation from {repo.name}...")
            stats = copy_tree(source, target)
            (target / INDEX_NAME).write_text(render_index(repo), encoding="utf-8")
    except (FetchError, OSError) as e:
        print(f"[ERROR] Error syncing {repo.name}: {e}", file=sys.stderr)
        return False

    print(f"[OK]   {repo.name}: {stats.copied} file(s) copied, "
          f"{stats.normalized} title(s) added, {stats.failed} page error(s)")
    if config.check:
        for md_path, problem in find_untitled(target):
            print(f"[WARN] {md_path}: {problem}", file=sys.stderr)
    return True


def run(config: SyncConfig) -> tuple[int, int]:
    success_count = fail_count = 0
    for repo in config.repositories:
        if sync_repository(repo, config):
            success_count += 1
        else:
            fail_count += 1

    print("\nSync summary:")
    print(f"   Success: {success_count}")
    print(f"   Errors:  {fail_count}")
    return success_count, fail_count


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Sync docs folders from external repositories.")
    parser.add_argument("--config", type=pathlib.Path, default=DEFAULT_CONFIG, help="Repository list (JSON or YAML)")
    parser.add_argument("--dest", type=pathlib.Path, default=DEFAULT_DEST, help="Content directory to sync into")
    parser.add_argument("--scratch", type=pathlib.Path, default=DEFAULT_SCRATCH, help="Where to clone temporarily")
    parser.add_argument("--only", action="append", metavar="NAME", help="Sync only this repository (can be repeated)")
    parser.add_argument("--check", action="store_true", help="Report synced pages whose YAML title is unusable")
    args = parser.parse_args(argv)

    try:
        repos = select_repositories(load_repositories(args.config), args.only)
    except ConfigError as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return 1

    token = os.getenv(TOKEN_ENV)
    if not token:
        print(f"[ERROR] {TOKEN_ENV} is not set in environment variables", file=sys.stderr)
        return 1

    config = SyncConfig(
        repositories=tuple(repos),
        token=token,
        dest=args.dest,
        scratch=args.scratch,
        check=args.check,
    )
    print(f"Found {len(repos)} repositories to sync\n")
    success_count, fail_count = run(config)

    if fail_count > 0 and success_count == 0:
        print("\n[ERROR] Failed to sync any repository", file=sys.stderr)
        return 1
    print("\nSync completed!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
