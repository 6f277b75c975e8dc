"""
CLI utility for typed storage maintenance.

Usage:
    typed-kv --stats
    typed-kv --list-maps
    typed-kv --keys things
    typed-kv --show things my-key
    typed-kv --purge things,other
    typed-kv --purge all
"""

import argparse
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from .codec.resolvers import ImportTypeResolver
from .codec.tagged import TypeTaggedCodec
from .config.settings import StorageSettings
from .persist.sqlite_store import KVStore


def format_bytes(bytes_val: float) -> str:
    """Format bytes as human-readable string."""
    for unit in ["B", "KB", "MB", "GB"]:
        if bytes_val < 1024:
            return f"{bytes_val:.1f} {unit}"
        bytes_val /= 1024
    return f"{bytes_val:.1f} TB"


def format_time(ts: int) -> str:
    """Format unix timestamp as human-readable string."""
    if ts == 0:
        return "never"
    return datetime.fromtimestamp(ts).strftime("%Y-%m-%d %H:%M:%S")


def show_stats(kv: KVStore) -> int:
    """Print per-map statistics."""
    names = kv.list_maps()
    if not names:
        print("No maps stored")
        return 0
    
    print(f"{'MAP':<20} {'ENTRIES':>10} {'SIZE':>12} {'LAST WRITE':>20}")
    total_entries = 0
    total_bytes = 0
    for name in names:
        stats = kv.stats(name)
        total_entries += stats["count"]
        total_bytes += stats["total_bytes"]
        print(
            f"{name:<20} {stats['count']:>10,} {format_bytes(stats['total_bytes']):>12} "
            f"{format_time(stats['newest_ts']):>20}"
        )
    print(f"{'TOTAL':<20} {total_entries:>10,} {format_bytes(total_bytes):>12}")
    return 0


def show_record(kv: KVStore, name: str, key: str, settings: StorageSettings) -> int:
    """Print the raw record and its decoded value."""
    if name not in kv.list_maps():
        print(f"Unknown map: {name}")
        return 1
    
    raw = kv.create_or_open(name).get(key)
    if raw is None:
        print(f"No record for key '{key}' in {name}")
        return 1
    
    print(f"raw:     {raw}")
    codec = TypeTaggedCodec(resolver=ImportTypeResolver(settings.allowed_modules))
    value = codec.decode(raw)
    if value is None:
        print("decoded: <could not decode>")
    else:
        print(f"decoded: {value!r}")
    return 0


def purge_maps(kv: KVStore, names: List[str]) -> int:
    """Purge the given maps (or all of them) and vacuum."""
    existing = kv.list_maps()
    if "all" in names:
        names = existing
    
    unknown = set(names) - set(existing)
    if unknown:
        print(f"Unknown maps: {', '.join(sorted(unknown))}")
        return 1
    
    total = 0
    for name in names:
        count = kv.purge(name)
        total += count
        print(f"{name:<20} {count:>10,} entries purged")
    print(f"{'TOTAL':<20} {total:>10,} entries purged")
    
    kv.vacuum()
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Inspect and maintain a typed storage database"
    )
    parser.add_argument(
        "--db",
        type=Path,
        default=None,
        help="Database file (default: TYPED_STORAGE_DB_PATH or data/storage/storage.db)",
    )
    action = parser.add_mutually_exclusive_group(required=True)
    action.add_argument("--stats", action="store_true", help="Show per-map statistics")
    action.add_argument("--list-maps", action="store_true", help="List stored map names")
    action.add_argument("--keys", metavar="NAME", help="List keys of a map")
    action.add_argument("--show", nargs=2, metavar=("NAME", "KEY"), help="Show one record")
    action.add_argument(
        "--purge",
        metavar="NAMES",
        help="Purge maps (comma-separated names or 'all')",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entrypoint."""
    args = build_parser().parse_args(argv)
    
    settings = StorageSettings.from_env()
    if args.db is not None:
        settings = settings.model_copy(update={"db_path": str(args.db)})
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    
    db_path = Path(settings.db_path)
    if not db_path.exists():
        print(f"Database not found: {db_path}")
        return 1
    
    with KVStore(
        db_path,
        timeout=settings.timeout,
        journal_mode=settings.journal_mode,
        synchronous=settings.synchronous,
    ) as kv:
        if args.stats:
            return show_stats(kv)
        if args.list_maps:
            for name in kv.list_maps():
                print(name)
            return 0
        if args.keys:
            if args.keys not in kv.list_maps():
                print(f"Unknown map: {args.keys}")
                return 1
            for key in kv.create_or_open(args.keys).keys():
                print(key)
            return 0
        if args.show:
            return show_record(kv, args.show[0], args.show[1], settings)
        return purge_maps(kv, [n.strip() for n in args.purge.split(",") if n.strip()])


if __name__ == "__main__":
    sys.exit(main())
