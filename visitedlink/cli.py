# ==================================================
# visitedlink/cli.py
# ==================================================
"""
Command-line entry points.

    visitedlink FILE URL...                    visited urls on stdout, the rest on stderr
    visitedlink-link -visited=FILE -link=URL   prints true/false, -update flips it first
    visitedlink-create FILE                    writes an empty table
    visitedlink-stats FILE                     occupancy report, optional snapshot
"""
from __future__ import annotations

import argparse
import logging
import sys

from .compression import write_snapshot
from .const import DEFAULT_LENGTH
from .errors import VisitedLinkError
from .stats import fingerprints, table_stats
from .store import VisitedLinkTable

logger = logging.getLogger("visitedlink")


def _setup_logging(verbose: bool):
    logging.basicConfig(format="%(message)s", stream=sys.stderr,
                        level=logging.DEBUG if verbose else logging.INFO)


def _verbose_flag(p: argparse.ArgumentParser):
    p.add_argument("-v", "--verbose", action="store_true", help="log file access")


def _emit(url: str, stream):
    """Write ``url`` back out as the bytes it arrived as."""
    raw = url.encode("utf-8", "surrogateescape")
    buf = getattr(stream, "buffer", None)
    if buf is None:
        print(raw.decode("utf-8", "backslashreplace"), file=stream)
        return
    stream.flush()
    buf.write(raw + b"\n")
    buf.flush()


# ── visitedlink FILE URL... ───────────────────────────────────
def main(argv=None) -> int:
    p = argparse.ArgumentParser(
        prog="visitedlink",
        description="Prints each url on stdout if visited or else on stderr.",
        epilog='Put "--" before the urls if one of them starts with "-".')
    p.add_argument("file", help="Visited Links file")
    p.add_argument("urls", nargs="+", metavar="url")
    p.add_argument("--update", action="store_true",
                   help="toggle each url's visited state before reporting it")
    _verbose_flag(p)
    args = p.parse_args(argv)
    _setup_logging(args.verbose)

    try:
        with VisitedLinkTable(args.file, update=args.update) as table:
            for url, visited in table.check(args.urls, update=args.update):
                _emit(url, sys.stdout if visited else sys.stderr)
    except VisitedLinkError as e:
        logger.error("%s: %s", type(e).__name__, e)
        return 1
    return 0


# ── visitedlink-link -visited=FILE -link=URL [-update] ────────
def link_main(argv=None) -> int:
    p = argparse.ArgumentParser(
        prog="visitedlink-link",
        description="Reports (and optionally flips) the visited state of one link.")
    p.add_argument("-visited", "--visited", required=True, metavar="PATH",
                   help="Visited Links file")
    p.add_argument("-link", "--link", required=True, help="link to look up")
    p.add_argument("-update", "--update", action="store_true",
                   help="toggle the link's visited state")
    _verbose_flag(p)
    args = p.parse_args(argv)
    _setup_logging(args.verbose)

    try:
        with VisitedLinkTable(args.visited, update=args.update) as table:
            visited = table.toggle(args.link) if args.update else table.is_visited(args.link)
    except VisitedLinkError as e:
        logger.error("%s: %s", type(e).__name__, e)
        return 1
    print("true" if visited else "false")
    return 0


# ── visitedlink-create FILE ───────────────────────────────────
def create_main(argv=None) -> int:
    p = argparse.ArgumentParser(prog="visitedlink-create",
                                description="Write an empty Visited Links file.")
    p.add_argument("file")
    p.add_argument("--length", type=int, default=DEFAULT_LENGTH,
                   help=f"slot count (default {DEFAULT_LENGTH})")
    p.add_argument("--force", action="store_true", help="overwrite an existing file")
    _verbose_flag(p)
    args = p.parse_args(argv)
    _setup_logging(args.verbose)
    if args.length <= 0:
        p.error("--length must be positive")

    try:
        with VisitedLinkTable.create(args.file, args.length, overwrite=args.force) as table:
            logger.info("✓ %s: %d slots, salt %s", table.path, table.length, table.salt.hex())
    except VisitedLinkError as e:
        logger.error("%s: %s", type(e).__name__, e)
        return 1
    return 0


# ── visitedlink-stats FILE [--export SNAPSHOT] ────────────────
def stats_main(argv=None) -> int:
    p = argparse.ArgumentParser(prog="visitedlink-stats",
                                description="Occupancy report for a Visited Links file.")
    p.add_argument("file")
    p.add_argument("--export", metavar="SNAPSHOT",
                   help="also write the sorted fingerprints as a zstd snapshot")
    _verbose_flag(p)
    args = p.parse_args(argv)
    _setup_logging(args.verbose)

    try:
        with VisitedLinkTable(args.file) as table:
            st = table_stats(table)
            fps = fingerprints(table) if args.export else None
    except VisitedLinkError as e:
        logger.error("%s: %s", type(e).__name__, e)
        return 1

    print(f"length       {st.length}")
    print(f"used         {st.used}" + ("" if st.used_consistent else " (header)"))
    print(f"occupied     {st.occupied}")
    print(f"load factor  {st.load_factor:.4f}")
    print(f"longest run  {st.longest_run}")
    print(f"tail run     {st.tail_run}")
    if fps is not None:
        try:
            size = write_snapshot(args.export, fps.tolist())
        except OSError as e:
            logger.error("Unable to write snapshot %r: %s", args.export, e)
            return 1
        logger.info("✓ wrote %d fingerprints to %s (%d bytes)", len(fps), args.export, size)
    return 0


if __name__ == "__main__":
    sys.exit(main())
