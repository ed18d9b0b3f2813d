#!/usr/bin/env python3
"""
filesweep CLI: find duplicate and oversized files, remove them safely.
Runs the same engine as the GUI worker but with console-based interaction.
Removal moves files to the system trash unless --permanent is given, and every
successful removal is recorded in the audit log (see --audit-out).

Exit codes: 0 success, 1 fatal error, 2 some items could not be removed,
130 cancelled with Ctrl+C.
"""
from __future__ import annotations  # Enable postponed evaluation of annotations (PEP 563)
import argparse
import logging
import os
import signal
import sys
import time
from pathlib import Path
from typing import List, NoReturn, Optional, Sequence

logging.basicConfig(
    level=logging.ERROR,
    format="%(levelname)-8s | %(name)-25s | %(message)s"
)

# === EARLY DEPENDENCY VALIDATION ===
_MISSING_DEPS = []
try:
    import send2trash  # noqa: F401
except ImportError:
    _MISSING_DEPS.append("send2trash")

try:
    import xxhash  # noqa: F401
except ImportError:
    _MISSING_DEPS.append("xxhash")

if _MISSING_DEPS:
    print("❌ Missing required dependencies:", file=sys.stderr)
    print(f"   pip install {' '.join(_MISSING_DEPS)}", file=sys.stderr)
    sys.exit(1)

# === NORMAL IMPORTS (after validation) ===
from filesweep.core.models import BatchResult, DuplicateRow, LargeFileEntry, SweepFeature, SweepParams
from filesweep.core.pagination import DEFAULT_PAGE_SIZE
from filesweep.core.results import DuplicateScanResult, LargeFileResult
from filesweep.engine import SweepEngine
from filesweep.errors import FileSweepError, OperationCancelled
from filesweep.services.duplicate_service import DuplicateService
from filesweep.services.file_service import FileService
from filesweep.utils.convert_utils import ConvertUtils
from filesweep.aliases import (
    ALGORITHM_ALIASES, ALGORITHM_CHOICES, ALGORITHM_HELP_TEXT,
    SORT_ALIASES, SORT_CHOICES, SORT_HELP_TEXT,
    EPILOG_TEXT
)

EXIT_OK = 0
EXIT_FATAL = 1
EXIT_PARTIAL = 2
EXIT_CANCELLED = 130

MAX_REPORTED_ERRORS = 5


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {value!r}")
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be positive: {value}")
    return number


class CLIApplication:
    """Main CLI application controller."""

    def __init__(self):
        self.start_time: float = time.time()
        self.verbose: bool = False
        self.quiet: bool = False
        self._stop_requested: bool = False

        # Fix encoding for Windows consoles to prevent UnicodeEncodeError
        for stream in (sys.stdout, sys.stderr):
            if hasattr(stream, "reconfigure"):
                stream.reconfigure(encoding='utf-8')

    @staticmethod
    def build_parser() -> argparse.ArgumentParser:
        common = argparse.ArgumentParser(add_help=False)
        common.add_argument(
            "--excluded-dirs", "-e",
            action="append",
            default=None,
            type=str,
            metavar='DIR',
            dest="excluded_dirs",
            help="Excluded/ignored directory; repeat the flag for more than one"
        )
        common.add_argument(
            "--page",
            default=1,
            type=_positive_int,
            metavar='N',
            help="Page to display, 1-based; out-of-range pages are clamped. Default: 1"
        )
        common.add_argument(
            "--page-size",
            default=DEFAULT_PAGE_SIZE,
            type=_positive_int,
            metavar='N',
            dest="page_size",
            help=f"Rows per page. Default: {DEFAULT_PAGE_SIZE}"
        )
        common.add_argument(
            "--workers",
            default=4,
            type=_positive_int,
            metavar='N',
            help="Parallel hashing threads. Default: 4"
        )
        common.add_argument(
            "--algorithm",
            choices=ALGORITHM_CHOICES,
            default="sha256",
            type=str,
            help=ALGORITHM_HELP_TEXT
        )
        common.add_argument(
            "--skip-inaccessible",
            action="store_true",
            dest="skip_inaccessible",
            help="Skip unreadable directories and files instead of aborting the scan"
        )
        common.add_argument(
            "--rename",
            default=None,
            type=str,
            metavar='PREFIX',
            help="Rename selected files to PREFIX_<name> instead of removing them"
        )
        common.add_argument(
            "--permanent",
            action="store_true",
            help="Delete permanently instead of moving to the system trash"
        )
        common.add_argument(
            "--force",
            action="store_true",
            help="Skip confirmation prompt (for automation/scripts)"
        )
        common.add_argument(
            "--audit-out",
            default=None,
            type=str,
            metavar='FILE',
            dest="audit_out",
            help="Append the removal audit log (timestamp, path, method) to FILE"
        )
        common.add_argument(
            "--quiet", "-q",
            action="store_true",
            help="Suppress non-essential output"
        )
        common.add_argument(
            "--verbose", "-v",
            action="store_true",
            help="Show detailed statistics and progress"
        )

        parser = argparse.ArgumentParser(
            prog="filesweep",
            description="filesweep: duplicate and large file finder with safe, audited removal",
            formatter_class=argparse.RawTextHelpFormatter,
            epilog=EPILOG_TEXT
        )
        subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
        subparsers.required = True

        dupes = subparsers.add_parser(
            "dupes",
            parents=[common],
            formatter_class=argparse.RawTextHelpFormatter,
            help="Find files with identical content"
        )
        dupes.add_argument("root", type=str, help="Directory to scan for duplicates")
        dupes.add_argument(
            "--extensions", "-x",
            default="",
            type=str,
            metavar='',
            help="Comma-separated extensions to include (e.g. jpg,.PNG)"
        )
        dupes.add_argument(
            "--sort",
            choices=SORT_CHOICES,
            default="path",
            type=str,
            help=SORT_HELP_TEXT
        )
        dupes.add_argument(
            "--keep-one",
            action="store_true",
            dest="keep_one",
            help="Keep the first file of each duplicate group and remove the rest. "
                 "Always shows preview before removal."
        )

        large = subparsers.add_parser(
            "large",
            parents=[common],
            formatter_class=argparse.RawTextHelpFormatter,
            help="Rank the largest files across one or more roots"
        )
        large.add_argument("roots", nargs="+", type=str, help="Directories to rank")
        large.add_argument(
            "--min-size", "-m",
            default="0",
            type=str,
            metavar='',
            dest="min_size",
            help="Minimum file size (e.g., 500KB, 1MB). Default: 0"
        )
        large.add_argument(
            "--limit",
            default=None,
            type=_positive_int,
            metavar='N',
            help="Keep only the N largest files"
        )
        large.add_argument(
            "--select",
            nargs="+",
            default=[],
            type=_positive_int,
            metavar='RANK',
            help="Remove (or rename) the files at these ranks, as shown in the listing"
        )
        return parser

    def parse_args(self, args=None) -> argparse.Namespace:
        """Parse command-line arguments."""
        return self.build_parser().parse_args(args)

    @staticmethod
    def wants_removal(args: argparse.Namespace) -> bool:
        if args.command == "dupes":
            return args.keep_one
        return bool(args.select)

    def validate_args(self, args: argparse.Namespace) -> None:
        """Validate command-line arguments before execution."""
        action_flag = "--keep-one" if args.command == "dupes" else "--select"
        removal = self.wants_removal(args)

        for flag, used in (("--force", args.force), ("--permanent", args.permanent),
                           ("--rename", args.rename is not None)):
            if used and not removal:
                self.error_exit(f"{flag} can only be used with {action_flag}")

        if args.rename is not None and args.permanent:
            self.error_exit("--rename and --permanent are mutually exclusive")

        if args.rename is not None:
            try:
                FileService.validate_prefix(args.rename)
            except ValueError as e:
                self.error_exit(str(e))

        # Prevent interactive confirmation in non-TTY environments
        if removal and not args.force:
            if not sys.stdin.isatty() or not sys.stdout.isatty():
                self.error_exit(
                    "Cannot request interactive confirmation in non-interactive session.\n"
                    "Use --force flag to proceed without confirmation when piping output or running in scripts."
                )

        roots = [args.root] if args.command == "dupes" else args.roots
        for root in roots:
            root_path = Path(root).resolve()
            if not root_path.exists():
                self.error_exit(f"Directory not found: {root}")
            if not root_path.is_dir():
                self.error_exit(f"Path is not a directory: {root}")

        if args.command == "large" and not ConvertUtils.is_valid_size_format(args.min_size):
            self.error_exit(f"Invalid size format: {args.min_size}")

        for excl_dir in args.excluded_dirs or []:
            excl_path = Path(excl_dir).resolve()
            if not excl_path.exists():
                self.warning(f"Excluded directory not found: {excl_dir}")
            elif not excl_path.is_dir():
                self.warning(f"Excluded path is not a directory: {excl_dir}")

    def create_params(self, args: argparse.Namespace) -> SweepParams:
        """Create SweepParams from CLI arguments."""
        try:
            excluded_dirs = [str(Path(item.strip()).resolve()) for item in args.excluded_dirs or []]
            common = dict(
                excluded_dirs=excluded_dirs,
                page_size=args.page_size,
                hash_algorithm=ALGORITHM_ALIASES[args.algorithm],
                workers=args.workers,
                use_trash=not args.permanent,
                skip_inaccessible=args.skip_inaccessible,
            )
            if args.command == "dupes":
                return SweepParams.from_human_readable(
                    roots=[str(Path(args.root).resolve())],
                    extensions_str=args.extensions,
                    sort_order=SORT_ALIASES[args.sort],
                    **common
                )
            return SweepParams.from_human_readable(
                roots=[str(Path(r).resolve()) for r in args.roots],
                min_size_str=args.min_size,
                limit=args.limit,
                **common
            )
        except ValueError as e:
            self.error_exit(f"Parameter error: {e}")

    # =============================
    # Progress and cancellation
    # =============================
    def progress_callback(self, stage: str, current: int, total: Optional[int]) -> None:
        """CLI progress callback - shows progress in console."""
        if not self.verbose:
            return

        if total and total > 0:
            percent = (current / total) * 100
            sys.stderr.write(f"\r  [{stage}] {current}/{total} ({percent:.1f}%)")
        else:
            sys.stderr.write(f"\r  [{stage}] {current} files processed...")
        sys.stderr.flush()

    def stopped_flag(self) -> bool:
        return self._stop_requested

    def request_stop(self, signum=None, frame=None) -> None:
        """SIGINT handler: ask the running scan to stop at its next check."""
        self._stop_requested = True

    def _install_sigint_handler(self):
        try:
            return signal.signal(signal.SIGINT, self.request_stop)
        except ValueError:
            # not in the main thread
            return None

    @staticmethod
    def _restore_sigint_handler(previous) -> None:
        if previous is not None:
            signal.signal(signal.SIGINT, previous)

    # =============================
    # Commands
    # =============================
    def run_dupes(self, engine: SweepEngine, args: argparse.Namespace) -> int:
        params = engine.params
        root = params.roots[0]
        if not self.quiet:
            print(f"Scanning directory: {root}")

        result = self._scan(lambda: engine.scan_duplicates(
            root,
            stopped_flag=self.stopped_flag,
            progress_callback=self.progress_callback if self.verbose else None
        ))
        if self.verbose:
            print(result.stats.summary())

        result.pages.go_to(args.page - 1)
        self.output_duplicates(result)

        if not args.keep_one:
            return EXIT_OK
        return self.execute_keep_one(engine, result, prefix=args.rename, force=args.force)

    def run_large(self, engine: SweepEngine, args: argparse.Namespace) -> int:
        params = engine.params
        if not self.quiet:
            print(f"Ranking files in: {', '.join(params.roots)}")

        result = self._scan(lambda: engine.scan_large_files(
            params.roots,
            stopped_flag=self.stopped_flag,
            progress_callback=self.progress_callback if self.verbose else None
        ))

        result.pages.go_to(args.page - 1)
        self.output_large_files(result)

        if not args.select:
            return EXIT_OK
        return self.execute_select(engine, result, args.select, prefix=args.rename, force=args.force)

    def _scan(self, call):
        previous = self._install_sigint_handler()
        try:
            return call()
        except OperationCancelled:
            print("\n⚠️  Scan cancelled by user (Ctrl+C)", file=sys.stderr)
            sys.exit(EXIT_CANCELLED)
        except (FileSweepError, ValueError) as e:
            self.error_exit(f"Scan failed: {e}")
        finally:
            self._restore_sigint_handler(previous)
            if self.verbose:
                sys.stderr.write("\n")

    # =============================
    # Output
    # =============================
    def output_duplicates(self, result: DuplicateScanResult) -> None:
        if self.quiet:
            return

        if not result.groups:
            print("No duplicate groups found.")
            return

        print(f"\nFound {len(result.groups)} duplicate groups ({result.total_files} files, "
              f"{ConvertUtils.bytes_to_human(result.wasted_bytes)} reclaimable)")
        print(f"Sort: {result.sort_order.display_name} | {result.pages.page_label()}")
        print("-" * 60)
        for row in result.pages.page_items():
            self._print_duplicate_row(row)

    @staticmethod
    def _print_duplicate_row(row: DuplicateRow) -> None:
        size_str = ConvertUtils.bytes_to_human(row.size)
        print(f"  #{row.group_index + 1:<4} {size_str:>10}  {row.path}")

    def output_large_files(self, result: LargeFileResult) -> None:
        if self.quiet:
            return

        if not result.entries:
            print("No files found.")
            return

        print(f"\nRanked {len(result.entries)} files "
              f"({ConvertUtils.bytes_to_human(result.total_bytes)} total) | {result.pages.page_label()}")
        print("-" * 60)
        for rank, entry in enumerate(result.pages.page_items(), result.pages.offset + 1):
            print(f"  {rank:>5}. {ConvertUtils.bytes_to_human(entry.size):>10}  {entry.path}")

    # =============================
    # Removal
    # =============================
    def execute_keep_one(
            self,
            engine: SweepEngine,
            result: DuplicateScanResult,
            prefix: Optional[str] = None,
            force: bool = False
    ) -> int:
        """Keep the first file per group, remove the rest. Always shows preview before removal."""
        if not result.groups:
            return EXIT_OK

        files_to_remove, _ = DuplicateService.keep_only_one_file_per_group(result.groups)
        sizes = {path: group.size for group in result.groups for path in group.members}

        print()
        for idx, group in enumerate(result.groups, 1):
            print(f"📁 Group {idx} | Size: {ConvertUtils.bytes_to_human(group.size)} | Files: {group.count}")
            print("-" * 60)
            print(f"   [KEEP] {group.members[0]}")
            for path in group.members[1:]:
                print(f"   [{'REN' if prefix else 'DEL'}]  {path}")
            print()

        space_saved = sum(sizes[p] for p in files_to_remove)
        print("=" * 60)
        print(f"Summary: Keep 1 file per group ({len(result.groups)} files preserved, "
              f"{len(files_to_remove)} files affected)")
        if not prefix:
            print(f"Total space saved: {ConvertUtils.bytes_to_human(space_saved)}")
        print()

        if not self.confirm(files_to_remove, prefix, engine.params.use_trash, force):
            return EXIT_OK

        outcome = self._remove(engine, files_to_remove, SweepFeature.DUPLICATES, prefix)
        result.discard(outcome.succeeded)
        return self.report_batch(outcome, len(files_to_remove), prefix)

    def execute_select(
            self,
            engine: SweepEngine,
            result: LargeFileResult,
            ranks: Sequence[int],
            prefix: Optional[str] = None,
            force: bool = False
    ) -> int:
        """Remove the ranked files picked with --select."""
        entries = result.pages.items()
        bad = [r for r in ranks if r > len(entries)]
        if bad:
            self.error_exit(f"Rank out of range: {', '.join(map(str, bad))} (have {len(entries)} files)")

        selected: List[LargeFileEntry] = []
        for rank in ranks:
            entry = entries[rank - 1]
            if entry not in selected:
                selected.append(entry)

        print()
        for entry in selected:
            print(f"   [{'REN' if prefix else 'DEL'}]  {entry.path} [{ConvertUtils.bytes_to_human(entry.size)}]")
        print()

        paths = [e.path for e in selected]
        if not self.confirm(paths, prefix, engine.params.use_trash, force):
            return EXIT_OK

        outcome = self._remove(engine, paths, SweepFeature.LARGE_FILES, prefix)
        result.discard(outcome.succeeded)
        return self.report_batch(outcome, len(paths), prefix)

    def confirm(self, paths: List[str], prefix: Optional[str], use_trash: bool, force: bool) -> bool:
        if not paths:
            if not self.quiet:
                print("Nothing to remove.")
            return False

        if force:
            print("⚠️  WARNING: --force flag skips confirmation. Proceeding...")
            return True

        # Safety check: confirm we're still in interactive mode
        if not sys.stdin.isatty() or not sys.stdout.isatty():
            self.error_exit(
                "Lost interactive terminal during operation. "
                "Use --force to proceed in non-interactive environments."
            )

        if prefix:
            question = f"Rename {len(paths)} files with prefix '{prefix}_'?"
        elif use_trash:
            question = f"Are you sure you want to move {len(paths)} files to trash?"
        else:
            question = f"Are you sure you want to PERMANENTLY delete {len(paths)} files?"
        response = input(f"{question} [y/N]: ")
        if response.strip().lower() not in ("y", "yes"):
            print("Cancelled by user.")
            return False
        return True

    def _remove(self, engine: SweepEngine, paths: List[str], feature: SweepFeature,
                prefix: Optional[str]) -> BatchResult:
        progress = self.progress_callback if self.verbose else None
        # Ctrl+C only raises the stop flag here: a started batch runs to the end
        previous = self._install_sigint_handler()
        try:
            if prefix:
                outcome = engine.rename(paths, prefix, feature, progress_callback=progress)
            else:
                outcome = engine.delete(paths, feature, progress_callback=progress)
        finally:
            self._restore_sigint_handler(previous)
            if self.verbose:
                sys.stderr.write("\n")
        if self._stop_requested:
            print("\n⚠️  Ctrl+C received: finished the started batch before stopping", file=sys.stderr)
        return outcome

    def report_batch(self, outcome: BatchResult, total: int, prefix: Optional[str] = None) -> int:
        verb = "renamed" if prefix else "removed"
        if outcome.ok:
            if not self.quiet:
                print(f"✅ Successfully {verb} {outcome.success_count} files.")
            return EXIT_OK

        print(f"\n⚠️  Partial success: {outcome.success_count}/{total} files {verb}.")
        print(f"Failed for {outcome.failure_count} file(s):")
        for path, reason in outcome.error_pairs()[:MAX_REPORTED_ERRORS]:
            print(f"  • {os.path.basename(path)}: {reason}")
        if outcome.failure_count > MAX_REPORTED_ERRORS:
            print(f"  ...and {outcome.failure_count - MAX_REPORTED_ERRORS} more files")
        return EXIT_PARTIAL

    def write_audit(self, engine: SweepEngine, audit_out: Optional[str]) -> None:
        if not audit_out or not len(engine.audit_log):
            return
        try:
            count = engine.write_audit_log(audit_out, append=True)
        except OSError as e:
            self.error_exit(f"Cannot write audit log to {audit_out}: {e}")
        if not self.quiet:
            print(f"Audit log: {count} records appended to {audit_out}")

    # =============================
    # Messages
    # =============================
    def warning(self, message: str) -> None:
        """Print a warning message to stderr."""
        if not self.quiet:
            print(f"⚠️  {message}", file=sys.stderr)

    @staticmethod
    def error_exit(message: str, code: int = EXIT_FATAL) -> NoReturn:
        """Print error and exit."""
        print(f"❌ Error: {message}", file=sys.stderr)
        sys.exit(code)

    def run(self, argv=None) -> int:
        """Main entry point. Returns the process exit code."""
        args = self.parse_args(argv)
        self.verbose = args.verbose
        self.quiet = args.quiet and not args.verbose
        if self.verbose:
            logging.getLogger().setLevel(logging.DEBUG)

        self.validate_args(args)
        engine = SweepEngine(self.create_params(args))

        try:
            if args.command == "dupes":
                code = self.run_dupes(engine, args)
            else:
                code = self.run_large(engine, args)
        finally:
            # Whatever reached the disk also reaches --audit-out
            self.write_audit(engine, args.audit_out)

        if self._stop_requested:
            code = EXIT_CANCELLED

        elapsed = time.time() - self.start_time
        if self.verbose:
            print(f"\n✅ Completed in {elapsed:.2f} seconds")
        return code


def main(argv=None) -> None:
    """Application entry point."""
    app = CLIApplication()
    try:
        code = app.run(argv)
    except KeyboardInterrupt:
        print("\n⚠️  Operation cancelled by user (Ctrl+C)", file=sys.stderr)
        sys.exit(EXIT_CANCELLED)
    except Exception as e:
        if os.environ.get("DEBUG"):
            raise
        print(f"❌ Unexpected error: {e}", file=sys.stderr)
        sys.exit(EXIT_FATAL)
    sys.exit(code)


if __name__ == "__main__":
    main()
