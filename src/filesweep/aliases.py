from filesweep.core.models import DuplicateSortOrder, HashAlgorithmName

SORT_ALIASES = {
    "path": DuplicateSortOrder.PATH,
    "size": DuplicateSortOrder.SIZE,
}

SORT_CHOICES = list(SORT_ALIASES.keys())

SORT_HELP_TEXT = (
    "Order of the duplicate list:\n"
    "  path  : alphabetical by full path (default)\n"
    "  size  : smallest files first, path as tie-break\n"
)

ALGORITHM_ALIASES = {
    "sha256": HashAlgorithmName.SHA256,
    "xxh128": HashAlgorithmName.XXH128,
}

ALGORITHM_CHOICES = list(ALGORITHM_ALIASES.keys())

ALGORITHM_HELP_TEXT = (
    "Content digest used to confirm duplicates:\n"
    "  sha256  : cryptographic, collision-safe (default)\n"
    "  xxh128  : much faster, non-cryptographic\n"
)

EPILOG_TEXT = """
Examples:
  List duplicate files under Downloads, first page
  %(prog)s dupes ~/Downloads

  Only images, biggest duplicates last, page 2 with 50 rows per page
  %(prog)s dupes ~/Downloads -x jpg,png --sort size --page 2 --page-size 50

  Keep one file per duplicate group, move the rest to trash (with confirmation)
  %(prog)s dupes ~/Downloads --keep-one

  Same as above without confirmation, audit trail appended to a file
  %(prog)s dupes ~/Downloads --keep-one --force --audit-out ~/sweep-audit.tsv

  Ten largest files over 100MB across two drives
  %(prog)s large /mnt/a /mnt/b --min-size 100MB --limit 10

  Rename the 1st and 3rd largest files to 'old_<name>' instead of deleting them
  %(prog)s large ~/Videos --select 1 3 --rename old
"""
