"""Clean leftover scratch checkouts command"""
import tempfile
from pathlib import Path

from gitsite.core import RealFileSystemService
from gitsite.utils.paths import SCRATCH_GLOB


def setup_parser(parser):
    """Setup argument parser for clean command"""
    parser.add_argument(
        '--dry-run',
        action='store_true',
        help='Only show what would be removed'
    )
    parser.add_argument(
        '--temp-dir',
        help='Directory holding scratch checkouts (default: system temp dir)'
    )


def execute(args, filesystem=None):
    """Execute clean command"""
    fs = filesystem or RealFileSystemService()
    temp_dir = Path(args.temp_dir or tempfile.gettempdir())
    print(f"Looking for scratch checkouts in {temp_dir}...")

    leftovers = sorted(p for p in fs.glob(temp_dir, SCRATCH_GLOB) if fs.is_dir(p))
    if not leftovers:
        print("Nothing to clean.")
        return 0

    cleaned_items = []
    failed = False
    for checkout in leftovers:
        if args.dry_run:
            cleaned_items.append(f"{checkout} (dry run)")
            continue
        try:
            fs.rmtree(checkout)
            cleaned_items.append(str(checkout))
        except OSError as e:
            print(f"Warning: Could not remove {checkout}: {e}")
            failed = True

    if cleaned_items:
        print("\nCleaned:")
        for item in cleaned_items:
            print(f"  ✓ {item}")
    print("\nDone!")
    return 1 if failed else 0
