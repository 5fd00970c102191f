"""
Split a bundle of account statements into one PDF per account.

Usage:
    python examples/split_statements.py statements.pdf out/
"""

import sys

import keysplit


def main():
    if len(sys.argv) != 3:
        print(__doc__)
        sys.exit(1)

    source, output_dir = sys.argv[1], sys.argv[2]

    try:
        result = keysplit.split(
            source,
            output_dir,
            pattern=r"^Account (?:No\.|Number):\s*(?P<account>[\d-]+)",
            key_group="account",
            dated=True,
        )
    except keysplit.KeySplitError as e:
        print(f"Error: {e}")
        sys.exit(e.exit_code)

    print(f"{result.total_pages} pages -> {len(result.segments)} documents")
    for written in result.segments:
        seg = written.segment
        print(f"  [{seg.start}-{seg.end}] {written.path}")


if __name__ == "__main__":
    main()
