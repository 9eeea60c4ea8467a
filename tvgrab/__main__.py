#!/usr/bin/env python3
"""
tvgrab.__main__ - Module entry point

    python -m tvgrab tv_grab_cz --days 1
"""

import sys


def main(argv=None):
    """Dispatch to the grabber named by the first argument"""
    from .grabbers import GRABBERS
    from .main import run

    argv = list(sys.argv[1:] if argv is None else argv)
    if not argv or argv[0] not in GRABBERS:
        print(f"Usage: python -m tvgrab {{{','.join(GRABBERS)}}} [options]", file=sys.stderr)
        return 1

    return run(GRABBERS[argv[0]], argv[1:])


if __name__ == "__main__":
    sys.exit(main())
