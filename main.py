#!/usr/bin/env python3
"""NiceTimer — entry point.

Run with:
    python main.py [SEQUENCE NAME]
    python -m nicetimer --list
"""

from nicetimer.__main__ import main


if __name__ == "__main__":
    main()
