#!/usr/bin/env python3
"""StepsTimer entry point.

Run with:
    python main.py
    python -m stepstimer
"""

from stepstimer.__main__ import main


if __name__ == "__main__":
    main()
