#!/usr/bin/env python3
"""
Application runner script.

Usage:
    python run.py -server
    python run.py -server -host 127.0.0.1 -port 9000
    python run.py -url https://example.com/a.jpg -f png -w 300 -h 200
"""

import sys

from imgproxy.cli import main

if __name__ == "__main__":
    sys.exit(main())
