#!/usr/bin/env python3
"""
Glide Client - Launcher

Usage:
    python main_client.py <host> <port> [--download-dir DIR] [--safe-filenames] [-v]

Commands once logged in:
    list, reqs, glide <path> @<user>, ok @<user>, no @<user>, help, exit
"""

import sys
import os

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from glide_client.main_client import main


if __name__ == "__main__":
    sys.exit(main())
