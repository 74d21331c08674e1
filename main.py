# main.py
"""
Entry point for the sitescan crawler, for running from a checkout.
The command line itself lives in sitescan/cli.py.

    python3 main.py --target example.com
"""

import sys

from sitescan.cli import main

if __name__ == "__main__":
    sys.exit(main())
