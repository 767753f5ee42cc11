"""
CLI Entry Point: ptax-ui

Launches the Streamlit PTax calculator page.
"""

import argparse
import os
import sys
from pathlib import Path

from streamlit.web import cli as stcli

from ptax_calculator.dataset import DATA_DIR_ENV

APP_PATH = Path(__file__).resolve().parent.parent / "ui" / "app.py"


def main() -> None:
    parser = argparse.ArgumentParser(description="Run the PTax calculator UI.", add_help=False)
    parser.add_argument("--data-dir", type=Path, default=None, help="Directory holding states.json and ptax-slabs.json.")
    args, streamlit_args = parser.parse_known_args()

    if not APP_PATH.exists():
        print(f"Error: Could not find UI entry point at {APP_PATH}", file=sys.stderr)
        sys.exit(1)

    if args.data_dir is not None:
        if not args.data_dir.is_dir():
            print(f"Error: Data directory not found: {args.data_dir}", file=sys.stderr)
            sys.exit(1)
        # Read by load_reference_data() inside the Streamlit process.
        os.environ[DATA_DIR_ENV] = str(args.data_dir.resolve())

    sys.argv = ["streamlit", "run", str(APP_PATH)] + streamlit_args
    sys.exit(stcli.main())


if __name__ == "__main__":
    main()
