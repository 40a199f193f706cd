#!/usr/bin/env python
"""
Run the Streamlit estimate builder.

Checks the seed catalog first and refuses to start on a broken one.

Usage:
    python scripts/run_app.py

Serves on $STREAMLIT_PORT (default 8501).
"""
import os
import subprocess
import sys
from pathlib import Path

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / 'src'))

from event_estimator.data.build_catalog import build_catalog


def main():
    ui_path = project_root / 'src' / 'event_estimator' / 'ui' / 'app_streamlit.py'

    report = build_catalog(verbose=False)
    if report['status'] != 'success':
        for error in report['errors']:
            print(f"ERROR: {error}")
        print("Catalog check failed; fix the seed files before starting the UI.")
        sys.exit(1)

    cmd = [
        sys.executable, '-m', 'streamlit', 'run', str(ui_path),
        '--server.port', os.getenv('STREAMLIT_PORT', '8501'),
    ]
    print(f"Starting estimate builder: {' '.join(cmd)}")

    try:
        subprocess.run(cmd, cwd=str(project_root))
    except KeyboardInterrupt:
        print("\nEstimate builder stopped.")


if __name__ == "__main__":
    main()
