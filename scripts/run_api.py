#!/usr/bin/env python
"""
Run the Event Estimator API.

Usage:
    python scripts/run_api.py [--reload]

Listens on $HOST:$PORT (default 0.0.0.0:3002).
"""
import subprocess
import sys
import os
from pathlib import Path


def main():
    project_root = Path(__file__).parent.parent
    os.chdir(project_root)

    # Ensure src is in python path
    env = os.environ.copy()
    src_path = str(project_root / "src")
    if "PYTHONPATH" in env:
        env["PYTHONPATH"] = f"{src_path}{os.pathsep}{env['PYTHONPATH']}"
    else:
        env["PYTHONPATH"] = src_path

    cmd = [
        sys.executable, "-m", "uvicorn",
        "event_estimator.api.main:app",
        "--host", env.get("HOST", "0.0.0.0"),
        "--port", env.get("PORT", "3002"),
    ]
    if "--reload" in sys.argv[1:]:
        cmd.append("--reload")

    print(f"Starting Event Estimator API: {' '.join(cmd)}")
    try:
        subprocess.run(cmd, env=env)
    except KeyboardInterrupt:
        print("\nAPI stopped.")


if __name__ == "__main__":
    main()
