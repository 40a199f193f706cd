#!/usr/bin/env python
"""
Build pipeline - checks the seed catalog and runs the test suite.

Usage:
    python scripts/build_all.py
"""
import sys
from pathlib import Path

# Add src to path
src_path = Path(__file__).parent.parent / 'src'
sys.path.insert(0, str(src_path))

from event_estimator.data.build_catalog import build_catalog


def main():
    print("=" * 60)
    print("EVENT ESTIMATOR BUILD PIPELINE")
    print("=" * 60)
    print()

    # Check catalog
    print("[1/2] Checking seed catalog...")
    report = build_catalog(verbose=True)

    if report["status"] != "success":
        print("\n❌ CATALOG CHECK FAILED")
        for error in report["errors"]:
            print(f"  ERROR: {error}")
        sys.exit(1)

    print()
    print("[2/2] Running tests...")

    import subprocess
    test_result = subprocess.run(
        [sys.executable, '-m', 'pytest', 'tests', '-q', '--tb=short'],
        cwd=Path(__file__).parent.parent
    )

    if test_result.returncode != 0:
        print("\n❌ TESTS FAILED")
        sys.exit(1)

    print()
    print("=" * 60)
    print("✅ BUILD COMPLETE")
    print("=" * 60)
    print()
    print("Catalog:")
    for key, value in report['metrics'].items():
        print(f"  {key}: {value}")
    if report['warnings']:
        print()
        print("Warnings:")
        for warning in report['warnings']:
            print(f"  {warning}")


if __name__ == "__main__":
    main()
