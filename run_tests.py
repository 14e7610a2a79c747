#!/usr/bin/env python3
"""
Harmoniq Safety - Single-Command Test Runner
=============================================
Run:  python run_tests.py
      python run_tests.py --html       (with HTML report, needs pytest-html)
      python run_tests.py --quick      (core API + helper tests only)
      python run_tests.py --verbose    (verbose output)
"""

import os
import sys
import subprocess
import datetime

ROOT_DIR = os.path.dirname(os.path.abspath(__file__))
ARTIFACTS_DIR = os.path.join(ROOT_DIR, "test_artifacts")

QUICK_FILES = [
    "tests/test_common.py",
    "tests/test_api_core.py",
]

FEATURE_FILES = [
    "tests/test_assets.py",
    "tests/test_incidents.py",
    "tests/test_checklists.py",
    "tests/test_risk.py",
    "tests/test_notifications.py",
]


def main():
    args = sys.argv[1:]
    quick = "--quick" in args
    html = "--html" in args
    verbose = "--verbose" in args or "-v" in args

    # Clean stale test DB
    test_db = os.path.join(ROOT_DIR, "harmoniq_test.db")
    if os.path.exists(test_db):
        try:
            os.remove(test_db)
        except OSError:
            pass

    cmd = [sys.executable, "-m", "pytest"]
    cmd.extend(QUICK_FILES if quick else QUICK_FILES + FEATURE_FILES)
    cmd.append("-v" if verbose else "-q")
    cmd.append("--tb=short")

    report_path = None
    if html:
        ts = datetime.datetime.now().strftime("%Y%m%d_%H%M%S")
        report_dir = os.path.join(ARTIFACTS_DIR, ts)
        os.makedirs(report_dir, exist_ok=True)
        report_path = os.path.join(report_dir, "test_report.html")
        cmd.extend(["--html", report_path, "--self-contained-html"])
        print(f"[HARMONIQ] HTML report will be saved to: {report_path}")

    print(f"[HARMONIQ] Running: {' '.join(cmd)}")
    print(f"[HARMONIQ] {'Quick mode (core only)' if quick else 'Full suite'}")
    print()

    result = subprocess.run(cmd, cwd=ROOT_DIR)

    if report_path and result.returncode == 0:
        print(f"\n[HARMONIQ] HTML report: {report_path}")

    return result.returncode


if __name__ == "__main__":
    sys.exit(main())
