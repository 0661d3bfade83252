#!/usr/bin/env python3
"""
Report uploads that no record owns and records whose image file is missing.

Usage:
  python scripts/audit_uploads.py [--prune]

--prune removes orphaned image files. Records with a missing image are only
reported; fixing them is a manual decision.
"""
from __future__ import annotations

import argparse
import sys

from site_api.app import build_coordinator
from site_api.core.config import get_settings


def main() -> int:
    ap = argparse.ArgumentParser(description="Audit uploads against photo/event records")
    ap.add_argument("--prune", action="store_true", help="delete orphaned image files")
    args = ap.parse_args()

    svc = build_coordinator(get_settings())
    report = svc.audit()
    if report.clean:
        print("OK: uploads and records are consistent")
        return 0
    for name in report.orphans:
        print(f"[ORPHAN] {name}")
    for record_id in report.dangling:
        print(f"[MISSING] record {record_id} references a file that does not exist")
    if args.prune:
        for name in report.orphans:
            outcome = svc.blobs.delete(name)
            status = "removed" if not outcome.ignorable else f"skipped ({outcome.reason})"
            print(f"  {name}: {status}")
    return 1 if report.dangling else 0


if __name__ == "__main__":
    try:
        raise SystemExit(main())
    except Exception as exc:  # pragma: no cover - CLI use
        sys.stderr.write(f"Error: {exc}\n")
        raise SystemExit(1)
