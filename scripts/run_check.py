#!/usr/bin/env python3
"""
CLI script to run update checks manually.

Usage:
    python run_check.py --add com.example.app 1.0 --name "Example"   # Track an app
    python run_check.py --list                                        # List tracked apps
    python run_check.py --package com.example.app                     # Check one app
    python run_check.py                                               # Check all user apps
"""

import argparse
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from apktrack.core.service import UpdateService
from apktrack.models.application import ApplicationRecord, sort_applications
from apktrack.models.outcome import CheckStatus
from apktrack.utils.logger import setup_logging


def main():
    parser = argparse.ArgumentParser(
        description='APKTrack - Application Update Checker'
    )
    parser.add_argument(
        '--package',
        type=str,
        help='Package name to check (checks all if not specified)'
    )
    parser.add_argument(
        '--add',
        nargs=2,
        metavar=('PACKAGE', 'VERSION'),
        help='Track an application with its installed version'
    )
    parser.add_argument(
        '--name',
        type=str,
        help='Display name for --add (defaults to the package name)'
    )
    parser.add_argument(
        '--system',
        action='store_true',
        help='Mark the application added with --add as a system app'
    )
    parser.add_argument(
        '--list',
        action='store_true',
        help='List tracked applications'
    )
    parser.add_argument(
        '--sort',
        choices=['alphabetical', 'system', 'updated', 'system_updated'],
        default='system_updated',
        help='Ordering used by --list (default: system_updated)'
    )
    parser.add_argument(
        '--include-system',
        action='store_true',
        help='Also check system applications'
    )
    parser.add_argument(
        '--state',
        type=str,
        help='Application state JSON file (default: ~/.apktrack/apps.json)'
    )
    parser.add_argument(
        '--output',
        type=str,
        help='Export results to this CSV file'
    )
    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable verbose logging'
    )

    args = parser.parse_args()

    setup_logging(level='DEBUG' if args.verbose else 'INFO')

    service = UpdateService(state_file=args.state)

    if args.add:
        package_name, version = args.add
        record = ApplicationRecord(
            package_name=package_name,
            display_name=args.name or package_name,
            version=version,
            system_app=args.system
        )
        if service.store.add_app(record):
            print(f"Tracking {record.display_name} ({package_name}) at version {version}")
        else:
            print(f"{package_name} is already tracked")
        return

    if args.list:
        print("\nTracked Applications:")
        print("-" * 50)
        for app in sort_applications(service.store.all_apps(), args.sort):
            marker = "*" if app.is_update_available else " "
            print(f" {marker} {app}")
        return

    if args.package:
        print(f"\nChecking: {args.package}")
        print("-" * 50)
        outcomes = [service.check_app(args.package)]
        print(outcomes[0])

    else:
        print("\nChecking all applications...")
        print("-" * 50)
        outcomes = service.check_all(include_system=args.include_system)

        print("\nResults Summary:")
        print("-" * 70)
        for outcome in outcomes:
            print(f"  [{outcome.status.value:13}] {outcome.package_name} {outcome.message or ''}")

        updated = sum(1 for o in outcomes if o.status == CheckStatus.UPDATED)
        errors = sum(1 for o in outcomes if not o.is_success)
        print(f"\nSummary: {updated} updated, {len(outcomes) - updated - errors} up to date, {errors} errors")

    if args.output:
        output_path = service.export_to_csv(outcomes, args.output)
        print(f"\nResults exported to: {output_path}")


if __name__ == '__main__':
    main()
