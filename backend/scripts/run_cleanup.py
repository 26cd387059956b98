#!/usr/bin/env python
"""Run one retention pass outside the API process.

Automatic cleanup is handled by the scheduler inside the API process. This
script is for manual or emergency cleanup and for checking what a pass would
delete.

Usage:
    python backend/scripts/run_cleanup.py            # delete expired uploads
    python backend/scripts/run_cleanup.py --dry-run  # report only

Environment Variables:
    See imagepro.config.Settings (MONGO_URI, GOOGLE_CLOUD_* ...)
"""

import argparse
import asyncio
import json
import sys

from imagepro.config import get_settings
from imagepro.main import build_retention_scheduler
from imagepro.retention.schemas import RetentionFailure


async def run(dry_run: bool) -> int:
    settings = get_settings()
    scheduler = build_retention_scheduler(settings)
    service = scheduler.service

    try:
        if dry_run:
            report = await service.generate_retention_report()
            print(json.dumps(report.model_dump(by_alias=True, mode="json"), indent=2))
            return 0

        result = await scheduler.run_now()
        print(json.dumps(result.model_dump(by_alias=True, mode="json"), indent=2))
        return 1 if isinstance(result, RetentionFailure) else 0
    finally:
        await service.metadata_store.close()


def main():
    parser = argparse.ArgumentParser(description="Delete uploads older than the retention window")
    parser.add_argument("--dry-run", action="store_true", help="Report eligible items without deleting")
    args = parser.parse_args()

    sys.exit(asyncio.run(run(args.dry_run)))


if __name__ == "__main__":
    main()
