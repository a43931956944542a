"""
Run one AI visibility scan end to end from the CLI.
"""

from __future__ import annotations

import argparse
import json
import logging
import os

from app.services.scan_service import InlineTaskExecutor, ScanService
from db.session import SessionLocal


def main() -> int:
    parser = argparse.ArgumentParser(description="Scan a website's visibility across AI platforms.")
    parser.add_argument("url", help="Website URL or bare domain to scan.")
    parser.add_argument(
        "--region",
        dest="regions",
        action="append",
        default=None,
        help="Region code to include (repeatable). Defaults to the standard region set.",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, os.getenv("LOG_LEVEL", "INFO").strip().upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    service = ScanService()
    with SessionLocal() as db:
        scan = service.create_scan(
            db=db,
            executor=InlineTaskExecutor(),
            url=args.url,
            regions=args.regions,
        )

    with SessionLocal() as db:
        refreshed = service.get_scan(db=db, scan_id=scan.id)
        if refreshed is None:
            return 1
        report = service.build_report(db=db, scan=refreshed)
        payload = {
            "scan_id": str(refreshed.id),
            "url": refreshed.url,
            "status": refreshed.status,
            "overall_score": refreshed.overall_score,
            "error_message": refreshed.error_message,
            "platform_results": [
                {
                    "platform": result.platform,
                    "score": result.score,
                    "total_queries": result.total_queries,
                    "mention_count": result.mention_count,
                    "citation_count": result.citation_count,
                }
                for result in report.platform_results
            ],
            "opportunities": [
                {"type": item.type, "priority": item.priority, "title": item.title}
                for item in report.opportunities
            ],
        }

    print(json.dumps(payload, indent=2))
    return 0 if payload["status"] == "COMPLETED" else 2


if __name__ == "__main__":
    raise SystemExit(main())
