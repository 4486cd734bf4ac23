"""
Ingest scraped product records from a JSON file.

The file holds either a list of records or an object with a ``records`` list.
Keys may be camelCase (scraper output) or snake_case.
"""

from __future__ import annotations

import argparse
import json
from pathlib import Path

from app.config import get_ingestion_settings
from app.domain.product_ingestion import ScrapedRecord, TableTarget
from app.services.product_ingestion_service import get_product_ingestion_service
from db.config import load_env_files
from db.session import SessionLocal


def _load_records(path: Path) -> list[ScrapedRecord]:
    payload = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(payload, dict):
        payload = payload.get("records", [])
    if not isinstance(payload, list):
        raise ValueError(f"{path} must contain a list of records.")
    return [ScrapedRecord.from_mapping(item) for item in payload]


def main() -> int:
    load_env_files()
    parser = argparse.ArgumentParser(description="Upsert scraped products into a product table.")
    parser.add_argument("path", type=Path, help="JSON file with scraped records.")
    parser.add_argument("--user-id", dest="user_id", required=True, help="Owner of the products.")
    parser.add_argument(
        "--version",
        dest="version",
        choices=[target.value for target in TableTarget],
        default=None,
        help="Target table (defaults to INGEST_DEFAULT_TABLE).",
    )
    parser.add_argument(
        "--margin-rate",
        dest="margin_rate",
        type=float,
        default=None,
        help="Margin percentage used to compute sale prices.",
    )
    args = parser.parse_args()

    records = _load_records(args.path)
    table_target = TableTarget(args.version or get_ingestion_settings().default_table)

    service = get_product_ingestion_service()
    with SessionLocal() as db:
        result = service.ingest(
            records,
            db=db,
            user_id=args.user_id,
            table_target=table_target,
            margin_rate=args.margin_rate,
        )

    payload = {
        "table": table_target.value,
        "total": result.total,
        "saved": result.saved,
        "failed": result.failed,
        "errors": [
            {
                "external_id": failure.external_id,
                "title": failure.title,
                "error_reason": failure.error_reason,
            }
            for failure in result.errors
        ],
    }
    print(json.dumps(payload, indent=2, ensure_ascii=False))
    return 0 if result.failed == 0 else 2


if __name__ == "__main__":
    raise SystemExit(main())
