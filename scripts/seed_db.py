"""
Seed script for the Safe Bharat mock DB or Firestore.

Usage:
  - Dry run (default): python scripts/seed_db.py
  - Apply to configured DB: python scripts/seed_db.py --apply
  - Use another seed file: python scripts/seed_db.py --apply --seed ./other_seed.json

Behavior:
  - Loads `db_seed.json` from repo root ({collection: {doc_id: data}}).
  - Gets DB via `app.config.firebase.get_db()` which will return the mock DB or real Firestore depending on settings.
  - Writes each top-level collection/document to the DB.

NOTE: When applying to real Firestore, ensure `FIREBASE_CREDENTIALS_PATH` and `USE_MOCK_DB=false` are set in `.env`.
"""

import argparse
import json
import logging
import os
from typing import Any

from app.config.firebase import get_db
from app.utils.firestore_helpers import revive_datetimes, store_errors

logger = logging.getLogger("seed_db")


def load_seed(path: str = "./db_seed.json") -> dict:
    with open(path, "r", encoding="utf-8") as f:
        return revive_datetimes(json.load(f))


def write_to_db(db: Any, seed: dict, apply: bool = False) -> int:
    """Write every seed document; returns how many were written."""
    written = 0
    for collection, docs in seed.items():
        for doc_id, data in docs.items():
            logger.info(f"Preparing: {collection}/{doc_id}")
            if not apply:
                continue
            with store_errors(f"seed {collection}/{doc_id}"):
                db.collection(collection).document(doc_id).set(data)
            written += 1
    return written


def main():
    logging.basicConfig(level=logging.INFO, format="%(message)s")

    parser = argparse.ArgumentParser()
    parser.add_argument("--apply", action="store_true", help="Write seed to the DB instead of dry-run")
    parser.add_argument("--seed", default=os.path.join(os.getcwd(), "db_seed.json"), help="Seed file path")
    args = parser.parse_args()

    if not os.path.exists(args.seed):
        logger.error(f"Seed file not found: {args.seed}")
        return

    seed = load_seed(args.seed)
    written = write_to_db(get_db(), seed, apply=args.apply)

    if args.apply:
        logger.info(f"Seeding completed: {written} document(s) written.")
    else:
        logger.info("Dry run complete. Re-run with --apply to write to DB.")


if __name__ == "__main__":
    main()
