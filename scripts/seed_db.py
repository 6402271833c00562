"""
Seed script for Civic Report Hub (Firestore or the mock DB file).

Usage:
  - Dry run (default): python scripts/seed_db.py
  - Apply to configured DB: python scripts/seed_db.py --apply
  - Use another seed file: python scripts/seed_db.py --apply --seed ./my_seed.json

Behavior:
  - Loads `db_seed.json` from repo root: {"collection": {"doc_id": {...}}}.
  - Users without an api_token get a freshly generated one (printed once).
  - With USE_MOCK_DB=true the seed is written to MOCK_DB_PATH, which the mock
    database loads on startup. Otherwise documents are written to Firestore.
"""

import argparse
import json
import os
from typing import Any

from app.config.firebase import get_db
from app.core.settings import settings
from app.utils.security import generate_api_token


def load_seed(path: str = "./db_seed.json") -> dict:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def assign_tokens(seed: dict) -> None:
    for doc_id, user in seed.get("users", {}).items():
        user.setdefault("user_id", doc_id)
        if not user.get("api_token"):
            user["api_token"] = generate_api_token()
            print(f"Token for {user.get('username', doc_id)}: {user['api_token']}")


def write_to_db(db: Any, seed: dict, apply: bool = False):
    for collection, docs in seed.items():
        for doc_id, data in docs.items():
            print(f"Preparing: {collection}/{doc_id}")
            if not apply:
                continue
            try:
                db.collection(collection).document(doc_id).set(data)
                print(f"Wrote: {collection}/{doc_id}")
            except Exception as e:
                print(f"Failed to write {collection}/{doc_id}: {e}")


def write_mock_file(seed: dict, apply: bool = False):
    print(f"Mock DB mode: seed goes to {settings.MOCK_DB_PATH}")
    if apply:
        with open(settings.MOCK_DB_PATH, "w", encoding="utf-8") as f:
            json.dump(seed, f, indent=2)
        print(f"Wrote: {settings.MOCK_DB_PATH}")


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--apply", action="store_true", help="Write seed to the DB instead of dry-run")
    parser.add_argument("--seed", default=os.path.join(os.getcwd(), "db_seed.json"), help="Seed file path")
    args = parser.parse_args()

    if not os.path.exists(args.seed):
        print(f"Seed file not found: {args.seed}")
        return

    seed = load_seed(args.seed)
    assign_tokens(seed)

    if settings.USE_MOCK_DB:
        write_mock_file(seed, apply=args.apply)
    else:
        write_to_db(get_db(), seed, apply=args.apply)

    if args.apply:
        print("Seeding completed.")
    else:
        print("Dry run complete. Re-run with --apply to write to DB.")


if __name__ == "__main__":
    main()
