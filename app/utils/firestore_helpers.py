"""
Firestore query helpers shared by the services.

NOTE: For firebase_admin SDK, we use positional arguments for where() which
still work. The deprecation warning is just a warning.
"""

from typing import Dict, Iterable, List, Optional

# Firestore caps the number of values in an "in" filter
IN_QUERY_LIMIT = 30


def where_filter(query, field_path: str, op_string: str, value):
    """
    Helper function for Firestore queries.

    Usage:
        query = where_filter(collection, "user_id", "==", user_id)
        query = where_filter(query, "status", "==", "pending")
    """
    return query.where(field_path, op_string, value)


def snapshot_to_dict(doc) -> Optional[Dict]:
    """Convert a document snapshot to a plain dict, or None if it does not exist."""
    if doc is None or not doc.exists:
        return None
    return doc.to_dict() or {}


def fetch_where_in(
    collection,
    field_path: str,
    values: Iterable[str],
    fields: Optional[List[str]] = None,
) -> List[Dict]:
    """
    Batch-fetch documents whose field_path is one of values.

    Values are de-duplicated and split into chunks of IN_QUERY_LIMIT; an
    optional projection limits the returned fields.
    """
    unique_values = list(dict.fromkeys(v for v in values if v))
    results: List[Dict] = []

    for start in range(0, len(unique_values), IN_QUERY_LIMIT):
        chunk = unique_values[start:start + IN_QUERY_LIMIT]
        query = where_filter(collection, field_path, "in", chunk)
        if fields:
            query = query.select(fields)
        results.extend(doc.to_dict() for doc in query.stream())

    return results


def get_document(db, collection: str, doc_id: Optional[str]) -> Optional[Dict]:
    """Fetch a document by id as a dict; None for a missing id or document."""
    if not doc_id:
        return None
    return snapshot_to_dict(db.collection(collection).document(doc_id).get())
