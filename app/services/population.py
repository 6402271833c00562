"""
Manual population (join) layer.

Firestore has no joins, so reference fields are resolved in two phases:
collect the distinct foreign keys, batch-fetch the referenced documents,
then substitute each key with the document it points to. Keys that do not
resolve are left as the raw id.
"""

from typing import Dict, Iterable, List, Optional


def collect_ids(documents: Iterable[Dict], field: str) -> List[str]:
    """Distinct, non-empty values of field, in first-seen order."""
    return list(dict.fromkeys(doc.get(field) for doc in documents if doc.get(field)))


def index_by(documents: Iterable[Dict], key: str) -> Dict[str, Dict]:
    """Map documents by their key field."""
    return {doc[key]: doc for doc in documents if doc.get(key)}


def populate(
    documents: Iterable[Dict],
    lookups: Dict[str, Dict[str, Dict]],
) -> List[Dict]:
    """
    Replace reference fields with the documents they point to.

    Args:
        documents: Source documents (not mutated)
        lookups: {field_name: {id: referenced_document}}

    Returns:
        New list of documents with each field substituted when resolvable
    """
    populated = []
    for doc in documents:
        merged = dict(doc)
        for field, mapping in lookups.items():
            ref_id = doc.get(field)
            merged[field] = mapping.get(ref_id, ref_id) if ref_id else ref_id
        populated.append(merged)
    return populated


def attach(documents: Iterable[Dict], field: str, value: Optional[Dict]) -> List[Dict]:
    """Set the same resolved object on every document."""
    return [{**doc, field: value} for doc in documents]
