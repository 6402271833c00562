from app.services.population import attach, collect_ids, index_by, populate
from app.utils.firestore_helpers import IN_QUERY_LIMIT, fetch_where_in


def test_collect_ids_is_distinct_and_skips_empty():
    docs = [{"c": "a"}, {"c": "b"}, {"c": "a"}, {"c": None}, {}]

    assert collect_ids(docs, "c") == ["a", "b"]


def test_populate_substitutes_known_ids_and_keeps_unknown():
    docs = [{"id": 1, "c": "a", "u": "x"}, {"id": 2, "c": "zz", "u": None}]
    lookups = {"c": {"a": {"name": "A"}}, "u": {"x": {"name": "X"}}}

    result = populate(docs, lookups)

    assert result == [
        {"id": 1, "c": {"name": "A"}, "u": {"name": "X"}},
        {"id": 2, "c": "zz", "u": None},
    ]
    assert docs[0]["c"] == "a"


def test_index_by_and_attach():
    indexed = index_by([{"k": "1", "v": 1}, {"k": None, "v": 2}], "k")
    assert indexed == {"1": {"k": "1", "v": 1}}

    assert attach([{"a": 1}], "owner", {"id": "u"}) == [{"a": 1, "owner": {"id": "u"}}]


def test_fetch_where_in_chunks_large_id_lists(db):
    for i in range(IN_QUERY_LIMIT + 5):
        db.collection("categories").document(f"c{i}").set(
            {"category_id": f"c{i}", "name": f"Cat {i}", "secret": True}
        )

    ids = [f"c{i}" for i in range(IN_QUERY_LIMIT + 5)] + ["c0", "missing"]
    rows = fetch_where_in(db.collection("categories"), "category_id", ids, ["category_id", "name"])

    assert len(rows) == IN_QUERY_LIMIT + 5
    assert all(set(row) == {"category_id", "name"} for row in rows)


def test_fetch_where_in_with_no_ids_does_not_query(db):
    assert fetch_where_in(db.collection("categories"), "category_id", []) == []
