from app.features.pagespeed.schemas.pagespeed import Audit, Category
from app.features.pagespeed.services.partitioner import partition_audits


def _category(*ids):
    return Category.model_validate(
        {"id": "performance", "title": "Performance", "score": 0.5,
         "auditRefs": [{"id": audit_id, "weight": 1} for audit_id in ids]}
    )


def _audit(audit_id, score, items=None):
    data = {"id": audit_id, "title": audit_id, "score": score}
    if items is not None:
        data["details"] = {"type": "opportunity", "items": items}
    return Audit.model_validate(data)


def _ids(audits):
    return [audit.id for audit in audits]


def test_time_savings_make_an_opportunity_otherwise_diagnostic():
    audits = {
        "render-blocking": _audit("render-blocking", 0.5, [{"url": "a.css", "wastedMs": 120}]),
        "dom-size": _audit("dom-size", 0.5, [{"url": "b.js", "wastedMs": 0, "wastedBytes": 900}]),
    }

    buckets = partition_audits(_category("render-blocking", "dom-size"), audits)

    assert _ids(buckets.opportunities) == ["render-blocking"]
    assert _ids(buckets.diagnostics) == ["dom-size"]
    assert buckets.passed == []


def test_null_score_is_failing():
    audits = {
        "a": _audit("a", None, [{"wastedMs": 10}]),
        "b": _audit("b", None),
    }

    buckets = partition_audits(_category("a", "b"), audits)

    assert _ids(buckets.opportunities) == ["a"]
    assert _ids(buckets.diagnostics) == ["b"]


def test_passed_at_threshold_even_with_wasted_time():
    audits = {
        "ok": _audit("ok", 0.9, [{"wastedMs": 500}]),
        "great": _audit("great", 1),
        "almost": _audit("almost", 0.89),
    }

    buckets = partition_audits(_category("ok", "great", "almost"), audits)

    assert _ids(buckets.passed) == ["ok", "great"]
    assert _ids(buckets.diagnostics) == ["almost"]


def test_order_follows_audit_refs_and_missing_ids_are_skipped():
    audits = {name: _audit(name, 0.2, [{"wastedMs": 5}]) for name in ("c", "a", "b")}

    buckets = partition_audits(_category("b", "ghost", "c", "a", "b"), audits)

    assert _ids(buckets.opportunities) == ["b", "c", "a"]
    assert buckets.diagnostics == []
    assert buckets.passed == []


def test_every_present_audit_lands_in_exactly_one_bucket():
    audits = {
        "o": _audit("o", 0.1, [{"wastedMs": 1}]),
        "d": _audit("d", 0.1, []),
        "p": _audit("p", 0.95),
    }
    buckets = partition_audits(_category("o", "d", "p", "x"), audits)

    all_ids = _ids(buckets.opportunities) + _ids(buckets.diagnostics) + _ids(buckets.passed)
    assert sorted(all_ids) == ["d", "o", "p"]


def test_is_deterministic_and_does_not_mutate_inputs():
    audits = {"a": _audit("a", 0.3, [{"wastedMs": 3}]), "b": _audit("b", 1)}
    category = _category("a", "b")

    first = partition_audits(category, audits)
    second = partition_audits(category, audits)

    assert first == second
    assert _ids(category.audit_refs) == ["a", "b"]


def test_bucket_json_keeps_upstream_fields():
    audits = {"a": Audit.model_validate(
        {"id": "a", "title": "A", "score": 0.3, "displayValue": "1.2 s", "numericValue": 1200}
    )}

    body = partition_audits(_category("a"), audits).to_json()

    assert body["diagnostics"] == [
        {"id": "a", "title": "A", "score": 0.3, "displayValue": "1.2 s", "numericValue": 1200}
    ]
    assert body["opportunities"] == []
    assert body["passed"] == []
