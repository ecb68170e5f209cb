from typing import Mapping

from app.features.pagespeed.schemas.pagespeed import Audit, AuditBuckets, Category

PASSING_SCORE = 0.9


def is_failing(audit: Audit) -> bool:
    return audit.score is None or audit.score < PASSING_SCORE


def has_time_savings(audit: Audit) -> bool:
    if audit.details is None or not audit.details.items:
        return False
    return any((item.wasted_ms or 0) > 0 for item in audit.details.items)


def partition_audits(category: Category, audits: Mapping[str, Audit]) -> AuditBuckets:
    """
    Split a category's audits into opportunities, diagnostics and passed.

    Failing audits (null score or below 0.9) with any item wasting time are
    opportunities, other failing audits are diagnostics, the rest passed.
    auditRefs order is kept; refs missing from `audits` are skipped and a
    repeated ref is only counted the first time.
    """
    buckets = AuditBuckets()
    seen = set()

    for ref in category.audit_refs:
        if ref.id in seen:
            continue
        audit = audits.get(ref.id)
        if audit is None:
            continue
        seen.add(ref.id)

        if not is_failing(audit):
            buckets.passed.append(audit)
        elif has_time_savings(audit):
            buckets.opportunities.append(audit)
        else:
            buckets.diagnostics.append(audit)

    return buckets
