"""
Analytics Service - Aggregate statistics over all reports.

Every call recomputes from scratch; there is no incremental update. The
result is stored as a single document (analytics/summary) so that the admin
dashboard can read it without re-scanning reports.
"""

from firebase_admin import firestore
from app.config.firebase import get_db
from app.models.report import ReportStatus
from app.utils.firestore_helpers import snapshot_to_dict
from typing import Dict, List, Optional
from datetime import datetime
from collections import defaultdict
import logging

logger = logging.getLogger(__name__)

ANALYTICS_COLLECTION = "analytics"
SUMMARY_DOCUMENT = "summary"


class AnalyticsService:
    """Service for generating report analytics."""

    def __init__(self, db=None):
        self.db = db or get_db()

    def generate(self) -> Dict:
        """
        Recompute analytics from all reports and store the summary.

        Returns:
            The stored summary dict
        """
        reports = [doc.to_dict() for doc in self.db.collection("reports").stream()]
        category_names = self._get_category_names()

        summary = {
            "total_reports": len(reports),
            "status_distribution": self._get_status_distribution(reports),
            "category_distribution": self._get_category_distribution(reports, category_names),
            "reports_over_time": self._get_time_series_data(reports),
            "resolution_rate": self._calculate_resolution_rate(reports),
            "generated_at": firestore.SERVER_TIMESTAMP,
        }

        doc_ref = self.db.collection(ANALYTICS_COLLECTION).document(SUMMARY_DOCUMENT)
        doc_ref.set(summary)
        logger.info(f"Analytics regenerated over {len(reports)} reports")

        return snapshot_to_dict(doc_ref.get())

    def get_summary(self) -> Optional[Dict]:
        """Read the last stored summary, or None if never generated."""
        doc = self.db.collection(ANALYTICS_COLLECTION).document(SUMMARY_DOCUMENT).get()
        return snapshot_to_dict(doc)

    def _get_category_names(self) -> Dict[str, str]:
        names = {}
        for doc in self.db.collection("categories").stream():
            data = doc.to_dict()
            names[data.get("category_id")] = data.get("name")
        return names

    def _get_status_distribution(self, reports: List[Dict]) -> Dict[str, int]:
        """Get distribution by status, including statuses with zero reports."""
        distribution = {status.value: 0 for status in ReportStatus}
        for report in reports:
            status = report.get("status", ReportStatus.PENDING.value)
            distribution[status] = distribution.get(status, 0) + 1
        return distribution

    def _get_category_distribution(self, reports: List[Dict], names: Dict[str, str]) -> Dict[str, int]:
        """Get distribution by category name (raw id when the category is unknown)."""
        distribution = defaultdict(int)
        for report in reports:
            category_id = report.get("category_id")
            distribution[names.get(category_id) or category_id or "uncategorized"] += 1
        return dict(distribution)

    def _get_time_series_data(self, reports: List[Dict]) -> List[Dict]:
        """Reports created per day, oldest first."""
        daily_counts = defaultdict(int)

        for report in reports:
            created_at = report.get("created_at")
            if isinstance(created_at, str):
                try:
                    created_at = datetime.fromisoformat(created_at.replace("Z", "+00:00"))
                except ValueError:
                    logger.warning(f"Unparseable created_at on report {report.get('report_id')}: {created_at}")
                    continue
            if isinstance(created_at, datetime):
                daily_counts[created_at.strftime("%Y-%m-%d")] += 1

        return [{"date": date, "count": count} for date, count in sorted(daily_counts.items())]

    def _calculate_resolution_rate(self, reports: List[Dict]) -> float:
        """Share of reports in the resolved state."""
        if not reports:
            return 0.0
        resolved = sum(1 for r in reports if r.get("status") == ReportStatus.RESOLVED.value)
        return round(resolved / len(reports), 4)


# Global service instance
_analytics_service = None


def get_analytics_service() -> AnalyticsService:
    """Get or create AnalyticsService singleton."""
    global _analytics_service
    if _analytics_service is None:
        _analytics_service = AnalyticsService()
    return _analytics_service


def generate_analytics() -> Dict:
    """Recompute and store the analytics summary."""
    return get_analytics_service().generate()
