"""
Metrics instrumentation wrapper around prometheus_client.
"""
from prometheus_client import Counter, Histogram


class MetricsRegistry:
    """
    Central metrics registry for Omni Saúde.

    Provides typed access to all application metrics.
    """

    def __init__(self):
        self._setup_metrics()

    def _create_counter(self, name, description, labels=None):
        return Counter(name, description, labels or [])

    def _create_histogram(self, name, description, labels=None, buckets=None):
        if buckets:
            return Histogram(name, description, labels or [], buckets=buckets)
        return Histogram(name, description, labels or [])

    def _setup_metrics(self):
        """Setup all application metrics."""

        # ===================================================================
        # HTTP Metrics
        # ===================================================================
        self.http_requests_total = self._create_counter(
            'http_requests_total',
            'Total HTTP requests',
            ['method', 'status']
        )

        self.http_request_duration_seconds = self._create_histogram(
            'http_request_duration_seconds',
            'HTTP request duration in seconds',
            ['method'],
            buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0]
        )

        self.exceptions_total = self._create_counter(
            'exceptions_total',
            'Total exceptions',
            ['exception_type', 'location']
        )

        # ===================================================================
        # Event / File Metrics
        # ===================================================================
        self.events_overlap_rejected_total = self._create_counter(
            'events_overlap_rejected_total',
            'Event writes rejected because of a professional time overlap'
        )

        self.events_deleted_total = self._create_counter(
            'events_deleted_total',
            'Health events deleted',
            ['mode']  # orphan, delete_files
        )

        self.files_orphaned_total = self._create_counter(
            'files_orphaned_total',
            'Files marked as orphaned',
            ['source']  # event, professional
        )

        self.storage_delete_failures_total = self._create_counter(
            'storage_delete_failures_total',
            'Stored objects that could not be removed'
        )

        # ===================================================================
        # Upload Metrics
        # ===================================================================
        self.uploads_total = self._create_counter(
            'uploads_total',
            'Upload attempts',
            ['result']  # accepted, missing, too_large, bad_type
        )

        self.uploads_bytes_total = self._create_counter(
            'uploads_bytes_total',
            'Bytes accepted by the upload endpoint'
        )

        self.upload_rate_limited_total = self._create_counter(
            'upload_rate_limited_total',
            'Upload requests rejected by the per-IP limiter'
        )

        # ===================================================================
        # Report Metrics
        # ===================================================================
        self.reports_sent_total = self._create_counter(
            'reports_sent_total',
            'Reports sent by emitters'
        )

        # ===================================================================
        # Audit Metrics
        # ===================================================================
        self.audit_entries_total = self._create_counter(
            'audit_entries_total',
            'Audit log entries written',
            ['action']
        )

        self.audit_write_failures_total = self._create_counter(
            'audit_write_failures_total',
            'Audit log entries that could not be persisted'
        )


# Global metrics instance
metrics = MetricsRegistry()
