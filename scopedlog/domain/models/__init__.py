"""Domain models for request-scoped logging."""

from scopedlog.domain.models.log_record import CanonicalLogRecord
from scopedlog.domain.models.store import Store

__all__: list[str] = ["CanonicalLogRecord", "Store"]
