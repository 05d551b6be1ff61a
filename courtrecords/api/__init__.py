"""HTTP access to the court records backend."""
from courtrecords.api.client import CourtRecordsClient

__all__ = ["CourtRecordsClient"]
