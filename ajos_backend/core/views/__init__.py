"""
Feature views
Sorted and grouped projections over storage collections, plus the view-level
operations that write back through the storage facade
"""


class RecordNotFoundError(LookupError):
    """A view operation referenced an id missing from the cached collection"""

    def __init__(self, kind: str, record_id: str):
        super().__init__(f"{kind} not found: {record_id}")
        self.kind = kind
        self.record_id = record_id
