from .links import AdminRequest, LinkCreate, LinkRevoke, LinkRecord, LinkView

__all__ = [
    # Requests
    "AdminRequest",
    "LinkCreate",
    "LinkRevoke",
    # Registry snapshots
    "LinkRecord",
    "LinkView",
]
