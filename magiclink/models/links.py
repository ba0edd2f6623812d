from pydantic import BaseModel, ConfigDict, Field

from ..utils import round_minutes


class AdminRequest(BaseModel):
    """Base request model for secret-gated admin calls."""
    secret: str = ""


class LinkCreate(AdminRequest):
    """Request model for creating a link."""
    model_config = ConfigDict(populate_by_name=True)

    label: str | None = Field(None, max_length=200, description="Recipient or purpose of the link")
    ttl_minutes: float | None = Field(None, alias="ttlMinutes", description="Lifetime in minutes. Missing or non-positive uses the default")


class LinkRevoke(AdminRequest):
    """Request model for revoking a link."""
    token: str = ""


class LinkRecord(BaseModel):
    """A link as stored by the registry."""
    token: str
    label: str
    created_at: int
    expires_at: int
    access_count: int = 0

    @property
    def ttl_ms(self) -> int:
        return self.expires_at - self.created_at


class LinkView(BaseModel):
    """Read-only snapshot of a link at a given instant."""
    model_config = ConfigDict(frozen=True)

    token: str
    label: str
    created_at: int
    expires_at: int
    access_count: int
    remaining_ms: int

    @property
    def remaining_minutes(self) -> int:
        return round_minutes(self.remaining_ms)
