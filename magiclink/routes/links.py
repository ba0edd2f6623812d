import math

from fastapi import APIRouter, HTTPException, Request

from .. import utils
from ..models import AdminRequest, LinkCreate, LinkRevoke
from ..registry import LinkNotFound, LinkRegistry
from .auth import check_secret

router = APIRouter(prefix="/api", tags=["Links"])


def get_registry(request: Request) -> LinkRegistry:
    return request.app.state.registry


@router.post("/generate")
async def generate_link(link_data: LinkCreate, request: Request):
    """Create a new magic link"""
    check_secret(request, link_data.secret)
    registry = get_registry(request)

    ttl_ms = link_data.ttl_minutes * utils.MS_PER_MINUTE if link_data.ttl_minutes else None
    if ttl_ms is not None:
        max_ttl_ms = request.app.state.max_ttl_ms
        if not math.isfinite(ttl_ms):
            raise HTTPException(422, "ttlMinutes must be a finite number")
        if ttl_ms > max_ttl_ms:
            raise HTTPException(422, f"ttlMinutes cannot exceed {utils.format_minutes(max_ttl_ms)}")

    record = registry.create(label=link_data.label, ttl_ms=ttl_ms)

    url = str(request.url_for("view_link", token=record.token))
    expires_at = utils.to_iso(record.expires_at)
    print(f"[Link] Created {url} - expires {expires_at}")

    return {
        "url": url,
        "token": record.token,
        "expiresAt": expires_at,
        "ttlMinutes": utils.format_minutes(record.ttl_ms),
    }


@router.post("/links")
async def list_links(data: AdminRequest, request: Request):
    """List all active links for the admin panel."""
    check_secret(request, data.secret)
    links = get_registry(request).list_active()
    return {
        "activeLinks": [
            {
                "token": link.token,
                "label": link.label,
                "expiresAt": utils.to_iso(link.expires_at),
                "remainingMinutes": link.remaining_minutes,
                "accessCount": link.access_count,
            }
            for link in links
        ]
    }


@router.post("/revoke")
async def revoke_link(data: LinkRevoke, request: Request):
    """Revoke a link before it expires."""
    check_secret(request, data.secret)
    try:
        get_registry(request).revoke(data.token)
    except LinkNotFound:
        raise HTTPException(status_code=404, detail="Link not found")
    return {"revoked": True}
