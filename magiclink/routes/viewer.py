from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from .. import pages
from ..registry import LinkExpired, LinkNotFound
from .links import get_registry


class ViewerRouter:
    def __init__(self, preview_html: str, brand: str):
        self.PREVIEW_HTML = preview_html
        self.BRAND = brand

        self.router = APIRouter(tags=["Viewer"])
        self.router.add_api_route("/", self.root, methods=["GET"], include_in_schema=False)
        self.router.add_api_route("/admin", self.admin, methods=["GET"], response_class=HTMLResponse)
        self.router.add_api_route(
            "/view/{token}", self.view, methods=["GET"], response_class=HTMLResponse, name="view_link"
        )

    async def root(self):
        return RedirectResponse("/admin")

    async def admin(self):
        return HTMLResponse(pages.admin_page(self.BRAND))

    async def view(self, token: str, request: Request):
        """Serve the protected page for a live token, or an error page."""
        try:
            link = get_registry(request).lookup(token)
        except LinkNotFound:
            return HTMLResponse(pages.expired_page("This link does not exist.", self.BRAND), status_code=404)
        except LinkExpired:
            return HTMLResponse(pages.expired_page("This link has expired.", self.BRAND), status_code=410)

        content = pages.inject_banner(self.PREVIEW_HTML, link.expires_at, link.remaining_ms, self.BRAND)
        return HTMLResponse(content, headers={"Cache-Control": "no-store"})
