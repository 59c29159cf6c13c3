"""
Permanent redirects from the old /templates URLs to /blueprints.
"""
from urllib.parse import quote

from fastapi import APIRouter, Depends, Request
from fastapi.responses import RedirectResponse

from ..core.auth import public_access

PERMANENT_REDIRECT = 308

router = APIRouter(tags=["redirects"], dependencies=[Depends(public_access)])


def _with_query(path: str, request: Request) -> str:
    query = request.url.query
    return f"{path}?{query}" if query else path


@router.get("/templates", include_in_schema=False)
async def templates_index():
    return RedirectResponse("/blueprints", status_code=PERMANENT_REDIRECT)


@router.get("/templates/{template_id}", include_in_schema=False)
async def template_page(template_id: str):
    # The id is decoded by the router; escape it again so "?" or spaces stay part of it
    return RedirectResponse(
        f"/blueprints/{quote(template_id, safe='')}",
        status_code=PERMANENT_REDIRECT,
    )


@router.api_route("/api/templates", methods=["GET", "POST"], include_in_schema=False)
async def templates_api_index(request: Request):
    return RedirectResponse(_with_query("/api/blueprints", request), status_code=PERMANENT_REDIRECT)


@router.api_route("/api/templates/{rest:path}", methods=["GET", "POST"], include_in_schema=False)
async def templates_api(rest: str, request: Request):
    return RedirectResponse(
        _with_query(f"/api/blueprints/{quote(rest)}", request),
        status_code=PERMANENT_REDIRECT,
    )
