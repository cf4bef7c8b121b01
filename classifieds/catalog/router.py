"""
Route definitions for the catalog API.

Endpoints under /api/catalog:
- GET    /groups                                  : board names
- GET    /groups/{group}/items                    : every listing on a board
- GET    /groups/{group}/items/{post_id}          : first listing with post_id
- POST   /groups/{group}/items                    : file a listing
- DELETE /groups/{group}/items/{post_id}          : remove (last listing fills the gap)
- DELETE /groups/{group}/items/{post_id}/stable   : remove, keeping order

The caller identity and attached deposit are host facts, read from the
request headers configured in ``Settings`` rather than from the body.
"""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query, Request

from ..config import Settings
from .schemas import ItemInfo
from .store import CallContext, Catalog

MAX_POST_ID = 2**64 - 1

router = APIRouter(prefix="/api/catalog", tags=["catalog"])


def get_catalog(request: Request) -> Catalog:
    return request.app.state.catalog


def _settings(request: Request) -> Settings:
    return request.app.state.settings


def optional_call_context(request: Request) -> Optional[CallContext]:
    """Build the call context from headers, or ``None`` without a caller header."""
    settings = _settings(request)
    caller_id = request.headers.get(settings.caller_header)
    if caller_id is None:
        return None
    raw_deposit = request.headers.get(settings.deposit_header, "0")
    try:
        deposit = int(raw_deposit)
    except ValueError:
        raise HTTPException(
            status_code=400, detail=f"Invalid {settings.deposit_header}: {raw_deposit!r}"
        )
    return CallContext(caller_id=caller_id, attached_deposit=deposit)


def call_context(
    request: Request, ctx: Optional[CallContext] = Depends(optional_call_context)
) -> CallContext:
    if ctx is None:
        raise HTTPException(
            status_code=401,
            detail=f"Missing {_settings(request).caller_header} header",
        )
    return ctx


@router.get("/groups", response_model=List[str])
def list_groups(catalog: Catalog = Depends(get_catalog)) -> List[str]:
    return catalog.groups()


@router.get("/groups/{group}/items", response_model=List[ItemInfo])
def get_items(group: str, catalog: Catalog = Depends(get_catalog)) -> List[ItemInfo]:
    return catalog.get_items(group)


@router.get("/groups/{group}/items/{post_id}", response_model=ItemInfo)
def get_item(
    group: str,
    post_id: int = Path(..., ge=0, le=MAX_POST_ID),
    catalog: Catalog = Depends(get_catalog),
) -> ItemInfo:
    item = catalog.get_item(group, post_id)
    if item is None:
        # A missing board and a missing post id look the same to callers.
        raise HTTPException(status_code=404, detail="Listing not found")
    return item


@router.post("/groups/{group}/items", status_code=201)
def set_items(
    group: str,
    listing: ItemInfo,
    catalog: Catalog = Depends(get_catalog),
    ctx: Optional[CallContext] = Depends(optional_call_context),
):
    catalog.set_items(group, listing, ctx)
    return {"status": "ok"}


@router.delete("/groups/{group}/items/{post_id}", response_model=Optional[ItemInfo])
def remove_items(
    group: str,
    post_id: int = Path(..., ge=0, le=MAX_POST_ID),
    account_id: str = Query(..., description="Must equal the caller identity"),
    catalog: Catalog = Depends(get_catalog),
    ctx: CallContext = Depends(call_context),
) -> Optional[ItemInfo]:
    return catalog.remove_items(group, account_id, post_id, ctx)


@router.delete(
    "/groups/{group}/items/{post_id}/stable", response_model=Optional[ItemInfo]
)
def remove_item_stable(
    group: str,
    post_id: int = Path(..., ge=0, le=MAX_POST_ID),
    account_id: str = Query(..., description="Must equal the caller identity"),
    catalog: Catalog = Depends(get_catalog),
    ctx: CallContext = Depends(call_context),
) -> Optional[ItemInfo]:
    return catalog.remove_item_stable(group, account_id, post_id, ctx)
