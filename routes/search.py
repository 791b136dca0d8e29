# routes/search.py
from fastapi import APIRouter, Depends
from typing import Optional

from database import Store, get_store
from services.catalog import search_catalog
from services.pagination import page_size

router = APIRouter(prefix="/v1", tags=["search"])


@router.get("/search")
async def search(
    q: Optional[str] = None,
    type: Optional[str] = None,
    limit: Optional[str] = None,
    cursor: Optional[str] = None,
    store: Store = Depends(get_store),
):
    data, pagination = await search_catalog(store, q, type, page_size(limit), cursor)
    return {"data": data, "pagination": pagination}
