from fastapi import APIRouter, Depends

from ..dependencies import get_store

from portfolio.core.store import RecordStore
from portfolio.features.public_view import load_portfolio

router = APIRouter()


@router.get("/portfolio/{identity_key}")
async def get_portfolio(identity_key: str, store: RecordStore = Depends(get_store)):
    """Public portfolio of one owner, or a not-found state"""
    return load_portfolio(store, identity_key).model_dump(mode='json')
