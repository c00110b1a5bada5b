"""Category catalogue endpoint."""

from fastapi import APIRouter

from labour_ledger.api.dependencies import OwnerId
from labour_ledger.api.schemas import CategoryResponse
from labour_ledger.catalog import list_categories

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("", response_model=list[CategoryResponse])
async def get_categories(owner_id: OwnerId) -> list[CategoryResponse]:
    """List worker categories and their subcategories."""
    return [
        CategoryResponse(id=c.id, name=c.name, subcategories=list(c.subcategories))
        for c in list_categories()
    ]
