"""Transaction-code taxonomy route: lets the front-end build legends and filters."""

from fastapi import APIRouter, Depends

from prosecution_tracker.routers.auth import require_viewer
from prosecution_tracker.schemas.transactions import TaxonomyResponse
from prosecution_tracker.taxonomy.registry import TAXONOMY

router = APIRouter(tags=["taxonomy"])


@router.get("/taxonomy", response_model=TaxonomyResponse)
def get_taxonomy(_viewer=Depends(require_viewer)) -> TaxonomyResponse:
    return TaxonomyResponse.model_validate({"categories": TAXONOMY.codes_by_category()})
