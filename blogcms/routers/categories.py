from fastapi import APIRouter, Depends

from blogcms.repositories.category_repository import CategoryRepository
from blogcms.schemas.category import CategoryOut
from blogcms.schemas.common import JsonResponse
from blogcms.utils.deps import get_categories

router = APIRouter(prefix="/categories", tags=["Categories"])


@router.get("", response_model=JsonResponse)
def all_categories(categories: CategoryRepository = Depends(get_categories)):
    return JsonResponse(
        message="success",
        data={"categories": [CategoryOut.model_validate(c) for c in categories.get_all()]},
    )
