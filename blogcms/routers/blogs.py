from typing import Optional

from fastapi import APIRouter, Depends, Query

from blogcms.repositories.blog_repository import BlogRepository
from blogcms.schemas.blog import BlogOut
from blogcms.schemas.common import JsonResponse
from blogcms.utils.deps import get_blogs

router = APIRouter(prefix="/blogs", tags=["Blogs"])


@router.get("", response_model=JsonResponse)
def all_blogs(
    blogs: BlogRepository = Depends(get_blogs),
    page: Optional[int] = Query(None, ge=1),
    page_size: int = Query(20, ge=1, le=100),
):
    if page is None:
        found = blogs.get_all()
    else:
        found = blogs.get_all_paginated(page, page_size)
    return JsonResponse(
        message="success",
        data={"blogs": [BlogOut.model_validate(b) for b in found]},
    )


@router.get("/{slug}", response_model=JsonResponse)
def one_blog(slug: str, blogs: BlogRepository = Depends(get_blogs)):
    return JsonResponse(data=BlogOut.model_validate(blogs.get_one_by_slug(slug)))
