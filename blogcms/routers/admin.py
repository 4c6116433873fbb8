import base64
import binascii
import logging
from pathlib import Path

from fastapi import APIRouter, Depends, HTTPException, Request

from blogcms.entities import Blog, Category, User
from blogcms.repositories.blog_repository import BlogRepository
from blogcms.repositories.category_repository import CategoryRepository
from blogcms.repositories.token_repository import TokenAuthority
from blogcms.repositories.user_repository import UserRepository
from blogcms.schemas.blog import BlogOut, BlogSaveIn
from blogcms.schemas.category import CategorySaveIn
from blogcms.schemas.common import IdIn, JsonResponse
from blogcms.schemas.user import UserOut, UserSaveIn
from blogcms.utils.auth import get_current_user
from blogcms.utils.deps import get_blogs, get_categories, get_tokens, get_users

logger = logging.getLogger("blogcms.admin")


# every route below goes through the bearer token gate
router = APIRouter(prefix="/admin", tags=["Admin"], dependencies=[Depends(get_current_user)])


def _to_blog(body: BlogSaveIn, author_id: int) -> Blog:
    return Blog(
        id=body.id or None,
        title=body.title,
        description=body.description,
        content=body.content,
        created_by_id=author_id,
        category_ids=body.category_ids,
    )


def _decode_banner(banner: str) -> bytes:
    try:
        return base64.b64decode(banner, validate=True)
    except (binascii.Error, ValueError):
        raise HTTPException(status_code=400, detail="banner is not valid base64")


def _write_banner(static_dir: str, blog_id: int, decoded: bytes):
    banners = Path(static_dir) / "banners"
    banners.mkdir(parents=True, exist_ok=True)
    (banners / f"{blog_id}.jpg").write_bytes(decoded)


# ===== users =====

@router.get("/users", response_model=JsonResponse)
def all_users(users: UserRepository = Depends(get_users)):
    return JsonResponse(
        message="success",
        data={"users": [UserOut.model_validate(u) for u in users.get_all()]},
    )


@router.post("/users/save", response_model=JsonResponse, status_code=202)
def edit_user(body: UserSaveIn, users: UserRepository = Depends(get_users)):
    if body.id == 0:
        if not body.password:
            raise HTTPException(status_code=400, detail="password is required for a new user")
        new_id = users.insert(
            User(
                email=body.email,
                first_name=body.first_name,
                last_name=body.last_name,
                active=body.active,
            ),
            body.password,
        )
        logger.info("created user %s", new_id)
        return JsonResponse(message="Changes saved", data={"id": new_id})

    u = users.get_by_id(body.id)
    u.email = body.email
    u.first_name = body.first_name
    u.last_name = body.last_name
    u.active = body.active
    # a blank password keeps the current one
    users.update(u, password=body.password or None)

    return JsonResponse(message="Changes saved", data={"id": u.id})


@router.get("/users/get/{user_id}", response_model=JsonResponse)
def get_user(user_id: int, users: UserRepository = Depends(get_users)):
    return JsonResponse(data=UserOut.model_validate(users.get_by_id(user_id)))


@router.post("/users/delete", response_model=JsonResponse)
def delete_user(body: IdIn, users: UserRepository = Depends(get_users)):
    users.delete_by_id(body.id)
    logger.info("deleted user %s", body.id)
    return JsonResponse(message="User deleted")


@router.post("/log-user-out-and-set-inactive/{user_id}", response_model=JsonResponse, status_code=202)
def log_user_out_and_set_inactive(user_id: int, users: UserRepository = Depends(get_users)):
    user = users.get_by_id(user_id)
    user.active = 0
    # also deletes the user's tokens
    users.update(user)
    logger.info("user %s logged out and set to inactive", user_id)
    return JsonResponse(message="user logged out and set to inactive")


@router.post("/tokens/purge-expired", response_model=JsonResponse)
def purge_expired_tokens(tokens: TokenAuthority = Depends(get_tokens)):
    removed = tokens.delete_expired()
    logger.info("purged %d expired tokens", removed)
    return JsonResponse(message="success", data={"deleted": removed})


# ===== blogs =====

@router.post("/blogs/save", response_model=JsonResponse, status_code=202)
def edit_blog(
    body: BlogSaveIn,
    request: Request,
    blogs: BlogRepository = Depends(get_blogs),
    current_user: User = Depends(get_current_user),
):
    blog = _to_blog(body, current_user.id)
    banner = _decode_banner(body.banner) if body.banner else None

    if blog.id is None:
        blog.id = blogs.create(blog)
        logger.info("user %s created blog %s", current_user.id, blog.id)
    else:
        blogs.update(blog)

    # only once the blog row is committed
    if banner is not None:
        _write_banner(request.app.state.settings.STATIC_DIR, blog.id, banner)

    return JsonResponse(message="Changes saved", data={"id": blog.id})


@router.get("/blogs/by-author/{user_id}", response_model=JsonResponse)
def blogs_by_author(user_id: int, blogs: BlogRepository = Depends(get_blogs)):
    return JsonResponse(
        message="success",
        data={"blogs": [BlogOut.model_validate(b) for b in blogs.get_by_author(user_id)]},
    )


@router.get("/blogs/{blog_id}", response_model=JsonResponse)
def blog_by_id(blog_id: int, blogs: BlogRepository = Depends(get_blogs)):
    return JsonResponse(data=BlogOut.model_validate(blogs.get_one_by_id(blog_id)))


@router.post("/blogs/delete", response_model=JsonResponse)
def delete_blog(body: IdIn, blogs: BlogRepository = Depends(get_blogs)):
    blogs.delete_by_id(body.id)
    logger.info("deleted blog %s", body.id)
    return JsonResponse(message="Blog Deleted")


# ===== categories =====

@router.post("/categories/save", response_model=JsonResponse, status_code=202)
def edit_category(body: CategorySaveIn, categories: CategoryRepository = Depends(get_categories)):
    category = Category(id=body.id or None, category_name=body.category_name)
    if category.id is None:
        category.id = categories.insert(category)
    else:
        categories.update(category)
    return JsonResponse(message="Changes saved", data={"id": category.id})


@router.post("/categories/delete", response_model=JsonResponse)
def delete_category(body: IdIn, categories: CategoryRepository = Depends(get_categories)):
    categories.delete_by_id(body.id)
    return JsonResponse(message="Category deleted")
