from fastapi import Depends, Request

from blogcms.database import Store, get_store
from blogcms.repositories.blog_repository import BlogRepository
from blogcms.repositories.category_repository import CategoryRepository
from blogcms.repositories.token_repository import TokenAuthority
from blogcms.repositories.user_repository import UserRepository


def get_users(store: Store = Depends(get_store)) -> UserRepository:
    return UserRepository(store)


def get_tokens(request: Request, users: UserRepository = Depends(get_users)) -> TokenAuthority:
    return TokenAuthority(users.store, users, hash_key=request.app.state.settings.token_hash_key)


def get_blogs(store: Store = Depends(get_store)) -> BlogRepository:
    return BlogRepository(store)


def get_categories(store: Store = Depends(get_store)) -> CategoryRepository:
    return CategoryRepository(store)
