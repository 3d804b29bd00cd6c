"""Public directory endpoints: categories, creators and brands."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from app.db.repository import AccountRepository, get_repository
from app.models.profile import Category, Profile
from app.services import directory

router = APIRouter()


@router.get("/categories", response_model=list[Category])
async def categories(repo: AccountRepository = Depends(get_repository)) -> list[Category]:
    return directory.list_categories(repo)


@router.get("/content-creators", response_model=list[Profile])
async def content_creators(repo: AccountRepository = Depends(get_repository)) -> list[Profile]:
    return directory.list_content_creators(repo)


@router.get("/content-creators/{slug}", response_model=Profile)
async def content_creator(slug: str, repo: AccountRepository = Depends(get_repository)) -> Profile:
    return directory.get_content_creator(slug, repo)


@router.get("/product-creators", response_model=list[Profile])
async def product_creators(repo: AccountRepository = Depends(get_repository)) -> list[Profile]:
    return directory.list_product_creators(repo)


@router.get("/product-creators/{slug}", response_model=Profile)
async def product_creator(slug: str, repo: AccountRepository = Depends(get_repository)) -> Profile:
    return directory.get_product_creator(slug, repo)
