from fastapi import APIRouter, Depends, Request
from typing import Annotated

from catalogue.core.logging import get_logger
from catalogue.db.store import get_book_repository
from catalogue.repos.book_repo import BookRepository
from catalogue.schemas.stats import CatalogueStats
from catalogue.services.book_service import BookService

router = APIRouter(tags=["catalogue"])

Repo = Annotated[BookRepository, Depends(get_book_repository)]


@router.get("/stats", response_model=CatalogueStats)
def get_stats(request: Request, repo: Repo):
    logger = get_logger(__name__, request)
    logger.info("Computing catalogue stats")
    return BookService.stats(repo)


@router.get("/genres", response_model=list[str])
def list_genres(repo: Repo):
    return BookService.genres(repo)


@router.get("/authors", response_model=list[str])
def list_authors(repo: Repo):
    return BookService.authors(repo)
