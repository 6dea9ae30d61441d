from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.schemas import PageDataResponse, PageResponse, PagesListResponse
from app.services import pages

router = APIRouter()


@router.get("/get-page/{slug}", response_model=PageDataResponse)
def get_page(slug: str, db: Session = Depends(get_db)):
    """Get a single published page by slug."""
    page = pages.get_page_by_slug(db, slug)
    return PageDataResponse(page_data=PageResponse.model_validate(page))


@router.get("/get-all-pages", response_model=PagesListResponse)
def get_all_pages(db: Session = Depends(get_db)):
    """Get all pages ordered by sort position."""
    return PagesListResponse(pages=[PageResponse.model_validate(p) for p in pages.list_pages(db)])
