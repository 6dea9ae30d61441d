from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import require_admin
from app.schemas import (
    FlashResponse,
    PageCreate,
    PageDataResponse,
    PageDelete,
    PageReorderRequest,
    PageResponse,
    PagesListResponse,
    PageUpdate,
)
from app.services import pages

# Every route here requires the "admin" scope
router = APIRouter(dependencies=[Depends(require_admin)])


@router.post("/create-page", response_model=PageDataResponse, status_code=status.HTTP_201_CREATED)
def create_page(data: PageCreate, db: Session = Depends(get_db)):
    """Create a new page. A blank slug is derived from the title."""
    page = pages.create_page(db, data.title, data.slug, data.content, data.sort_position)
    return PageDataResponse(
        flash=f'The "{page.title}" page was successfully created!',
        page_data=PageResponse.model_validate(page),
    )


@router.get("/edit-page/{page_id}", response_model=PageDataResponse)
def get_page_for_edit(page_id: str, db: Session = Depends(get_db)):
    """Get the page data for the edit view."""
    page = pages.get_page_by_id(db, page_id)
    return PageDataResponse(page_data=PageResponse.model_validate(page))


@router.put("/edit-page/{page_id}", response_model=PageDataResponse)
def edit_page(page_id: str, data: PageUpdate, db: Session = Depends(get_db)):
    """Update an existing page's title, slug and content."""
    page = pages.update_page(db, page_id, data.title, data.slug, data.content)
    return PageDataResponse(
        flash="Page successfully updated!",
        page_data=PageResponse.model_validate(page),
    )


@router.delete("/delete-page", response_model=FlashResponse)
def delete_page(data: PageDelete, db: Session = Depends(get_db)):
    """Delete a page by id."""
    pages.delete_page(db, data.page_id)
    name = f'The "{data.title}" page' if data.title else "The page"
    return FlashResponse(flash=f"{name} was successfully deleted!")


@router.put("/reorder-pages", response_model=PagesListResponse)
def reorder_pages(data: PageReorderRequest, db: Session = Depends(get_db)):
    """Save a new page order; each page's sort position becomes its index in the list."""
    reordered = pages.reorder_pages(db, [item.page_id for item in data.pages_list])
    return PagesListResponse(
        flash="Your page reorganization has been saved!",
        pages=[PageResponse.model_validate(p) for p in reordered],
    )
