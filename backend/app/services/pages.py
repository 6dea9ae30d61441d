import logging
import re

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.database import commit_or_raise
from app.errors import PageNotFound, SlugConflict, ValidationError
from app.models import Page
from app.services.auth import generate_identifier

logger = logging.getLogger(__name__)

_WHITESPACE_RE = re.compile(r"\s+")


def slugify(value: str) -> str:
    """Lower-case a value and replace each run of whitespace with a hyphen.

    Examples:
        - "My Page" -> "my-page"
        - "  About   Us " -> "about-us"
    """
    return _WHITESPACE_RE.sub("-", value.strip()).lower()


def resolve_slug(title: str, slug: str | None) -> str:
    """Use the given slug if it isn't blank, otherwise derive one from the title."""
    resolved = slugify(slug or "") or slugify(title)
    if not resolved:
        raise ValidationError("A page needs a title or a slug.")
    return resolved


def _flush_or_conflict(db: Session) -> None:
    # The unique index on slug catches a conflicting write that slipped
    # past the lookup
    try:
        db.flush()
    except IntegrityError:
        db.rollback()
        raise SlugConflict()


def list_pages(db: Session) -> list[Page]:
    return db.query(Page).order_by(Page.sort_position, Page.id).all()


def get_page_by_slug(db: Session, slug: str) -> Page:
    page = db.query(Page).filter(Page.slug == slug).first()
    if not page:
        raise PageNotFound()
    return page


def get_page_by_id(db: Session, page_id: str) -> Page:
    page = db.query(Page).filter(Page.page_id == page_id).first()
    if not page:
        raise PageNotFound()
    return page


def create_page(db: Session, title: str, slug: str | None, content: str, sort_position: int) -> Page:
    slug = resolve_slug(title, slug)

    if db.query(Page).filter(Page.slug == slug).first():
        raise SlugConflict()

    page = Page(
        page_id=generate_identifier(),
        title=title,
        slug=slug,
        content=content,
        sort_position=sort_position,
    )
    db.add(page)
    _flush_or_conflict(db)
    commit_or_raise(db, "create the page")

    logger.info("Created page %s with slug '%s'", page.page_id, page.slug)
    return page


def update_page(db: Session, page_id: str, title: str, slug: str | None, content: str) -> Page:
    page = get_page_by_id(db, page_id)
    slug = resolve_slug(title, slug)

    conflict = db.query(Page).filter(Page.slug == slug, Page.page_id != page_id).first()
    if conflict:
        raise SlugConflict()

    page.title = title
    page.slug = slug
    page.content = content
    _flush_or_conflict(db)
    commit_or_raise(db, "update the page")

    logger.info("Updated page %s", page.page_id)
    return page


def delete_page(db: Session, page_id: str) -> int:
    """Delete a page. Deleting a page that doesn't exist is not an error."""
    deleted = db.query(Page).filter(Page.page_id == page_id).delete(synchronize_session=False)
    commit_or_raise(db, "delete the page")

    logger.info("Deleted page %s (%s row(s))", page_id, deleted)
    return deleted


def reorder_pages(db: Session, ordered_page_ids: list[str]) -> list[Page]:
    """Set each page's sort position to its index in ``ordered_page_ids``.

    All positions are written in a single transaction. If any id is unknown
    nothing is written.
    """
    pages = db.query(Page).filter(Page.page_id.in_(ordered_page_ids)).all() if ordered_page_ids else []
    pages_by_id = {page.page_id: page for page in pages}

    missing = [page_id for page_id in ordered_page_ids if page_id not in pages_by_id]
    if missing:
        logger.warning("Reorder rejected, unknown page ids: %s", missing)
        raise PageNotFound("Your page reorganization was not saved! One or more pages no longer exist.")

    for position, page_id in enumerate(ordered_page_ids):
        pages_by_id[page_id].sort_position = position
    commit_or_raise(db, "save your page reorganization")

    return [pages_by_id[page_id] for page_id in ordered_page_ids]
