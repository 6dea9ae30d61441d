from pydantic import BaseModel, Field, field_validator

from app.schemas.common import FlashResponse


class PageBase(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    slug: str | None = Field(default=None, max_length=255)
    content: str = ""

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Title must not be blank")
        return v.strip()


class PageCreate(PageBase):
    sort_position: int = 0


class PageUpdate(PageBase):
    pass


class PageDelete(BaseModel):
    page_id: str
    title: str | None = None


class PageOrderItem(BaseModel):
    page_id: str


class PageReorderRequest(BaseModel):
    pages_list: list[PageOrderItem]


class PageResponse(BaseModel):
    page_id: str
    title: str
    slug: str
    content: str
    sort_position: int

    class Config:
        from_attributes = True


class PageDataResponse(FlashResponse):
    page_data: PageResponse | None = None


class PagesListResponse(FlashResponse):
    pages: list[PageResponse] = []
