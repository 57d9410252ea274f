from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from src.bookstore.api.http.deps import (
    PageParams,
    get_optional_principal,
    get_session,
    paging,
    require_admin,
)
from src.bookstore.core.services.auth.auth_service import Principal
from src.bookstore.core.services.catalog.taxonomy_service import CategoryService
from src.bookstore.entities.catalog.book import Book
from src.bookstore.entities.catalog.category import (
    Category,
    CategoryCreate,
    CategoryUpdate,
    CategoryWithCount,
)
from src.bookstore.entities.core._base import Page

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("", response_model=list[CategoryWithCount])
def list_categories(
    include_inactive: bool = False,
    principal: Principal | None = Depends(get_optional_principal),
    session: Session = Depends(get_session),
) -> list[CategoryWithCount]:
    show_all = include_inactive and principal is not None and principal.is_admin
    return CategoryService(session).list_items(show_all)


@router.get("/stats", response_model=list[CategoryWithCount], dependencies=[Depends(require_admin)])
def category_stats(session: Session = Depends(get_session)) -> list[CategoryWithCount]:
    return CategoryService(session).stats()


@router.get("/slug/{slug}", response_model=CategoryWithCount)
def get_category_by_slug(slug: str, session: Session = Depends(get_session)) -> CategoryWithCount:
    return CategoryService(session).get_by_slug(slug)


@router.get("/{category_id}", response_model=CategoryWithCount)
def get_category(category_id: str, session: Session = Depends(get_session)) -> CategoryWithCount:
    return CategoryService(session).get(category_id)


@router.get("/{category_id}/books", response_model=Page[Book])
def category_books(
    category_id: str,
    params: PageParams = Depends(paging(12, "-created_at")),
    session: Session = Depends(get_session),
) -> Page[Book]:
    return CategoryService(session).books(category_id, params.page, params.limit, params.sort_by)


@router.post(
    "",
    response_model=Category,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def create_category(data: CategoryCreate, session: Session = Depends(get_session)) -> Category:
    category = CategoryService(session).create(data)
    session.commit()
    return category


@router.put("/{category_id}", response_model=Category, dependencies=[Depends(require_admin)])
def update_category(
    category_id: str, data: CategoryUpdate, session: Session = Depends(get_session)
) -> Category:
    category = CategoryService(session).update(category_id, data)
    session.commit()
    return category


@router.patch(
    "/{category_id}/toggle-status", response_model=Category, dependencies=[Depends(require_admin)]
)
def toggle_category_status(category_id: str, session: Session = Depends(get_session)) -> Category:
    category = CategoryService(session).toggle_status(category_id)
    session.commit()
    return category


@router.delete("/{category_id}", dependencies=[Depends(require_admin)])
def delete_category(category_id: str, session: Session = Depends(get_session)) -> dict[str, str]:
    CategoryService(session).delete(category_id)
    session.commit()
    return {"message": "Category deleted successfully"}
