from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from src.bookstore.api.http.deps import PageParams, get_session, paging, require_admin
from src.bookstore.core.services.catalog.combo_service import ComboService
from src.bookstore.entities.catalog.combo import (
    ComboAvailability,
    ComboCreate,
    ComboDetail,
    ComboUpdate,
)
from src.bookstore.entities.core._base import Page

router = APIRouter(prefix="/combos", tags=["combos"])
admin_router = APIRouter(
    prefix="/admin/combos", tags=["admin: combos"], dependencies=[Depends(require_admin)]
)


@router.get("", response_model=Page[ComboDetail])
def list_combos(
    params: PageParams = Depends(paging(12, "-created_at")),
    session: Session = Depends(get_session),
) -> Page[ComboDetail]:
    return ComboService(session).list_active(params.page, params.limit, params.sort_by)


@router.get("/{combo_id}", response_model=ComboDetail)
def get_combo(combo_id: str, session: Session = Depends(get_session)) -> ComboDetail:
    return ComboService(session).get_active(combo_id)


@router.get("/{combo_id}/availability", response_model=ComboAvailability)
def combo_availability(
    combo_id: str, session: Session = Depends(get_session)
) -> ComboAvailability:
    return ComboService(session).availability(combo_id)


@admin_router.get("", response_model=Page[ComboDetail])
def list_all_combos(
    params: PageParams = Depends(paging(20, "-created_at")),
    session: Session = Depends(get_session),
) -> Page[ComboDetail]:
    return ComboService(session).list_all(params.page, params.limit, params.sort_by)


@admin_router.get("/{combo_id}", response_model=ComboDetail)
def get_any_combo(combo_id: str, session: Session = Depends(get_session)) -> ComboDetail:
    return ComboService(session).get(combo_id)


@admin_router.post("", response_model=ComboDetail, status_code=status.HTTP_201_CREATED)
def create_combo(data: ComboCreate, session: Session = Depends(get_session)) -> ComboDetail:
    combo = ComboService(session).create(data)
    session.commit()
    return combo


@admin_router.put("/{combo_id}", response_model=ComboDetail)
def update_combo(
    combo_id: str, data: ComboUpdate, session: Session = Depends(get_session)
) -> ComboDetail:
    combo = ComboService(session).update(combo_id, data)
    session.commit()
    return combo


@admin_router.delete("/{combo_id}")
def delete_combo(combo_id: str, session: Session = Depends(get_session)) -> dict[str, str]:
    ComboService(session).soft_delete(combo_id)
    session.commit()
    return {"message": "Combo deleted successfully"}
