from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from src.bookstore.api.http.deps import get_session, require_customer
from src.bookstore.core.services.auth.auth_service import Principal
from src.bookstore.core.services.shop.address_service import AddressService
from src.bookstore.entities.shop.address import Address, AddressCreate, AddressUpdate

router = APIRouter(prefix="/addresses", tags=["addresses"])


@router.get("", response_model=list[Address])
def my_addresses(
    principal: Principal = Depends(require_customer),
    session: Session = Depends(get_session),
) -> list[Address]:
    return AddressService(session).list_addresses(principal.id)


@router.get("/default", response_model=Address)
def default_address(
    principal: Principal = Depends(require_customer),
    session: Session = Depends(get_session),
) -> Address:
    return AddressService(session).get_default(principal.id)


@router.get("/{address_id}", response_model=Address)
def get_address(
    address_id: str,
    principal: Principal = Depends(require_customer),
    session: Session = Depends(get_session),
) -> Address:
    return AddressService(session).get(principal.id, address_id)


@router.post("", response_model=Address, status_code=status.HTTP_201_CREATED)
def create_address(
    data: AddressCreate,
    principal: Principal = Depends(require_customer),
    session: Session = Depends(get_session),
) -> Address:
    address = AddressService(session).create(principal.id, data)
    session.commit()
    return address


@router.put("/{address_id}", response_model=Address)
def update_address(
    address_id: str,
    data: AddressUpdate,
    principal: Principal = Depends(require_customer),
    session: Session = Depends(get_session),
) -> Address:
    address = AddressService(session).update(principal.id, address_id, data)
    session.commit()
    return address


@router.delete("/{address_id}")
def delete_address(
    address_id: str,
    principal: Principal = Depends(require_customer),
    session: Session = Depends(get_session),
) -> dict[str, str]:
    AddressService(session).delete(principal.id, address_id)
    session.commit()
    return {"message": "Address deleted successfully"}


@router.put("/{address_id}/set-default", response_model=Address)
def set_default_address(
    address_id: str,
    principal: Principal = Depends(require_customer),
    session: Session = Depends(get_session),
) -> Address:
    address = AddressService(session).set_default(principal.id, address_id)
    session.commit()
    return address
