from datetime import datetime

from fastapi import APIRouter, Depends
from sqlalchemy import update
from sqlmodel import Session, select

from pizzeria.constants.catalog import DISTRICTS_BY_PROVINCE
from pizzeria.database import get_session
from pizzeria.exceptions import NotFoundError
from pizzeria.models.address import Address
from pizzeria.models.user import User
from pizzeria.schemas.address_schemas import AddressCreate, AddressUpdate
from pizzeria.utils.responses import success
from pizzeria.utils.token import get_current_user

router = APIRouter()


def serialize_address(address: Address) -> dict:
    data = address.model_dump()
    data["full_name"] = address.full_name
    data["formatted_address"] = address.formatted_address
    return data


def _owned_address(session: Session, user_id: int, address_id: int) -> Address:
    address = session.get(Address, address_id)
    if not address or address.user_id != user_id:
        raise NotFoundError("Address not found", details={'address_id': address_id})
    return address


def _clear_default(session: Session, user_id: int):
    session.execute(
        update(Address)
        .where(Address.user_id == user_id, Address.is_default == True)  # noqa: E712
        .values(is_default=False)
    )


# ---------- PUBLIC ----------

@router.get("/districts/{province}")
def districts_for_province(province: str):
    districts = DISTRICTS_BY_PROVINCE.get(province)
    if districts is None:
        raise NotFoundError("Province not found", details={'province': province})
    return success({"province": province, "districts": districts})


# ---------- ADDRESS BOOK ----------

@router.get("")
def list_addresses(
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    addresses = session.exec(
        select(Address)
        .where(Address.user_id == current_user.id)
        .order_by(Address.is_default.desc(), Address.created_at.desc(), Address.id.desc())
    ).all()
    return success([serialize_address(a) for a in addresses], count=len(addresses))


@router.get("/{address_id}")
def get_address(
    address_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    return success(serialize_address(_owned_address(session, current_user.id, address_id)))


@router.post("", status_code=201)
def create_address(
    data: AddressCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    has_addresses = session.exec(
        select(Address.id).where(Address.user_id == current_user.id)
    ).first() is not None

    # first address is always the default
    is_default = data.is_default or not has_addresses
    if is_default:
        _clear_default(session, current_user.id)

    address = Address(
        user_id=current_user.id,
        **data.model_dump(exclude={"is_default", "address_type"}),
        address_type=data.address_type.value,
        is_default=is_default,
    )
    session.add(address)
    session.commit()
    session.refresh(address)

    return success(serialize_address(address), "Address created successfully")


@router.put("/{address_id}")
def update_address(
    address_id: int,
    data: AddressUpdate,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    address = _owned_address(session, current_user.id, address_id)

    for key, value in data.model_dump(exclude_unset=True).items():
        if value is None:
            continue
        setattr(address, key, getattr(value, "value", value))
    address.updated_at = datetime.utcnow()

    session.add(address)
    session.commit()
    session.refresh(address)

    return success(serialize_address(address), "Address updated successfully")


@router.delete("/{address_id}")
def delete_address(
    address_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    address = _owned_address(session, current_user.id, address_id)
    was_default = address.is_default

    session.delete(address)
    session.flush()

    if was_default:
        replacement = session.exec(
            select(Address)
            .where(Address.user_id == current_user.id)
            .order_by(Address.created_at.desc(), Address.id.desc())
        ).first()
        if replacement:
            replacement.is_default = True
            session.add(replacement)

    session.commit()
    return success(message="Address deleted successfully")


@router.put("/{address_id}/default")
def set_default_address(
    address_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    address = _owned_address(session, current_user.id, address_id)

    _clear_default(session, current_user.id)
    address.is_default = True
    address.updated_at = datetime.utcnow()

    session.add(address)
    session.commit()
    session.refresh(address)

    return success(serialize_address(address), "Default address updated successfully")
