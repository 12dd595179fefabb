import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends
from sqlmodel import Session, select

from pizzeria.database import get_session
from pizzeria.dependencies.admin import require_admin
from pizzeria.exceptions import NotFoundError, PermissionDeniedError
from pizzeria.models.contact import Contact
from pizzeria.models.user import User
from pizzeria.schemas.contact_schemas import ContactAdminUpdate, ContactCreate
from pizzeria.utils.pagination import paginate
from pizzeria.utils.responses import success
from pizzeria.utils.token import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_contact(session: Session, contact_id: int) -> Contact:
    contact = session.get(Contact, contact_id)
    if not contact:
        raise NotFoundError("Contact submission not found", details={'contact_id': contact_id})
    return contact


@router.post("", status_code=201)
def submit_contact(
    data: ContactCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    contact = Contact(
        user_id=current_user.id,
        subject=data.subject,
        message=data.message,
        contact_email=str(data.contact_email).lower(),
        contact_phone=data.contact_phone,
    )
    session.add(contact)
    session.commit()
    session.refresh(contact)

    logger.info(f"Contact submission {contact.id} received from user {current_user.id}")
    return success(contact.model_dump(), "Contact form submitted successfully")


@router.get("/my-submissions")
def my_submissions(
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    contacts = session.exec(
        select(Contact)
        .where(Contact.user_id == current_user.id)
        .order_by(Contact.created_at.desc(), Contact.id.desc())
    ).all()
    return success([c.model_dump() for c in contacts], count=len(contacts))


# ---------- ADMIN ----------

@router.get("/admin/all")
def list_all_contacts(
    status: Optional[str] = None,
    priority: Optional[str] = None,
    page: int = 1,
    limit: int = 10,
    session: Session = Depends(get_session),
    _: User = Depends(require_admin)
):
    query = select(Contact)
    if status:
        query = query.where(Contact.status == status)
    if priority:
        query = query.where(Contact.priority == priority)

    result = paginate(
        session=session,
        query=query.order_by(Contact.created_at.desc(), Contact.id.desc()),
        page=page,
        limit=limit,
    )
    return success(
        [c.model_dump() for c in result["results"]],
        pagination=result["pagination"],
    )


@router.put("/admin/{contact_id}")
def update_contact(
    contact_id: int,
    data: ContactAdminUpdate,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin)
):
    contact = _get_contact(session, contact_id)

    if data.status:
        contact.status = data.status.value
    if data.priority:
        contact.priority = data.priority.value
    if data.admin_response and data.admin_response.strip():
        contact.admin_response = data.admin_response.strip()
        contact.responded_by = admin.id
        contact.responded_at = datetime.utcnow()

    contact.is_read = True
    contact.updated_at = datetime.utcnow()

    session.add(contact)
    session.commit()
    session.refresh(contact)

    return success(contact.model_dump(), "Contact submission updated successfully")


@router.delete("/{contact_id}")
def delete_contact(
    contact_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    contact = _get_contact(session, contact_id)

    if contact.user_id != current_user.id and current_user.role != "admin":
        raise PermissionDeniedError("Access denied. You can only delete your own submissions.")

    session.delete(contact)
    session.commit()
    return success(message="Contact submission deleted successfully")
