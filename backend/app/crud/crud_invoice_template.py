"""CRUD operations for invoice templates."""

from typing import List, Optional

from sqlalchemy.orm import Session

from backend.app.models.invoice_template import InvoiceTemplate
from backend.app.schemas.invoice_template import InvoiceTemplateCreate, InvoiceTemplateUpdate


class CRUDInvoiceTemplate:
    def create(self, db: Session, *, obj_in: InvoiceTemplateCreate, owner_id: int) -> InvoiceTemplate:
        obj = InvoiceTemplate(owner_id=owner_id, name=obj_in.name.strip(), html=obj_in.html)
        db.add(obj)
        db.commit()
        db.refresh(obj)
        return obj

    def get(self, db: Session, *, template_id: int, owner_id: int) -> Optional[InvoiceTemplate]:
        return (
            db.query(InvoiceTemplate)
            .filter(InvoiceTemplate.id == template_id, InvoiceTemplate.owner_id == owner_id)
            .first()
        )

    def get_multi(self, db: Session, *, owner_id: int) -> List[InvoiceTemplate]:
        return (
            db.query(InvoiceTemplate)
            .filter(InvoiceTemplate.owner_id == owner_id)
            .order_by(InvoiceTemplate.created_at.desc(), InvoiceTemplate.id.desc())
            .all()
        )

    def update(self, db: Session, *, db_obj: InvoiceTemplate, obj_in: InvoiceTemplateUpdate) -> InvoiceTemplate:
        update_data = obj_in.model_dump(exclude_unset=True, exclude_none=True)
        if "name" in update_data:
            update_data["name"] = update_data["name"].strip()
        for field, value in update_data.items():
            setattr(db_obj, field, value)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def delete(self, db: Session, *, db_obj: InvoiceTemplate) -> InvoiceTemplate:
        # Invoices keep rendering with the default layout once their template is gone.
        for invoice in db_obj.invoices:
            invoice.template_id = None
        db.delete(db_obj)
        db.commit()
        return db_obj


invoice_template_crud = CRUDInvoiceTemplate()
