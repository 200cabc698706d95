"""Invoice model for billing."""

from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, Numeric, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from backend.app.core.time import utc_now
from backend.app.db.base_class import Base


class Invoice(Base):
    __tablename__ = "invoices"
    __table_args__ = (UniqueConstraint("owner_id", "invoice_number", name="uq_invoices_owner_number"),)

    id = Column(Integer, primary_key=True, index=True)
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    invoice_number = Column(String(32), nullable=False)
    company_id = Column(Integer, ForeignKey("companies.id"), nullable=True, index=True)
    template_id = Column(Integer, ForeignKey("invoice_templates.id"), nullable=True)

    # Snapshots taken at write time; never synced with the source records.
    client_name = Column(String(255), nullable=False)
    client_address = Column(Text, nullable=False, default="")
    user_address = Column(Text, nullable=False, default="")

    currency = Column(String(3), nullable=False, default="EUR")
    date = Column(Date, nullable=False)
    total_amount = Column(Numeric(12, 2), default=0.00, nullable=False)

    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False)

    owner = relationship("User", back_populates="invoices")
    company = relationship("Company", back_populates="invoices")
    template = relationship("InvoiceTemplate", back_populates="invoices")
    items = relationship(
        "LineItem",
        back_populates="invoice",
        cascade="all, delete-orphan",
        order_by="LineItem.position",
    )
