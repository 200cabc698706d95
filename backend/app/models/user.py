from sqlalchemy import Column, DateTime, Integer, String, Text, func
from sqlalchemy.orm import relationship

from backend.app.db.base_class import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=True)
    address = Column(Text, nullable=True)
    last_login = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    company = relationship("Company", back_populates="owner", uselist=False)
    auth_sessions = relationship("AuthSession", back_populates="user", cascade="all, delete-orphan")
    invoice_templates = relationship("InvoiceTemplate", back_populates="owner", cascade="all, delete-orphan", foreign_keys="InvoiceTemplate.owner_id")
    invoices = relationship("Invoice", back_populates="owner", cascade="all, delete-orphan", foreign_keys="Invoice.owner_id")
    expenses = relationship("Expense", back_populates="owner", cascade="all, delete-orphan", foreign_keys="Expense.owner_id")

    @property
    def company_id(self):
        return self.company.id if self.company is not None else None
