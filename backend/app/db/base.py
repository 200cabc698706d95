from backend.app.db.base_class import Base

# Import models to register metadata for Base.metadata.create_all in tests
from backend.app.models.user import User  # noqa: F401
from backend.app.models.auth_session import AuthSession  # noqa: F401
from backend.app.models.company import Company  # noqa: F401
from backend.app.models.invoice_template import InvoiceTemplate  # noqa: F401
from backend.app.models.invoice import Invoice  # noqa: F401
from backend.app.models.line_item import LineItem  # noqa: F401
from backend.app.models.expense import Expense  # noqa: F401
