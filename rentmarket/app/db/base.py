from rentmarket.app.db.base_class import Base

# Import models to register metadata for Base.metadata.create_all in tests
from rentmarket.app.models.user import User  # noqa: F401
from rentmarket.app.models.product import Product  # noqa: F401
from rentmarket.app.models.rental_request import RentalRequest  # noqa: F401
from rentmarket.app.models.payment import Payment  # noqa: F401
from rentmarket.app.models.invoice import Invoice  # noqa: F401
from rentmarket.app.models.invoice_item import InvoiceItem  # noqa: F401
from rentmarket.app.models.notification import Notification  # noqa: F401
