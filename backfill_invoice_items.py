"""Add the missing rental-fee and tax items to invoices created without them.

Usage: python backfill_invoice_items.py
"""

import logging
import sys

from rentmarket.app.core.logging_config import setup_logging
from rentmarket.app.core.settings import get_settings
from rentmarket.app.db.session import SessionLocal, close_db
from rentmarket.app.services.invoice_backfill import backfill_invoice_items

logger = logging.getLogger("backfill_invoice_items")


def main() -> int:
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_file)

    db = SessionLocal()
    try:
        result = backfill_invoice_items(db)
    except Exception:
        logger.exception("Invoice item backfill could not run")
        return 1
    finally:
        db.close()
        close_db()

    print(f"Fixed {result.fixed} of {result.total_invoices} invoices ({result.failed} failed, {result.skipped} already complete).")
    return 0


if __name__ == "__main__":
    sys.exit(main())
