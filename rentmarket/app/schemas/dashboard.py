"""Dashboard statistics payloads."""

from pydantic import BaseModel

from rentmarket.app.schemas.common import camel_output


class DashboardStats(BaseModel):
    total_products: int
    available_products: int
    rented_products: int
    pending_requests: int
    active_requests: int
    completed_requests: int
    total_revenue: float
    # Completed payments dated within the last 30x24h, not the calendar month
    monthly_revenue: float
    total_requests: int

    model_config = camel_output


class DownloadStats(BaseModel):
    total_invoices: int
    downloaded_invoices: int
    pdf_downloads: int
    excel_downloads: int
    csv_downloads: int

    model_config = camel_output
