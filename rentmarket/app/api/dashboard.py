"""Owner dashboard statistics endpoints."""

import logging

from fastapi import APIRouter, Depends, Response
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from rentmarket.app.core.errors import InternalError
from rentmarket.app.core.settings import get_settings
from rentmarket.app.db.session import get_db
from rentmarket.app.dependencies.auth import get_current_user_id
from rentmarket.app.schemas.common import ApiResponse
from rentmarket.app.schemas.dashboard import DashboardStats, DownloadStats
from rentmarket.app.services.dashboard_stats import get_dashboard_stats, get_download_stats

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


@router.get("/stats", response_model=ApiResponse[DashboardStats])
async def read_dashboard_stats(
    response: Response,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    try:
        stats = get_dashboard_stats(db, user_id)
    except SQLAlchemyError:
        logger.exception("Get dashboard stats error for user %s", user_id)
        raise InternalError("Failed to retrieve dashboard statistics")

    response.headers["Cache-Control"] = get_settings().cache_control_header
    return {"success": True, "message": "Dashboard statistics retrieved successfully", "data": stats}


@router.get("/download-stats", response_model=ApiResponse[DownloadStats])
async def read_download_stats(
    response: Response,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    try:
        stats = get_download_stats(db, user_id)
    except SQLAlchemyError:
        logger.exception("Get download stats error for user %s", user_id)
        raise InternalError("Failed to retrieve download statistics")

    response.headers["Cache-Control"] = get_settings().cache_control_header
    return {"success": True, "message": "Download statistics retrieved successfully", "data": stats}
