"""
Statistics endpoint for API v1.

Returns aggregate figures over every stored blog: total likes, the
favourite blog and the authors with the most blogs and the most likes.
Aggregates without a value (empty catalogue) are ``null``.
"""

from fastapi import APIRouter

from blog_catalog_api.app.schemas.statistics import BlogStatistics
from blog_catalog_api.app.services.statistics_service import StatisticsService


router = APIRouter()


@router.get("/", response_model=BlogStatistics)
async def get_statistics() -> BlogStatistics:
    return await StatisticsService.summarize()
