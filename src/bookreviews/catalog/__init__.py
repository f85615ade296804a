"""Catalog listing and book detail aggregation."""

from .aggregation import (
    RatingStats,
    average_rating,
    build_detail,
    build_listing,
    fill_distribution,
    rating_distribution,
    rating_stats_by_book,
)
from .manager import CatalogManager
from .schemas import (
    ALL_GENRES,
    PAGE_SIZE,
    BookDetail,
    BookSummary,
    ListingPage,
    ListingQuery,
    SortKey,
)

__all__ = [
    "CatalogManager",
    "RatingStats",
    "average_rating",
    "build_detail",
    "build_listing",
    "fill_distribution",
    "rating_distribution",
    "rating_stats_by_book",
    "ALL_GENRES",
    "PAGE_SIZE",
    "BookDetail",
    "BookSummary",
    "ListingPage",
    "ListingQuery",
    "SortKey",
]
