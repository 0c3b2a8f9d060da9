"""
Домен Ingestion (D1): Поиск и декодирование документов-источников.

Выход: contracts.DocumentLocator, contracts.PageFragments (для D2)
"""

from src.ingestion.http_client import HttpFetcher
from src.ingestion.pdf_fragments import PdfFragmentExtractor
from src.ingestion.listing_discovery import (
    ListingPageDiscovery,
    LocalFileDiscovery,
    parse_listing,
    select_latest,
)

__all__ = [
    "HttpFetcher",
    "PdfFragmentExtractor",
    "ListingPageDiscovery",
    "LocalFileDiscovery",
    "parse_listing",
    "select_latest",
]
