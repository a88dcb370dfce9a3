"""
Web Catalog Shared - shared infrastructure.

This package contains:
- common/: exception hierarchy and structured logging
- infra/config/: process settings (pydantic-settings)
"""

from webcat_shared.common.exceptions import WebCatalogError

__all__ = [
    "WebCatalogError",
]
