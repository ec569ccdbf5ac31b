"""Home service: implements StorefrontPort for the storefront read path."""

import logging

from .catalog_cache import DEFAULT_TOP_SELLING_COUNT, CatalogCache
from .models import (
    SHARED_ERROR_VIEW,
    ErrorView,
    HomeOutcome,
    StatusCodePageView,
    TopAlbumsView,
)
from .ports import StorefrontPort

logger = logging.getLogger(__name__)


class HomeService(StorefrontPort):
    """Serves the home page from the shared best-seller cache."""

    def __init__(
        self, cache: CatalogCache, top_selling_count: int = DEFAULT_TOP_SELLING_COUNT
    ):
        if top_selling_count <= 0:
            raise ValueError(
                f"top_selling_count must be positive, got {top_selling_count}"
            )
        self.cache = cache
        self.top_selling_count = top_selling_count

    async def index(self) -> HomeOutcome:
        albums = await self.cache.get_top_selling_albums(self.top_selling_count)
        return TopAlbumsView(albums)

    def error(self) -> HomeOutcome:
        return ErrorView(view=SHARED_ERROR_VIEW)

    def status_code_page(self) -> HomeOutcome:
        return StatusCodePageView()
