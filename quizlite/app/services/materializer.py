# START OF FILE: quizlite/app/services/materializer.py

import asyncio
from typing import List, Optional, Protocol, Sequence

from quizlite.domain.errors import CatalogLookupError
from quizlite.domain.models import ProductSummary
from quizlite.shared.config import CATALOG_TIMEOUT_SECONDS
from quizlite.shared.logger import logger


class ProductCatalog(Protocol):
    def fetch_by_handle(self, handle: str) -> Optional[ProductSummary]: ...


class ResultMaterializer:
    """
    Turns recommended handles into ProductSummary objects.

    Lookups run concurrently in worker threads, each under its own timeout.
    Any per-handle failure (not found, transport error, timeout) yields a
    handle-only summary for that handle and leaves the others alone. Output
    order always follows input order.
    """

    def __init__(self, catalog: Optional[ProductCatalog], timeout: float = CATALOG_TIMEOUT_SECONDS):
        self.catalog = catalog
        self.timeout = timeout
        logger.info(f"ResultMaterializer initialized (catalog: {'on' if catalog else 'off'}, timeout: {timeout}s).")

    async def materialize(self, handles: Sequence[str]) -> List[ProductSummary]:
        if not handles:
            return []
        if self.catalog is None:
            return [ProductSummary(handle=h) for h in handles]
        # _lookup never raises, so gather preserves input order and waits for all
        return list(await asyncio.gather(*(self._lookup(h) for h in handles)))

    async def _lookup(self, handle: str) -> ProductSummary:
        try:
            summary = await asyncio.wait_for(
                asyncio.to_thread(self.catalog.fetch_by_handle, handle),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError:
            logger.warning(f"Catalog lookup for '{handle}' exceeded {self.timeout}s. Using handle only.")
            return ProductSummary(handle=handle)
        except CatalogLookupError as e:
            logger.warning(f"{e}. Using handle only.")
            return ProductSummary(handle=handle)
        except Exception as e:
            logger.error(f"Unexpected catalog failure for '{handle}': {e}", exc_info=True)
            return ProductSummary(handle=handle)

        if summary is None:
            return ProductSummary(handle=handle)
        return summary

# END OF FILE: quizlite/app/services/materializer.py
