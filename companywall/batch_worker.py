# batch_worker.py
# -*- coding: utf-8 -*-

"""
Batch lookups over a list of queries, independent of any UI.
"""

import logging
from typing import List, Callable, Optional, Dict

from companywall.client import CompanyWallClient
from companywall.exceptions import CompanyWallError
from companywall.formatters import make_result_row

logger = logging.getLogger(__name__)

BatchResultDict = Dict[str, str]


class BatchWorker:
    """
    Runs client.search() for each query in order and turns the outcome into
    result rows. Reports through callbacks only.
    """

    def __init__(self, client: CompanyWallClient):
        self.client = client
        self._cancelled = False
        self.found = 0

    def process_queries(
        self,
        queries: List[str],
        *,
        cancelled_callback: Optional[Callable[[], bool]] = None,
        progress_callback: Optional[Callable[[int, int, str], None]] = None,
        result_callback: Optional[Callable[[BatchResultDict], None]] = None,
        error_callback: Optional[Callable[[str, Exception], None]] = None
    ) -> List[BatchResultDict]:
        """
        Look up every query.

        Args:
            queries: Company names or OIBs
            cancelled_callback: Polled before each query; True stops the batch
            progress_callback: Called before each query with (idx, total, query)
            result_callback: Called with each result row
            error_callback: Called with (query, exception) when a lookup raises

        Returns:
            One row per processed query, in input order
        """
        self._cancelled = False
        self.found = 0
        results: List[BatchResultDict] = []
        total = len(queries)

        for idx, query in enumerate(queries, 1):
            if cancelled_callback and cancelled_callback():
                self._cancelled = True
                logger.info(f"Batch processing cancelled at query {idx}/{total}")
                break

            if progress_callback:
                progress_callback(idx, total, query)

            try:
                record = self.client.search(query)
                row = make_result_row(query, record=record)
                if record is not None:
                    self.found += 1
            except CompanyWallError as e:
                logger.error(f"Error processing query '{query}': {e.message}")
                row = make_result_row(query, error=e.message)
                if error_callback:
                    error_callback(query, e)
            except Exception as e:
                logger.exception(f"Unexpected error processing query '{query}': {e}")
                row = make_result_row(query, error=str(e))
                if error_callback:
                    error_callback(query, e)

            if result_callback:
                result_callback(row)
            results.append(row)

        return results

    @property
    def is_cancelled(self) -> bool:
        return self._cancelled
