"""
Journey query service.

Entry point for journey searches: resolves the current graph snapshot through
the snapshot cache, enumerates paths over that snapshot's adjacency index,
ranks them and optionally paginates the result.
"""

import logging
import time
from datetime import datetime
from typing import List, Optional, Union

from ..cache.snapshot import GraphSnapshot, GraphSnapshotCache
from ..models.enums import RankingCriterion
from ..models.journey import JourneyModel, JourneyPage
from ..models.query import InvalidQueryError, JourneyQuery, build_query, parse_criterion
from .adjacency import AdjacencyIndex
from .pagination import MAX_PAGE_SIZE, clamp_page, paginate
from .path_enumerator import PathEnumerator
from .ranking import rank_journeys

logger = logging.getLogger(__name__)


class JourneyService:
    """
    Journey search facade over a graph snapshot cache.

    Each query owns its own search state; the snapshot and the adjacency
    index built for it are shared read-only between concurrent queries.
    """

    def __init__(
        self,
        snapshot_cache: GraphSnapshotCache,
        strict_connections: bool = False,
        default_max_results: Optional[int] = 100,
        max_page_size: int = MAX_PAGE_SIZE,
    ):
        self.snapshot_cache = snapshot_cache
        self.strict_connections = strict_connections
        self.default_max_results = default_max_results
        self.max_page_size = max_page_size
        self._indexed_snapshot: Optional[GraphSnapshot] = None
        self._index: Optional[AdjacencyIndex] = None

    async def search(self, query: JourneyQuery) -> List[JourneyModel]:
        """
        Enumerate and rank journeys for a single origin/destination query.

        Returns:
            Ranked journeys, or an empty list when none exist
        """
        start_time = time.time()
        index = await self._current_index()

        journeys = self._enumerator(index).enumerate_query(query)
        ranked = rank_journeys(journeys, query.order_by, query.ascending)

        logger.debug(
            "Journey search %s -> %s by %s: %d journeys in %.2fms",
            query.origin, query.destination, query.order_by.value,
            len(ranked), (time.time() - start_time) * 1000,
        )
        return ranked

    async def find_by_min_exchanges(
        self,
        origin: str,
        destination: str,
        ascending: bool = True,
        max_exchanges: Optional[int] = None,
        max_results: Optional[int] = None,
    ) -> List[JourneyModel]:
        """Journeys ordered by number of connections, without a departure filter."""
        query = self._build_query(
            origin, destination,
            order_by=RankingCriterion.EXCHANGES,
            ascending=ascending,
            max_exchanges=max_exchanges,
            max_results=max_results,
        )
        return await self.search(query)

    async def find_by_min_price(
        self,
        origin: str,
        destination: str,
        min_departure: datetime,
        ascending: bool = True,
        max_exchanges: Optional[int] = None,
        max_results: Optional[int] = None,
    ) -> List[JourneyModel]:
        """Journeys departing no earlier than min_departure, ordered by total price."""
        query = self._build_query(
            origin, destination,
            min_departure=min_departure,
            order_by=RankingCriterion.PRICE,
            ascending=ascending,
            max_exchanges=max_exchanges,
            max_results=max_results,
        )
        return await self.search(query)

    async def find_by_min_duration(
        self,
        origin: str,
        destination: str,
        min_departure: datetime,
        ascending: bool = True,
        max_exchanges: Optional[int] = None,
        max_results: Optional[int] = None,
    ) -> List[JourneyModel]:
        """Journeys departing no earlier than min_departure, ordered by total duration."""
        query = self._build_query(
            origin, destination,
            min_departure=min_departure,
            order_by=RankingCriterion.DURATION,
            ascending=ascending,
            max_exchanges=max_exchanges,
            max_results=max_results,
        )
        return await self.search(query)

    async def list_all_paged(
        self,
        page: int = 1,
        size: int = 100,
        order_by: Union[RankingCriterion, str] = RankingCriterion.EXCHANGES,
        ascending: bool = True,
        max_exchanges: Optional[int] = None,
    ) -> JourneyPage:
        """
        Every journey between every ordered pair of distinct locations, ranked and paged.

        No departure filter and no discovery cap apply, so the whole result
        set is materialized before slicing. Out-of-range page and size values
        are clamped.

        Raises:
            InvalidQueryError: If order_by is unknown or max_exchanges is negative
        """
        criterion = parse_criterion(order_by)
        if max_exchanges is not None and max_exchanges < 0:
            raise InvalidQueryError(f"max_exchanges must be >= 0, got {max_exchanges}")
        page, size = clamp_page(page, size, self.max_page_size)

        snapshot = await self.snapshot_cache.get_snapshot()
        enumerator = self._enumerator(self._index_for(snapshot))
        locations = snapshot.locations

        journeys: List[JourneyModel] = []
        for origin in locations:
            for destination in locations:
                if origin == destination:
                    continue
                journeys.extend(enumerator.enumerate(
                    origin, destination, max_exchanges=max_exchanges,
                ))

        logger.info(
            "Enumerated %d journeys across %d locations for page %d (size %d)",
            len(journeys), len(locations), page, size,
        )
        return paginate(rank_journeys(journeys, criterion, ascending), page, size)

    def _build_query(self, origin: str, destination: str, **options) -> JourneyQuery:
        if options.get("max_results") is None:
            options["max_results"] = self.default_max_results
        return build_query(origin=origin, destination=destination, **options)

    def _enumerator(self, index: AdjacencyIndex) -> PathEnumerator:
        return PathEnumerator(index, strict_connections=self.strict_connections)

    async def _current_index(self) -> AdjacencyIndex:
        snapshot = await self.snapshot_cache.get_snapshot()
        return self._index_for(snapshot)

    def _index_for(self, snapshot: GraphSnapshot) -> AdjacencyIndex:
        """Adjacency index for the snapshot, rebuilt only when the snapshot changes."""
        if self._indexed_snapshot is not snapshot or self._index is None:
            self._index = AdjacencyIndex.build(snapshot.flights)
            self._indexed_snapshot = snapshot
            logger.debug("Built adjacency index for %d locations", len(self._index))
        return self._index
