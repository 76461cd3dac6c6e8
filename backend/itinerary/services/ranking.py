"""
Journey ranking by a single computed attribute.
"""

from typing import Callable, Dict, Iterable, List, Union

from ..models.enums import RankingCriterion
from ..models.journey import JourneyModel
from ..models.query import parse_criterion

_SORT_KEYS: Dict[RankingCriterion, Callable[[JourneyModel], object]] = {
    RankingCriterion.EXCHANGES: lambda journey: journey.number_of_exchanges,
    RankingCriterion.PRICE: lambda journey: journey.total_price,
    RankingCriterion.DURATION: lambda journey: journey.total_duration,
}


def rank_journeys(
    journeys: Iterable[JourneyModel],
    criterion: Union[RankingCriterion, str],
    ascending: bool = True,
) -> List[JourneyModel]:
    """
    Order journeys by exchanges, total price or total duration.

    The sort is stable in both directions, so journeys with equal keys keep
    the order in which they were discovered.

    Raises:
        InvalidQueryError: If the criterion is not recognized
    """
    key = _SORT_KEYS[parse_criterion(criterion)]
    return sorted(journeys, key=key, reverse=not ascending)
