"""
Journey discovery services.

This module contains the adjacency index, path enumeration, ranking,
pagination and serialization helpers, and the JourneyService facade that
ties them to the graph snapshot cache.
"""

from .adjacency import AdjacencyIndex
from .path_enumerator import PathEnumerator
from .ranking import rank_journeys
from .pagination import MAX_PAGE_SIZE, clamp_page, paginate
from .formatter import describe_departure, journey_to_dict, journeys_to_list, parse_relative_departure
from .journey_service import JourneyService

__all__ = [
    'AdjacencyIndex',
    'PathEnumerator',
    'rank_journeys',
    'MAX_PAGE_SIZE',
    'clamp_page',
    'paginate',
    'describe_departure',
    'journey_to_dict',
    'journeys_to_list',
    'parse_relative_departure',
    'JourneyService',
]
