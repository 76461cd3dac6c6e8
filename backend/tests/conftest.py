"""
Shared fixtures for the itinerary test suite.

Graphs are built from small hand-written route/flight sets so every expected
journey can be checked by eye.
"""

import asyncio
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from itinerary.models import FlightModel, RouteModel

BASE_TIME = datetime(2025, 1, 1, 8, 0, tzinfo=timezone.utc)


def make_route(route_id, from_location, to_location, duration):
    return RouteModel(
        route_id=route_id,
        from_location=from_location,
        to_location=to_location,
        duration=duration,
    )


def make_flight(flight_id, route, price, departure, provider="Skyline"):
    return FlightModel(
        flight_id=flight_id,
        route=route,
        provider=provider,
        price=Decimal(str(price)),
        departure=departure,
    )


class FakeRepository:
    """In-memory JourneyRepository that counts loads and can fail on demand."""

    def __init__(self, routes, flights, fail=False, delay=0.0):
        self.routes = list(routes)
        self.flights = list(flights)
        self.fail = fail
        self.delay = delay
        self.route_loads = 0
        self.flight_loads = 0

    async def list_routes(self):
        self.route_loads += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail:
            raise ConnectionError("storage unavailable")
        return list(self.routes)

    async def list_flights(self):
        self.flight_loads += 1
        return list(self.flights)


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start=1000.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def abc_routes():
    """A->B (60 min) and B->C (90 min)."""
    return [make_route("AB", "A", "B", 60), make_route("BC", "B", "C", 90)]


@pytest.fixture
def abc_flights(abc_routes):
    """Flight 1 A->B tomorrow, flight 2 B->C two hours later."""
    ab, bc = abc_routes
    return [
        make_flight(1, ab, 100, BASE_TIME + timedelta(days=1)),
        make_flight(2, bc, 50, BASE_TIME + timedelta(days=1, hours=2)),
    ]


@pytest.fixture
def diamond_graph():
    """
    A->B->D, A->C->D and a direct A->D, with a return edge D->A.

    Routes and flights are returned as (routes, flights).
    """
    ab = make_route("AB", "A", "B", 60)
    bd = make_route("BD", "B", "D", 60)
    ac = make_route("AC", "A", "C", 30)
    cd = make_route("CD", "C", "D", 200)
    ad = make_route("AD", "A", "D", 150)
    da = make_route("DA", "D", "A", 150)
    day = BASE_TIME + timedelta(days=1)
    flights = [
        make_flight(1, ab, 100, day),
        make_flight(2, bd, 100, day + timedelta(hours=2)),
        make_flight(3, ac, 40, day + timedelta(hours=1)),
        make_flight(4, cd, 60, day + timedelta(hours=3)),
        make_flight(5, ad, 300, day + timedelta(hours=4)),
        make_flight(6, da, 250, day + timedelta(hours=8)),
    ]
    return [ab, bd, ac, cd, ad, da], flights


@pytest.fixture
def fake_clock():
    return FakeClock()
