"""
Station listing query: bounding-box and text filtering, pagination and
proximity sorting over an already-fetched sequence of stations.

Nothing in here touches the database; stations only need ``name``,
``address``, ``latitude`` and ``longitude`` attributes.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Iterable, List, Mapping, Optional, Sequence

from .exceptions import InvalidQuery

EARTH_RADIUS_KM = 6371
DEFAULT_PAGE = 1
DEFAULT_LIMIT = 50
MAX_LIMIT = 100

BOUNDS_PARAMS = ('minLat', 'maxLat', 'minLng', 'maxLng')
OBSERVER_PARAMS = ('userLat', 'userLng')


class PaginationMode(str, Enum):
    """Where the page is cut relative to the distance sort"""

    SORT_THEN_PAGINATE = 'sort_then_paginate'
    PAGINATE_THEN_SORT = 'paginate_then_sort'


@dataclass(frozen=True)
class BoundingBox:
    min_lat: float
    max_lat: float
    min_lng: float
    max_lng: float

    def contains(self, lat: float, lng: float) -> bool:
        return (self.min_lat <= lat <= self.max_lat
                and self.min_lng <= lng <= self.max_lng)


@dataclass(frozen=True)
class ObserverLocation:
    latitude: float
    longitude: float


@dataclass(frozen=True)
class StationQuery:
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT
    bounding_box: Optional[BoundingBox] = None
    search_term: Optional[str] = None
    observer: Optional[ObserverLocation] = None


@dataclass
class StationHit:
    """A station in a result page, with its distance when an observer was given"""

    station: Any
    distance_meters: Optional[int] = None


@dataclass
class QueryResult:
    page: int
    limit: int
    items: List[StationHit] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.items)

    @property
    def stations(self) -> List[Any]:
        return [hit.station for hit in self.items]


def haversine_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle distance in kilometers"""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    delta_phi = math.radians(lat2 - lat1)
    delta_lambda = math.radians(lng2 - lng1)

    a = math.sin(delta_phi/2)**2 + \
        math.cos(phi1) * math.cos(phi2) * math.sin(delta_lambda/2)**2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1-a))
    return EARTH_RADIUS_KM * c


def distance_meters(lat1: float, lng1: float, lat2: float, lng2: float) -> int:
    """Haversine distance rounded to whole meters, halves rounding up"""
    return int(math.floor(haversine_km(lat1, lng1, lat2, lng2) * 1000 + 0.5))


def _parse_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError:
        return None


def _parse_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def clamp_page(page: Any) -> int:
    page = _parse_int(page)
    if page is None or page < 1:
        return DEFAULT_PAGE
    return page


def clamp_limit(limit: Any) -> int:
    limit = _parse_int(limit)
    if limit is None or limit < 1:
        return DEFAULT_LIMIT
    return min(limit, MAX_LIMIT)


def _is_absent(value: Any) -> bool:
    return value is None or value == ''


def _read(params: Mapping[str, Any], name: str, parser: Callable[[Any], Any],
          strict: bool, message: str) -> Any:
    raw = params.get(name)
    if _is_absent(raw):
        return None
    value = parser(raw)
    if value is None and strict:
        raise InvalidQuery(name, f"{name} {message}, got {raw!r}")
    return value


def _read_positive_int(params, name, strict, default):
    value = _read(params, name, _parse_int, strict, 'must be an integer')
    if value is not None and value < 1:
        if strict:
            raise InvalidQuery(name, f"{name} must be at least 1, got {value}")
        value = None
    return default if value is None else value


def _read_coordinates(params: Mapping[str, Any], names: Sequence[str],
                      strict: bool) -> Optional[List[float]]:
    """All-or-nothing read of a group of coordinate parameters"""
    present = [name for name in names if not _is_absent(params.get(name))]
    if not present:
        return None

    if len(present) < len(names):
        if strict:
            missing = [name for name in names if name not in present]
            raise InvalidQuery(
                missing[0], f"{', '.join(names)} must be supplied together"
            )
        return None

    values = [_read(params, name, _parse_float, strict, 'must be a finite number')
              for name in names]
    if any(value is None for value in values):
        return None

    if strict:
        for name, value in zip(names, values):
            bound = 90 if 'Lat' in name else 180
            if not -bound <= value <= bound:
                raise InvalidQuery(
                    name, f"{name} must be between -{bound} and {bound}, got {value}"
                )
    return values


def parse_query(params: Mapping[str, Any], strict: bool = False) -> StationQuery:
    """
    Build a StationQuery from raw request parameters.

    In permissive mode malformed values fall back to defaults or to "filter
    not applied". In strict mode any present-but-malformed value raises
    InvalidQuery. Limits above MAX_LIMIT are clamped in both modes.
    """
    page = _read_positive_int(params, 'page', strict, DEFAULT_PAGE)
    limit = min(_read_positive_int(params, 'limit', strict, DEFAULT_LIMIT), MAX_LIMIT)

    bounds = _read_coordinates(params, BOUNDS_PARAMS, strict)
    observer = _read_coordinates(params, OBSERVER_PARAMS, strict)
    search = params.get('search')

    return StationQuery(
        page=page,
        limit=limit,
        bounding_box=BoundingBox(*bounds) if bounds else None,
        search_term=search or None,
        observer=ObserverLocation(*observer) if observer else None,
    )


class StationQueryEngine:
    """Filters, paginates and proximity-sorts stations"""

    def __init__(self, mode: PaginationMode = PaginationMode.SORT_THEN_PAGINATE):
        self.mode = PaginationMode(mode)

    def query(self, stations: Iterable[Any], q: StationQuery) -> QueryResult:
        page = clamp_page(q.page)
        limit = clamp_limit(q.limit)
        offset = (page - 1) * limit

        filtered = self.filter_stations(stations, q)

        if q.observer is None:
            items = [StationHit(station) for station in self.paginate(filtered, offset, limit)]
        elif self.mode is PaginationMode.SORT_THEN_PAGINATE:
            items = self.paginate(self.annotate_distances(filtered, q.observer), offset, limit)
        else:
            items = self.annotate_distances(self.paginate(filtered, offset, limit), q.observer)

        return QueryResult(page=page, limit=limit, items=items)

    @staticmethod
    def filter_stations(stations: Iterable[Any], q: StationQuery) -> List[Any]:
        box = q.bounding_box
        term = q.search_term.casefold() if q.search_term else None

        kept = []
        for station in stations:
            if box is not None and not box.contains(station.latitude, station.longitude):
                continue
            if term is not None and not _matches(station, term):
                continue
            kept.append(station)
        return kept

    @staticmethod
    def paginate(items: Sequence[Any], offset: int, limit: int) -> List[Any]:
        return list(items[offset:offset + limit])

    @staticmethod
    def annotate_distances(stations: Iterable[Any],
                           observer: ObserverLocation) -> List[StationHit]:
        hits = [
            StationHit(
                station,
                distance_meters(observer.latitude, observer.longitude,
                                station.latitude, station.longitude),
            )
            for station in stations
        ]
        # sorted() is stable, so equal distances keep their incoming order
        return sorted(hits, key=lambda hit: hit.distance_meters)


def _matches(station: Any, term: str) -> bool:
    name = (station.name or '').casefold()
    address = (station.address or '').casefold()
    return term in name or term in address
