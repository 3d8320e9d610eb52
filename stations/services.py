import folium
import requests
import structlog
from html import escape
from typing import Dict, List, Optional, Tuple
from django.conf import settings
from django.db import DatabaseError
from .exceptions import StationNotFound, StorageUnavailable
from .models import FuelStation
from .query import (
    PaginationMode, QueryResult, StationQuery, StationQueryEngine, parse_query,
)

logger = structlog.get_logger(__name__)

DEFAULT_CENTER = (-22.0195, -47.891)
DEFAULT_ZOOM = 15


def finder_settings() -> Dict:
    return getattr(settings, 'STATION_FINDER', {})


class StationRepository:
    """Reads stations from the database"""

    def find_stations(self, criteria: StationQuery) -> List[FuelStation]:
        """
        Candidate stations for a query in id order.

        Only the bounding box is pushed down. SQLite LIKE folds ASCII case only,
        so the text match is left to StationQueryEngine.filter_stations.
        """
        stations = FuelStation.objects.all()

        box = criteria.bounding_box
        if box is not None:
            stations = stations.filter(
                latitude__gte=box.min_lat,
                latitude__lte=box.max_lat,
                longitude__gte=box.min_lng,
                longitude__lte=box.max_lng
            )

        try:
            return list(stations.order_by('id'))
        except DatabaseError as e:
            logger.error("storage_unavailable", operation="find_stations", error=str(e))
            raise StorageUnavailable("Station storage is unavailable") from e

    def get_station(self, station_id: int) -> FuelStation:
        try:
            return FuelStation.objects.get(pk=station_id)
        except FuelStation.DoesNotExist:
            raise StationNotFound(f"Station {station_id} not found")
        except DatabaseError as e:
            logger.error("storage_unavailable", operation="get_station", error=str(e))
            raise StorageUnavailable("Station storage is unavailable") from e


class StationSearchService:
    """Parses request parameters, fetches candidates and runs the query engine"""

    def __init__(self, repository: Optional[StationRepository] = None,
                 strict: Optional[bool] = None,
                 mode: Optional[PaginationMode] = None):
        config = finder_settings()
        self.repository = repository or StationRepository()
        self.strict = config.get('STRICT_QUERY_VALIDATION', False) if strict is None else strict
        self.engine = StationQueryEngine(
            mode or config.get('PAGINATION_MODE', PaginationMode.SORT_THEN_PAGINATE)
        )

    def parse(self, params) -> StationQuery:
        return parse_query(params, strict=self.strict)

    def search(self, query: StationQuery) -> QueryResult:
        stations = self.repository.find_stations(query)
        result = self.engine.query(stations, query)

        logger.info(
            "stations_queried",
            candidates=len(stations),
            returned=result.count,
            page=result.page,
            limit=result.limit,
            bounded=query.bounding_box is not None,
            search=query.search_term,
            observer=query.observer is not None,
            mode=self.engine.mode.value
        )
        return result


class Geocoder:
    """Resolves free-text addresses through Nominatim"""

    def __init__(self, url: Optional[str] = None, user_agent: Optional[str] = None,
                 timeout: Optional[int] = None):
        config = finder_settings().get('GEOCODER', {})
        self.url = url or config.get('url', 'https://nominatim.openstreetmap.org/search')
        self.user_agent = user_agent or config.get('user_agent', 'FuelStationFinder/1.0')
        self.timeout = timeout or config.get('timeout_seconds', 10)
        self._cache: Dict[str, Optional[Tuple[float, float]]] = {}

    def geocode(self, address: str) -> Optional[Tuple[float, float]]:
        """(lat, lng) for an address, None when nothing is found"""
        if address in self._cache:
            return self._cache[address]

        params = {
            'q': address,
            'format': 'json',
            'limit': 1
        }
        headers = {'User-Agent': self.user_agent}

        response = requests.get(self.url, params=params, headers=headers, timeout=self.timeout)
        response.raise_for_status()
        data = response.json()

        coords = (float(data[0]['lat']), float(data[0]['lon'])) if data else None
        self._cache[address] = coords
        return coords

    def is_cached(self, address: str) -> bool:
        return address in self._cache


class StationMapGenerator:
    """Generates map visualization of a query result"""

    @staticmethod
    def map_center(result: QueryResult, query: StationQuery) -> Tuple[float, float]:
        if query.observer is not None:
            return query.observer.latitude, query.observer.longitude
        stations = result.stations
        if stations:
            lat = sum(s.latitude for s in stations) / len(stations)
            lng = sum(s.longitude for s in stations) / len(stations)
            return lat, lng
        return DEFAULT_CENTER

    @classmethod
    def generate_map_html(cls, result: QueryResult, query: StationQuery) -> str:
        """Generate interactive HTML map with one marker per station"""
        m = folium.Map(location=list(cls.map_center(result, query)), zoom_start=DEFAULT_ZOOM)

        box = query.bounding_box
        if box is not None:
            folium.Rectangle(
                bounds=[[box.min_lat, box.min_lng], [box.max_lat, box.max_lng]],
                color='blue',
                weight=2,
                fill=False
            ).add_to(m)

        if query.observer is not None:
            folium.Marker(
                [query.observer.latitude, query.observer.longitude],
                popup="<b>You are here</b>",
                icon=folium.Icon(color='blue', icon='user')
            ).add_to(m)

        for hit in result.items:
            station = hit.station
            folium.Marker(
                [station.latitude, station.longitude],
                popup=cls._popup(hit),
                tooltip=escape(station.name),
                icon=folium.Icon(color=cls._marker_color(station.rating), icon='info-sign')
            ).add_to(m)

        return m.get_root().render()

    @staticmethod
    def _marker_color(rating) -> str:
        rating = float(rating or 0)
        if rating >= 4.5:
            return 'red'
        if rating >= 4.0:
            return 'orange'
        return 'beige'

    @staticmethod
    def _popup(hit) -> str:
        station = hit.station
        lines = [f"<b>{escape(station.name)}</b>", escape(station.address)]
        if hit.distance_meters is not None:
            lines.append(f"<b>Distance:</b> {hit.distance_meters} m")
        lines.append(f"<b>Rating:</b> {station.rating}/5")
        for fuel, price in station.fuel_prices().items():
            lines.append(f"{fuel.title()}: {price if price is not None else 'N/A'}")
        return f"<div style='width: 200px'>{'<br>'.join(lines)}</div>"
