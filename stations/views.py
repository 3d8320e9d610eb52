import structlog
from django.http import HttpResponse
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework import status
from drf_spectacular.utils import extend_schema, OpenApiExample
from .exceptions import InvalidQuery, StationNotFound, StorageUnavailable
from .serializers import (
    ErrorSerializer, FuelStationSerializer, StationListQuerySerializer,
    StationListResponseSerializer,
)
from .services import StationMapGenerator, StationRepository, StationSearchService

logger = structlog.get_logger(__name__)


def error_response(error, status_code):
    return Response(error.as_dict(), status=status_code)


class StationListView(APIView):
    """List stations inside a map area or matching a search, nearest first"""

    @extend_schema(
        parameters=[StationListQuerySerializer],
        responses={
            200: StationListResponseSerializer,
            400: ErrorSerializer,
            503: ErrorSerializer,
        },
        examples=[
            OpenApiExample(
                'Stations around São Carlos',
                value={
                    "page": 1,
                    "limit": 50,
                    "count": 1,
                    "data": [{
                        "id": 1,
                        "name": "Posto Shell",
                        "address": "Av. São Carlos, 1000",
                        "lat": -22.0195,
                        "lng": -47.891,
                        "rating": 4.5,
                        "fuels": {
                            "gasoline": {"price": 5.99},
                            "ethanol": {"price": 3.99},
                            "diesel": None
                        },
                        "distanceMeters": 120
                    }]
                },
                response_only=True,
            ),
        ],
        description="""
List fuel stations, optionally restricted to a map area and a text search.

**Filters:**
- `minLat`, `maxLat`, `minLng`, `maxLng`: bounding box, all four required together
- `search`: case-insensitive substring of the station name or address

**Proximity:**
- `userLat`, `userLng`: when both are given every station gets a
  `distanceMeters` field and results are sorted nearest first

**Pagination:**
- `page` (default 1), `limit` (default 50, at most 100)

Malformed parameters are ignored unless strict query validation is enabled,
in which case they are rejected with a 400.
        """
    )
    def get(self, request):
        service = StationSearchService()

        try:
            query = service.parse(request.query_params)
            result = service.search(query)
        except InvalidQuery as e:
            logger.info("invalid_query", field=e.field, error=str(e))
            return error_response(e, status.HTTP_400_BAD_REQUEST)
        except StorageUnavailable as e:
            return error_response(e, status.HTTP_503_SERVICE_UNAVAILABLE)

        return Response(StationListResponseSerializer(result).data, status=status.HTTP_200_OK)


class StationDetailView(APIView):
    """Single station details"""

    @extend_schema(
        responses={200: FuelStationSerializer, 404: ErrorSerializer, 503: ErrorSerializer},
        description="Full details of one station, as shown in the station modal"
    )
    def get(self, request, station_id):
        try:
            station = StationRepository().get_station(station_id)
        except StationNotFound as e:
            return error_response(e, status.HTTP_404_NOT_FOUND)
        except StorageUnavailable as e:
            return error_response(e, status.HTTP_503_SERVICE_UNAVAILABLE)

        return Response(FuelStationSerializer(station).data)


class StationMapView(APIView):
    """Interactive HTML map of a station listing"""

    @extend_schema(
        parameters=[StationListQuerySerializer],
        responses={200: {"type": "string", "format": "html"}},
        description="""
Returns an interactive HTML map of the stations the listing endpoint would
return for the same parameters.

**Map Features:**
- One marker per station (click for prices and distance)
- Your position when `userLat`/`userLng` are given
- The bounding box outline when all four bounds are given
        """
    )
    def get(self, request):
        service = StationSearchService()

        try:
            query = service.parse(request.query_params)
            result = service.search(query)
        except InvalidQuery as e:
            return error_response(e, status.HTTP_400_BAD_REQUEST)
        except StorageUnavailable as e:
            return error_response(e, status.HTTP_503_SERVICE_UNAVAILABLE)

        map_html = StationMapGenerator.generate_map_html(result, query)
        return HttpResponse(map_html, content_type='text/html')


class HealthCheckView(APIView):
    """Health check endpoint"""

    @extend_schema(
        description="Verify API is running and healthy",
        responses={
            200: {
                "type": "object",
                "properties": {
                    "status": {"type": "string", "example": "healthy"},
                    "service": {"type": "string", "example": "Fuel Station Finder API"},
                    "version": {"type": "string", "example": "1.0.0"}
                }
            }
        }
    )
    def get(self, request):
        return Response({
            "status": "healthy",
            "service": "Fuel Station Finder API",
            "version": "1.0.0"
        })
