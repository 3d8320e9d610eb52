"""Tests for the station HTTP API."""

from unittest import mock

import pytest
from django.db import DatabaseError

from stations.models import FuelStation

LIST_URL = "/api/stations/all"


def data_ids(response):
    return [item["id"] for item in response.json()["data"]]


@pytest.mark.django_db
class TestStationList:

    def test_envelope(self, api_client, stations):
        response = api_client.get(LIST_URL)

        assert response.status_code == 200
        body = response.json()
        assert body["page"] == 1
        assert body["limit"] == 50
        assert body["count"] == 4
        assert data_ids(response) == [s.id for s in stations]

    def test_station_shape(self, api_client, stations):
        item = api_client.get(LIST_URL).json()["data"][0]

        assert item["name"] == "Posto Shell"
        assert item["lat"] == pytest.approx(-22.0195)
        assert item["lng"] == pytest.approx(-47.891)
        assert item["rating"] == pytest.approx(4.5)
        assert item["fuels"] == {
            "gasoline": {"price": 5.99},
            "ethanol": {"price": 3.99},
            "diesel": None,
        }
        assert "distanceMeters" not in item

    def test_bounding_box(self, api_client, stations):
        response = api_client.get(LIST_URL, {
            "minLat": "-22.025", "maxLat": "-22.0", "minLng": "-47.895", "maxLng": "-47.885",
        })
        assert data_ids(response) == [stations[0].id, stations[1].id]

    def test_partial_bounding_box_ignored(self, api_client, stations):
        response = api_client.get(LIST_URL, {"minLat": "-22.025", "maxLat": "-22.0"})
        assert response.json()["count"] == 4

    def test_malformed_bound_ignored(self, api_client, stations):
        response = api_client.get(LIST_URL, {
            "minLat": "abc", "maxLat": "-22.0", "minLng": "-47.895", "maxLng": "-47.885",
        })
        assert response.status_code == 200
        assert response.json()["count"] == 4

    @pytest.mark.parametrize("term", ["shell", "SHELL"])
    def test_search(self, api_client, stations, term):
        response = api_client.get(LIST_URL, {"search": term})
        assert data_ids(response) == [stations[0].id, stations[3].id]

    @pytest.mark.parametrize("term", ["SÃO CARLOS", "são carlos", "Av. SÃO"])
    def test_search_folds_accented_case(self, api_client, stations, term):
        response = api_client.get(LIST_URL, {"search": term})
        assert data_ids(response) == [stations[0].id]

    def test_accented_search_inside_box(self, api_client, stations):
        response = api_client.get(LIST_URL, {
            "search": "SÃO", "minLat": "-22.035", "maxLat": "-22.0", "minLng": "-47.905", "maxLng": "-47.885",
        })
        assert data_ids(response) == [stations[0].id, stations[3].id]

    def test_pagination(self, api_client, stations):
        response = api_client.get(LIST_URL, {"limit": "2", "page": "2"})
        body = response.json()

        assert body["count"] == 2
        assert body["page"] == 2
        assert data_ids(response) == [stations[2].id, stations[3].id]

    def test_limit_clamp(self, api_client, stations):
        assert api_client.get(LIST_URL, {"limit": "500"}).json()["limit"] == 100
        assert api_client.get(LIST_URL, {"limit": "0"}).json()["limit"] == 50

    def test_sorted_by_distance(self, api_client, stations):
        response = api_client.get(LIST_URL, {"userLat": "-22.0195", "userLng": "-47.891"})
        data = response.json()["data"]

        assert data_ids(response) == [stations[i].id for i in (0, 1, 3, 2)]
        assert data[0]["distanceMeters"] == 0
        distances = [item["distanceMeters"] for item in data]
        assert distances == sorted(distances)

    def test_paginate_then_sort_mode(self, api_client, stations, settings):
        settings.STATION_FINDER = {"PAGINATION_MODE": "paginate_then_sort"}
        response = api_client.get(LIST_URL, {
            "userLat": "-21.98", "userLng": "-47.88", "limit": "2",
        })
        assert data_ids(response) == [stations[1].id, stations[0].id]

    def test_strict_mode_rejects_malformed(self, api_client, stations, settings):
        settings.STATION_FINDER = {"STRICT_QUERY_VALIDATION": True}
        response = api_client.get(LIST_URL, {"page": "abc"})

        assert response.status_code == 400
        body = response.json()
        assert body["kind"] == "invalid_query"
        assert body["field"] == "page"

    def test_storage_unavailable(self, api_client):
        with mock.patch("stations.services.FuelStation") as model:
            model.objects.all.return_value.order_by.side_effect = DatabaseError("connection refused")
            response = api_client.get(LIST_URL)

        assert response.status_code == 503
        body = response.json()
        assert body["kind"] == "storage_unavailable"
        assert "connection refused" not in body["message"]

    def test_request_id_echoed(self, api_client, stations):
        response = api_client.get(LIST_URL, HTTP_X_REQUEST_ID="abc123")
        assert response["X-Request-ID"] == "abc123"


@pytest.mark.django_db
class TestStationDetail:

    def test_found(self, api_client, stations):
        station = stations[1]
        response = api_client.get(f"/api/stations/{station.id}/")

        assert response.status_code == 200
        assert response.json()["name"] == "Posto Ipiranga"
        assert response.json()["fuels"]["diesel"] == {"price": 6.2}

    def test_missing(self, api_client, db):
        response = api_client.get("/api/stations/999999/")

        assert response.status_code == 404
        assert response.json()["kind"] == "not_found"


@pytest.mark.django_db
class TestStationMap:

    def test_renders_markers(self, api_client, stations):
        response = api_client.get("/api/stations/map/", {"search": "ipiranga"})

        assert response.status_code == 200
        assert response["Content-Type"].startswith("text/html")
        html = response.content.decode()
        assert "Posto Ipiranga" in html
        assert "Auto Posto BR" not in html

    def test_station_name_escaped(self, api_client, db):
        FuelStation.objects.create(
            name="<img src=x onerror=alert(1)>", address="<script>x</script>",
            latitude=-22.0, longitude=-47.9,
        )
        html = api_client.get("/api/stations/map/").content.decode()

        assert "<img src=x onerror=alert(1)>" not in html
        assert "<script>x</script>" not in html
        assert "&lt;img src=x onerror=alert(1)&gt;" in html

    def test_strict_mode_error(self, api_client, stations, settings):
        settings.STATION_FINDER = {"STRICT_QUERY_VALIDATION": True}
        response = api_client.get("/api/stations/map/", {"userLat": "-22.0"})

        assert response.status_code == 400
        assert response.json()["field"] == "userLng"


class TestHealth:

    def test_health(self, api_client):
        response = api_client.get("/api/health/")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
