from dataclasses import dataclass
from decimal import Decimal

import pytest
from rest_framework.test import APIClient

from stations.models import FuelStation

# São Carlos, SP
OBSERVER = (-22.0195, -47.891)


@dataclass
class Station:
    """Plain station record for exercising the query engine without a database."""

    id: int
    name: str
    address: str
    latitude: float
    longitude: float


@pytest.fixture
def plain_stations():
    return [
        Station(1, "Posto Shell", "Av. São Carlos, 1000", -22.0195, -47.891),
        Station(2, "Posto Ipiranga", "Rua Episcopal, 500", -22.0150, -47.8900),
        Station(3, "Auto Posto BR", "Rod. Washington Luís, km 235", -21.9800, -47.8800),
        Station(4, "Posto Shell Select", "Av. Trabalhador São-Carlense, 200", -22.0300, -47.9000),
    ]


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def stations(db):
    rows = [
        ("Posto Shell", "Av. São Carlos, 1000", -22.0195, -47.891, "4.5", "5.99", "3.99", None),
        ("Posto Ipiranga", "Rua Episcopal, 500", -22.0150, -47.8900, "4.0", "6.15", "4.05", "6.20"),
        ("Auto Posto BR", "Rod. Washington Luís, km 235", -21.9800, -47.8800, "3.5", "5.89", "3.95", "6.10"),
        ("Posto Shell Select", "Av. Trabalhador São-Carlense, 200", -22.0300, -47.9000, "4.8", "6.05", "4.00", "6.25"),
    ]
    created = []
    for name, address, lat, lng, rating, gasoline, ethanol, diesel in rows:
        created.append(FuelStation.objects.create(
            name=name,
            address=address,
            latitude=lat,
            longitude=lng,
            rating=Decimal(rating),
            gasoline_price=Decimal(gasoline),
            ethanol_price=Decimal(ethanol),
            diesel_price=Decimal(diesel) if diesel else None,
        ))
    return created
