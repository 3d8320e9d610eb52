from rest_framework import serializers
from .models import FuelStation


class FuelStationSerializer(serializers.ModelSerializer):
    """Serializer for FuelStation model"""

    lat = serializers.FloatField(source='latitude')
    lng = serializers.FloatField(source='longitude')
    rating = serializers.FloatField()
    fuels = serializers.SerializerMethodField()

    class Meta:
        model = FuelStation
        fields = ['id', 'name', 'address', 'lat', 'lng', 'rating', 'fuels']

    def get_fuels(self, station) -> dict:
        return {
            fuel: {'price': float(price)} if price is not None else None
            for fuel, price in station.fuel_prices().items()
        }


class StationHitSerializer(serializers.Serializer):
    """A listed station, with distanceMeters only when an observer was given"""

    def to_representation(self, hit):
        data = FuelStationSerializer(hit.station).data
        if hit.distance_meters is not None:
            data['distanceMeters'] = hit.distance_meters
        return data


class StationListResponseSerializer(serializers.Serializer):
    """Paginated listing envelope"""
    page = serializers.IntegerField()
    limit = serializers.IntegerField()
    count = serializers.IntegerField()
    data = StationHitSerializer(many=True, source='items')


class StationListQuerySerializer(serializers.Serializer):
    """Documents the listing query parameters"""
    page = serializers.IntegerField(required=False, min_value=1)
    limit = serializers.IntegerField(required=False, min_value=1, max_value=100)
    minLat = serializers.FloatField(required=False)
    maxLat = serializers.FloatField(required=False)
    minLng = serializers.FloatField(required=False)
    maxLng = serializers.FloatField(required=False)
    search = serializers.CharField(required=False)
    userLat = serializers.FloatField(required=False)
    userLng = serializers.FloatField(required=False)


class ErrorSerializer(serializers.Serializer):
    kind = serializers.CharField()
    message = serializers.CharField()
    field = serializers.CharField(required=False)

