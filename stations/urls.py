from django.urls import path
from .views import HealthCheckView, StationDetailView, StationListView, StationMapView

urlpatterns = [
    path('stations/all', StationListView.as_view(), name='station-list'),
    path('stations/map/', StationMapView.as_view(), name='station-map'),
    path('stations/<int:station_id>/', StationDetailView.as_view(), name='station-detail'),
    path('health/', HealthCheckView.as_view(), name='health-check'),
]
