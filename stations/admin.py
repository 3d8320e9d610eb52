from django.contrib import admin
from .models import FuelStation


@admin.register(FuelStation)
class FuelStationAdmin(admin.ModelAdmin):
    list_display = ['name', 'address', 'rating', 'gasoline_price', 'ethanol_price',
                    'diesel_price', 'latitude', 'longitude']
    list_filter = ['rating']
    search_fields = ['name', 'address']
    ordering = ['id']
    list_per_page = 50

    fieldsets = (
        ('Station Information', {
            'fields': ('name', 'address', 'rating')
        }),
        ('Location', {
            'fields': ('latitude', 'longitude')
        }),
        ('Pricing', {
            'fields': ('gasoline_price', 'ethanol_price', 'diesel_price')
        }),
    )
