from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

FUEL_TYPES = ('gasoline', 'ethanol', 'diesel')


class FuelStation(models.Model):
    """Fuel station with location, rating and pump prices"""

    name = models.CharField(max_length=200)
    address = models.CharField(max_length=300, blank=True, default='')
    latitude = models.FloatField(
        validators=[MinValueValidator(-90), MaxValueValidator(90)]
    )
    longitude = models.FloatField(
        validators=[MinValueValidator(-180), MaxValueValidator(180)]
    )
    rating = models.DecimalField(
        max_digits=2, decimal_places=1, default=0,
        validators=[MinValueValidator(0), MaxValueValidator(5)]
    )
    gasoline_price = models.DecimalField(max_digits=6, decimal_places=2, null=True, blank=True)
    ethanol_price = models.DecimalField(max_digits=6, decimal_places=2, null=True, blank=True)
    diesel_price = models.DecimalField(max_digits=6, decimal_places=2, null=True, blank=True)

    class Meta:
        ordering = ['id']

    def __str__(self):
        return f"{self.name} - {self.address}"

    def fuel_prices(self) -> dict:
        return {fuel: getattr(self, f"{fuel}_price") for fuel in FUEL_TYPES}
