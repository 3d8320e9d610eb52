import argparse
import csv
import time
from decimal import Decimal, InvalidOperation
import requests
from django.conf import settings
from django.core.management.base import BaseCommand, CommandError
from stations.models import FUEL_TYPES, FuelStation
from stations.services import Geocoder


def parse_price(value):
    value = (value or '').strip().replace(',', '.')
    if not value:
        return None
    price = Decimal(value)
    if not price.is_finite() or price < 0:
        raise ValueError(f"invalid price {value!r}")
    return price


def parse_rating(value):
    rating = parse_price(value)
    if rating is None:
        return Decimal('0')
    if rating > 5:
        raise ValueError(f"rating {rating} above 5")
    return rating.quantize(Decimal('0.1'))


def positive_int(value):
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def parse_coordinate(value, bound):
    value = (value or '').strip()
    if not value:
        return None
    number = float(value)
    if not -bound <= number <= bound:
        raise ValueError(f"coordinate {number} out of range")
    return number


class Command(BaseCommand):
    help = 'Load fuel stations from a CSV file'

    def add_arguments(self, parser):
        parser.add_argument('csv_file', type=str, help='Path to CSV file')
        parser.add_argument('--limit', type=positive_int, default=None, help='Max stations to load')
        parser.add_argument('--replace', action='store_true',
                            help='Delete existing stations before loading')

    def handle(self, *args, **options):
        csv_file = options['csv_file']
        limit = options.get('limit')
        geocoder = Geocoder()
        delay = settings.STATION_FINDER.get('GEOCODER', {}).get('delay_seconds', 1.0)

        self.stdout.write(f'Loading fuel stations from {csv_file}...')

        if options['replace']:
            deleted, _ = FuelStation.objects.all().delete()
            self.stdout.write(f'Removed {deleted} existing stations')

        count = 0
        skipped = 0

        try:
            file = open(csv_file, 'r', encoding='utf-8', newline='')
        except OSError as e:
            raise CommandError(f'Cannot open {csv_file}: {e}')

        with file:
            reader = csv.DictReader(file)
            missing = {'name', 'address'} - set(reader.fieldnames or [])
            if missing:
                raise CommandError(f'Missing column: {", ".join(sorted(missing))}')

            for row_num, row in enumerate(reader, start=1):
                if limit is not None and count >= limit:
                    break

                name = (row.get('name') or '').strip()
                address = (row.get('address') or '').strip()
                if not name:
                    skipped += 1
                    continue

                try:
                    lat = parse_coordinate(row.get('lat'), 90)
                    lng = parse_coordinate(row.get('lng'), 180)
                    rating = parse_rating(row.get('rating'))
                    prices = {f'{fuel}_price': parse_price(row.get(fuel)) for fuel in FUEL_TYPES}
                except (ValueError, InvalidOperation) as e:
                    self.stdout.write(self.style.WARNING(f'Error on row {row_num}: {e}'))
                    skipped += 1
                    continue

                if lat is None or lng is None:
                    if not address:
                        skipped += 1
                        continue
                    cached = geocoder.is_cached(address)
                    try:
                        coords = geocoder.geocode(address)
                    except requests.RequestException as e:
                        self.stdout.write(self.style.WARNING(f'Geocoding failed for {address}: {e}'))
                        coords = None
                    if not cached and delay:
                        time.sleep(delay)
                    if coords is None:
                        self.stdout.write(self.style.WARNING(f'Could not geocode: {address}'))
                        skipped += 1
                        continue
                    lat, lng = coords

                FuelStation.objects.create(
                    name=name,
                    address=address,
                    latitude=lat,
                    longitude=lng,
                    rating=rating,
                    **prices
                )
                count += 1

                if count % 50 == 0:
                    self.stdout.write(self.style.SUCCESS(f'Loaded {count} stations...'))

        self.stdout.write(
            self.style.SUCCESS(f'\nSuccessfully loaded {count} fuel stations')
        )
        if skipped > 0:
            self.stdout.write(
                self.style.WARNING(f'Skipped {skipped} stations')
            )
