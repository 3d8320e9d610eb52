class StationFinderError(Exception):
    """Base error for the station finder"""

    kind = 'station_finder_error'

    def as_dict(self) -> dict:
        return {'kind': self.kind, 'message': str(self)}


class InvalidQuery(StationFinderError, ValueError):
    """Raised for malformed query parameters when strict validation is on"""

    kind = 'invalid_query'

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field

    def as_dict(self) -> dict:
        data = super().as_dict()
        data['field'] = self.field
        return data


class StorageUnavailable(StationFinderError):
    kind = 'storage_unavailable'


class StationNotFound(StationFinderError):
    kind = 'not_found'
