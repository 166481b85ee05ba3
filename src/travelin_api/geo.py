"""Geospatial helpers.

Great-circle distance, radius-to-bounding-box conversion and antimeridian
aware containment checks. Everything here is pure and works in decimal
degrees unless a name says otherwise.
"""

import math
from collections.abc import Iterable
from dataclasses import dataclass

EARTH_RADIUS_KM = 6371.0

MIN_LATITUDE = -90.0
MAX_LATITUDE = 90.0
MIN_LONGITUDE = -180.0
MAX_LONGITUDE = 180.0


@dataclass(frozen=True)
class GeoPoint:
    """A latitude/longitude pair in decimal degrees."""

    latitude: float
    longitude: float


@dataclass(frozen=True)
class BoundingBox:
    """A latitude/longitude rectangle.

    ``west > east`` means the box crosses the antimeridian. ``west == east``
    is treated as a full longitude wrap.
    """

    north: float
    south: float
    east: float
    west: float

    @property
    def crosses_antimeridian(self) -> bool:
        return self.west > self.east

    @property
    def wraps_all_longitudes(self) -> bool:
        return self.west == self.east or (
            self.west <= MIN_LONGITUDE and self.east >= MAX_LONGITUDE
        )

    def contains(self, point: GeoPoint) -> bool:
        return is_in_bounding_box(point, self)


def to_radians(degrees: float) -> float:
    return degrees * (math.pi / 180)


def to_degrees(radians: float) -> float:
    return radians * (180 / math.pi)


def normalize_longitude(longitude: float) -> float:
    """Bring a longitude back into [-180, 180]. 180 itself is left alone."""
    while longitude > MAX_LONGITUDE:
        longitude -= 360
    while longitude < MIN_LONGITUDE:
        longitude += 360
    return longitude


def is_valid_coordinate(latitude: float, longitude: float) -> bool:
    """Check that both values are finite numbers within the WGS84 ranges."""
    if isinstance(latitude, bool) or isinstance(longitude, bool):
        return False
    if not isinstance(latitude, (int, float)) or not isinstance(longitude, (int, float)):
        return False
    if math.isnan(latitude) or math.isnan(longitude):
        return False
    return (
        MIN_LATITUDE <= latitude <= MAX_LATITUDE
        and MIN_LONGITUDE <= longitude <= MAX_LONGITUDE
    )


def haversine_km(a: GeoPoint, b: GeoPoint) -> float:
    """Great-circle distance between two points in kilometers."""
    d_lat = to_radians(b.latitude - a.latitude)
    d_lon = to_radians(b.longitude - a.longitude)
    lat1 = to_radians(a.latitude)
    lat2 = to_radians(b.latitude)

    h = (
        math.sin(d_lat / 2) ** 2
        + math.sin(d_lon / 2) ** 2 * math.cos(lat1) * math.cos(lat2)
    )
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
    return EARTH_RADIUS_KM * c


def bounding_box_for_radius(center: GeoPoint, radius_km: float) -> BoundingBox:
    """Build a box that encloses the circle of ``radius_km`` around ``center``.

    The angular radius is used directly as the latitude delta and the
    longitude delta is ``asin(sin(r) / cos(lat))``. The result is a superset
    of the circle, so it is only meant as a pre-filter before an exact
    distance check.

    If the circle reaches a pole, every meridian passes through it and the
    longitude span becomes the full [-180, 180] range.
    """
    angular_radius = radius_km / EARTH_RADIUS_KM
    lat_delta = to_degrees(angular_radius)

    min_lat = center.latitude - lat_delta
    max_lat = center.latitude + lat_delta
    north = min(max_lat, MAX_LATITUDE)
    south = max(min_lat, MIN_LATITUDE)

    if max_lat >= MAX_LATITUDE or min_lat <= MIN_LATITUDE:
        return BoundingBox(north=north, south=south, east=MAX_LONGITUDE, west=MIN_LONGITUDE)

    ratio = math.sin(angular_radius) / math.cos(to_radians(center.latitude))
    if ratio >= 1:
        return BoundingBox(north=north, south=south, east=MAX_LONGITUDE, west=MIN_LONGITUDE)

    lon_delta = to_degrees(math.asin(ratio))
    if lon_delta >= 180:
        return BoundingBox(north=north, south=south, east=MAX_LONGITUDE, west=MIN_LONGITUDE)

    return BoundingBox(
        north=north,
        south=south,
        east=normalize_longitude(center.longitude + lon_delta),
        west=normalize_longitude(center.longitude - lon_delta),
    )


def longitude_in_range(longitude: float, west: float, east: float) -> bool:
    """Longitude half of the bounding-box test, antimeridian aware."""
    if west == east:
        return True
    if west < east:
        return west <= longitude <= east
    return longitude >= west or longitude <= east


def is_in_bounding_box(point: GeoPoint, box: BoundingBox) -> bool:
    if not box.south <= point.latitude <= box.north:
        return False
    return longitude_in_range(point.longitude, box.west, box.east)


def calculate_centroid(points: Iterable[GeoPoint]) -> GeoPoint:
    """Geographic midpoint of a set of points (mean of their unit vectors)."""
    points = list(points)
    if not points:
        raise ValueError("Cannot calculate centroid of empty point list")

    x = y = z = 0.0
    for point in points:
        lat = to_radians(point.latitude)
        lon = to_radians(point.longitude)
        x += math.cos(lat) * math.cos(lon)
        y += math.cos(lat) * math.sin(lon)
        z += math.sin(lat)

    total = len(points)
    x /= total
    y /= total
    z /= total

    lon = math.atan2(y, x)
    lat = math.atan2(z, math.sqrt(x * x + y * y))
    return GeoPoint(latitude=to_degrees(lat), longitude=to_degrees(lon))
