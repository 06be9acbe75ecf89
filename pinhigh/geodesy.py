from __future__ import annotations

import math
import random
from dataclasses import dataclass
from typing import Tuple

# ============================================================
# Constants
# ============================================================

# WGS-84 ellipsoid
WGS84_A = 6378137.0
WGS84_B = 6356752.314245
WGS84_F = 1 / 298.257223563

EARTH_RADIUS_M = 6371000.0

CONVERGENCE_RAD = 1e-12
MAX_ITERATIONS = 100

YARDS_PER_METER = 1.09361
FEET_PER_METER = 3.28084
METERS_PER_FOOT = 0.3048


@dataclass(frozen=True)
class Coordinate:
    """Latitude / longitude in decimal degrees on the WGS-84 ellipsoid."""

    lat: float
    lng: float


@dataclass(frozen=True)
class GeodesicResult:
    distance_m: float
    initial_bearing_deg: float
    final_bearing_deg: float


ZERO_RESULT = GeodesicResult(0.0, 0.0, 0.0)


def _normalize_bearing(deg: float) -> float:
    return (deg + 360.0) % 360.0


# ============================================================
# Vincenty inverse / direct
# ============================================================

def inverse(a: Coordinate, b: Coordinate) -> GeodesicResult:
    """
    Distance and bearings between two points (Vincenty inverse).

    Steps:
      1) Reduce both latitudes onto the auxiliary sphere.
      2) Iterate on the longitude difference until it moves by < 1e-12 rad
         (at most 100 iterations).
      3) Evaluate the series for the ellipsoidal distance.

    Coincident points, antipodal degeneracy and non-convergence all return
    a zero result instead of raising.
    """
    f = WGS84_F
    L = math.radians(b.lng - a.lng)
    U1 = math.atan((1 - f) * math.tan(math.radians(a.lat)))
    U2 = math.atan((1 - f) * math.tan(math.radians(b.lat)))
    sin_u1, cos_u1 = math.sin(U1), math.cos(U1)
    sin_u2, cos_u2 = math.sin(U2), math.cos(U2)

    lam = L
    for _ in range(MAX_ITERATIONS):
        sin_lam, cos_lam = math.sin(lam), math.cos(lam)
        sin_sigma = math.sqrt(
            (cos_u2 * sin_lam) ** 2
            + (cos_u1 * sin_u2 - sin_u1 * cos_u2 * cos_lam) ** 2
        )
        if sin_sigma == 0:
            return ZERO_RESULT
        cos_sigma = sin_u1 * sin_u2 + cos_u1 * cos_u2 * cos_lam
        sigma = math.atan2(sin_sigma, cos_sigma)
        sin_alpha = cos_u1 * cos_u2 * sin_lam / sin_sigma
        cos_sq_alpha = 1 - sin_alpha ** 2
        # equatorial line
        if cos_sq_alpha == 0:
            cos_2sigma_m = 0.0
        else:
            cos_2sigma_m = cos_sigma - 2 * sin_u1 * sin_u2 / cos_sq_alpha
        C = f / 16 * cos_sq_alpha * (4 + f * (4 - 3 * cos_sq_alpha))
        lam_prev = lam
        lam = L + (1 - C) * f * sin_alpha * (
            sigma
            + C * sin_sigma * (cos_2sigma_m + C * cos_sigma * (-1 + 2 * cos_2sigma_m ** 2))
        )
        if abs(lam - lam_prev) <= CONVERGENCE_RAD:
            break
    else:
        return ZERO_RESULT

    u_sq = cos_sq_alpha * (WGS84_A ** 2 - WGS84_B ** 2) / WGS84_B ** 2
    A = 1 + u_sq / 16384 * (4096 + u_sq * (-768 + u_sq * (320 - 175 * u_sq)))
    B = u_sq / 1024 * (256 + u_sq * (-128 + u_sq * (74 - 47 * u_sq)))
    delta_sigma = B * sin_sigma * (
        cos_2sigma_m
        + B / 4 * (
            cos_sigma * (-1 + 2 * cos_2sigma_m ** 2)
            - B / 6 * cos_2sigma_m * (-3 + 4 * sin_sigma ** 2) * (-3 + 4 * cos_2sigma_m ** 2)
        )
    )
    distance = WGS84_B * A * (sigma - delta_sigma)

    alpha1 = math.atan2(cos_u2 * sin_lam, cos_u1 * sin_u2 - sin_u1 * cos_u2 * cos_lam)
    alpha2 = math.atan2(cos_u1 * sin_lam, -sin_u1 * cos_u2 + cos_u1 * sin_u2 * cos_lam)

    if not math.isfinite(distance):
        return ZERO_RESULT

    return GeodesicResult(
        distance_m=distance,
        initial_bearing_deg=_normalize_bearing(math.degrees(alpha1)),
        final_bearing_deg=_normalize_bearing(math.degrees(alpha2)),
    )


def direct(start: Coordinate, bearing_deg: float, distance_m: float) -> Coordinate:
    """Destination from `start` along `bearing_deg` for `distance_m` (Vincenty direct)."""
    if distance_m == 0:
        return start

    f = WGS84_F
    alpha1 = math.radians(bearing_deg)
    sin_alpha1, cos_alpha1 = math.sin(alpha1), math.cos(alpha1)

    tan_u1 = (1 - f) * math.tan(math.radians(start.lat))
    cos_u1 = 1 / math.sqrt(1 + tan_u1 ** 2)
    sin_u1 = tan_u1 * cos_u1
    sigma1 = math.atan2(tan_u1, cos_alpha1)
    sin_alpha = cos_u1 * sin_alpha1
    cos_sq_alpha = 1 - sin_alpha ** 2
    u_sq = cos_sq_alpha * (WGS84_A ** 2 - WGS84_B ** 2) / WGS84_B ** 2
    A = 1 + u_sq / 16384 * (4096 + u_sq * (-768 + u_sq * (320 - 175 * u_sq)))
    B = u_sq / 1024 * (256 + u_sq * (-128 + u_sq * (74 - 47 * u_sq)))

    sigma = distance_m / (WGS84_B * A)
    for _ in range(MAX_ITERATIONS):
        cos_2sigma_m = math.cos(2 * sigma1 + sigma)
        sin_sigma, cos_sigma = math.sin(sigma), math.cos(sigma)
        delta_sigma = B * sin_sigma * (
            cos_2sigma_m
            + B / 4 * (
                cos_sigma * (-1 + 2 * cos_2sigma_m ** 2)
                - B / 6 * cos_2sigma_m * (-3 + 4 * sin_sigma ** 2) * (-3 + 4 * cos_2sigma_m ** 2)
            )
        )
        sigma_prev = sigma
        sigma = distance_m / (WGS84_B * A) + delta_sigma
        if abs(sigma - sigma_prev) <= CONVERGENCE_RAD:
            break
    else:
        return start

    cos_2sigma_m = math.cos(2 * sigma1 + sigma)
    sin_sigma, cos_sigma = math.sin(sigma), math.cos(sigma)
    tmp = sin_u1 * sin_sigma - cos_u1 * cos_sigma * cos_alpha1
    lat2 = math.atan2(
        sin_u1 * cos_sigma + cos_u1 * sin_sigma * cos_alpha1,
        (1 - f) * math.sqrt(sin_alpha ** 2 + tmp ** 2),
    )
    lam = math.atan2(
        sin_sigma * sin_alpha1,
        cos_u1 * cos_sigma - sin_u1 * sin_sigma * cos_alpha1,
    )
    C = f / 16 * cos_sq_alpha * (4 + f * (4 - 3 * cos_sq_alpha))
    L = lam - (1 - C) * f * sin_alpha * (
        sigma + C * sin_sigma * (cos_2sigma_m + C * cos_sigma * (-1 + 2 * cos_2sigma_m ** 2))
    )
    lng2 = math.radians(start.lng) + L
    lng2 = (lng2 + 3 * math.pi) % (2 * math.pi) - math.pi

    return Coordinate(lat=math.degrees(lat2), lng=math.degrees(lng2))


# ============================================================
# Shorthands
# ============================================================

def distance(a: Coordinate, b: Coordinate) -> float:
    return inverse(a, b).distance_m


def bearing(a: Coordinate, b: Coordinate) -> float:
    return inverse(a, b).initial_bearing_deg


def haversine_distance(a: Coordinate, b: Coordinate) -> float:
    """Great-circle distance in meters (spherical earth)."""
    lat1, lat2 = math.radians(a.lat), math.radians(b.lat)
    dlat = lat2 - lat1
    dlng = math.radians(b.lng - a.lng)
    h = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlng / 2) ** 2
    return 2 * EARTH_RADIUS_M * math.asin(min(1.0, math.sqrt(h)))


def to_local_xy(origin: Coordinate, point: Coordinate) -> Tuple[float, float]:
    """(east, north) offset of `point` from `origin` in meters."""
    result = inverse(origin, point)
    theta = math.radians(result.initial_bearing_deg)
    return (
        result.distance_m * math.sin(theta),
        result.distance_m * math.cos(theta),
    )


def angle_difference(a_deg: float, b_deg: float) -> float:
    """Signed a - b wrapped into [-180, 180)."""
    return (a_deg - b_deg + 180.0) % 360.0 - 180.0


# ============================================================
# Random draws
# ============================================================

def standard_normal_pair(rng: random.Random) -> Tuple[float, float]:
    """Two independent N(0, 1) samples from one Box-Muller draw."""
    u1 = 1.0 - rng.random()
    u2 = rng.random()
    r = math.sqrt(-2.0 * math.log(u1))
    theta = 2.0 * math.pi * u2
    return r * math.cos(theta), r * math.sin(theta)
