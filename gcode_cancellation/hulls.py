import re
import math
from typing import NamedTuple

import numpy as np
from anyascii import anyascii
from shapely.geometry import MultiPoint
from shapely.geometry.polygon import orient

CLEAN_RE = re.compile(r"\W+")
SIMPLIFY_TOLERANCE = 0.02


class DecimalPoint(NamedTuple):
    x: float
    y: float

    @classmethod
    def new(cls, x, y):
        # -0.0 and 0.0 compare equal but would print differently.
        return cls(float(x) + 0.0, float(y) + 0.0)


# -----------------------------------------------------------------------------#
# Deduplicated point cloud of one object and its outline.
# -----------------------------------------------------------------------------
class HullTracker:
    def __init__(self):
        self.points = set()

    def __len__(self):
        return len(self.points)

    def add_point(self, x, y):
        if not (math.isfinite(x) and math.isfinite(y)):
            return
        self.points.add(DecimalPoint.new(x, y))

    def center(self):
        """Midpoint of the bounding box, or None when no point was collected."""
        if not self.points:
            return None
        coords = np.array(list(self.points), dtype=float)
        mid = (coords.min(axis=0) + coords.max(axis=0)) / 2.0
        return DecimalPoint(float(mid[0]), float(mid[1]))

    def exterior(self):
        """Simplified convex hull as a closed ring of (x, y) tuples.

        The ring runs counter-clockwise from the lowest vertex (rightmost on
        ties), so the result only depends on the collected points.
        """
        if len(self.points) < 3:
            return []
        hull = MultiPoint(sorted(self.points)).convex_hull
        if hull.geom_type != "Polygon":
            return []
        hull = hull.simplify(SIMPLIFY_TOLERANCE, preserve_topology=False)
        if hull.is_empty or hull.geom_type != "Polygon":
            return []

        ring = [
            (float(x), float(y)) for x, y in orient(hull, sign=1.0).exterior.coords
        ][:-1]
        first = min(range(len(ring)), key=lambda i: (ring[i][1], -ring[i][0]))
        ring = ring[first:] + ring[:first]
        ring.append(ring[0])
        return ring


def clean_id(name):
    return CLEAN_RE.sub("_", anyascii(name)).strip("_")


class KnownObject:
    def __init__(self, name):
        self.name = clean_id(name)
        self.hull = HullTracker()
        self.layer = -1

    def __repr__(self):
        return (
            f"KnownObject(name={self.name!r}, layer={self.layer}, "
            f"points={len(self.hull)})"
        )
