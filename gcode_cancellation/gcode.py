import json
from collections import namedtuple

from . import __version__

HEADER_MARKER = (
    "; Pre-Processed for Cancel-Object support by gcode_cancellation"
    f" v{__version__}\n"
)

Command = namedtuple("Command", ["command", "params"])


# -----------------------------------------------------------------------------#
# Split one G-code line into its command word and parameters.
# -----------------------------------------------------------------------------
def parse_gcode(line):
    """Parse ``line`` into a :class:`Command`.

    Everything after the first ``;`` is dropped. ``KEY=value`` tokens split on
    the first ``=``; any other token is a classic single letter parameter
    such as ``X12.5``. Keys keep the case they were written in.
    """
    line = line.split(";", 1)[0].strip()
    parts = line.split()
    if not parts:
        return Command(None, {})

    params = {}
    for param in parts[1:]:
        if "=" in param:
            key, value = param.split("=", 1)
            params[key] = value
        else:
            params[param[:1]] = param[1:]
    return Command(parts[0], params)


def dump_coords(point):
    return f"{point[0]:0.3f},{point[1]:0.3f}"


def dump_polygon(points):
    # No whitespace: the polygon is a single G-code parameter.
    return json.dumps([[x, y] for x, y in points], separators=(",", ":"))


# -----------------------------------------------------------------------------#
# EXCLUDE_OBJECT annotation chunks.
# -----------------------------------------------------------------------------
def exclude_object_header(known_objects, marker=HEADER_MARKER):
    yield "\n"
    yield marker
    yield f"; {len(known_objects)} known objects\n"
    for known_object in known_objects:
        yield from exclude_object_define(known_object)


def exclude_object_define(known_object):
    yield f"EXCLUDE_OBJECT_DEFINE NAME={known_object.name}"

    center = known_object.hull.center()
    if center is not None:
        yield f" CENTER={dump_coords(center)}"

    polygon = known_object.hull.exterior()
    if polygon:
        yield f" POLYGON={dump_polygon(polygon)}"

    yield "\n"


def exclude_object_start(name):
    return f"EXCLUDE_OBJECT_START NAME={name}\n"


def exclude_object_end(name):
    return f"EXCLUDE_OBJECT_END NAME={name}\n"
