import logging

from ..errors import RewindError
from ..gcode import (
    HEADER_MARKER,
    exclude_object_end,
    exclude_object_header,
    exclude_object_start,
    parse_gcode,
)
from ..hulls import KnownObject


# -----------------------------------------------------------------------------#
# Line reading shared by the driver and the processors.
# -----------------------------------------------------------------------------
def decode_line(raw):
    """Strip the line terminator; undecodable bytes yield an empty line."""
    if isinstance(raw, bytes):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError:
            return ""
    if raw.endswith("\n"):
        raw = raw[:-1]
    if raw.endswith("\r"):
        raw = raw[:-1]
    return raw


def read_lines(stream):
    for raw in stream:
        yield decode_line(raw)


def rewind(stream):
    try:
        stream.seek(0)
    except (OSError, ValueError) as e:
        raise RewindError() from e


def is_instruction(line):
    return bool(line.strip()) and not line.startswith(";")


# -----------------------------------------------------------------------------#
# Two pass processor shared by every slicer flavour.
# -----------------------------------------------------------------------------
class CancellationPreProcessor:
    """Discover objects in a first pass, then re-emit the file annotated.

    Subclasses implement :meth:`scan_line` to track the current object while
    discovering and :meth:`process_line` to return the output chunks for one
    line during emission.
    """

    slicer_name = None

    def __init__(self, header_marker=HEADER_MARKER):
        self.header_marker = header_marker
        self.known_objects = {}
        self.current_object = None

    def process(self, stream, layer_filter):
        self.known_objects = {}
        self.current_object = None
        self.start_discovery()
        for line in read_lines(stream):
            self.scan_line(line)
            self.maybe_add_point(line, layer_filter)
        logging.debug(
            "%s: discovered %d object(s): %s",
            self.slicer_name,
            len(self.known_objects),
            list(self.known_objects.values()),
        )
        rewind(stream)
        self.current_object = None
        return self.emit(stream)

    def emit(self, stream):
        header_written = False
        for line in read_lines(stream):
            if not header_written:
                if not is_instruction(line):
                    yield f"{line}\n"
                    continue
                yield from exclude_object_header(
                    self.header_objects(), marker=self.header_marker
                )
                header_written = True
            yield from self.process_line(line)

        if self.current_object is not None:
            yield exclude_object_end(self.current_object.name)
            self.current_object = None

    # -------------------------------------------------------------------------#
    # Hooks.
    # -------------------------------------------------------------------------#
    def start_discovery(self):
        pass

    def scan_line(self, line):
        raise NotImplementedError

    def process_line(self, line):
        raise NotImplementedError

    def header_objects(self):
        return list(self.known_objects.values())

    # -------------------------------------------------------------------------#
    # Discovery helpers.
    # -------------------------------------------------------------------------#
    def register_object(self, object_id, name=None):
        known_object = self.known_objects.get(object_id)
        if known_object is None:
            logging.info("Found object %s", object_id)
            known_object = KnownObject(object_id if name is None else name)
            self.known_objects[object_id] = known_object
        return known_object

    def enter_object(self, object_id, name=None):
        known_object = self.register_object(object_id, name)
        known_object.layer += 1
        self.current_object = known_object
        return known_object

    def leave_object(self):
        self.current_object = None

    def maybe_add_point(self, line, layer_filter):
        current_object = self.current_object
        if current_object is None or current_object.layer < 0:
            return
        if not layer_filter.contains(current_object.layer):
            return
        if not line.strip().lower().startswith("g"):
            return

        params = parse_gcode(line).params
        try:
            float(params["E"])
            x = float(params["X"])
            y = float(params["Y"])
        except (KeyError, ValueError):
            return
        current_object.hull.add_point(x, y)

    # -------------------------------------------------------------------------#
    # Emission helpers.
    # -------------------------------------------------------------------------#
    def close_object(self, output):
        if self.current_object is not None:
            output.append(exclude_object_end(self.current_object.name))
            self.current_object = None

    def open_object(self, object_id, output):
        self.close_object(output)
        self.current_object = self.known_objects.get(object_id)
        if self.current_object is not None:
            output.append(exclude_object_start(self.current_object.name))


from .cura import CuraProcessor  # noqa: E402
from .ideamaker import IdeaMakerProcessor  # noqa: E402
from .m486 import M486Processor  # noqa: E402
from .slic3r import Slic3rProcessor  # noqa: E402

SLICER_MARKERS = (
    ("; generated by SuperSlicer", "SuperSlicer", Slic3rProcessor),
    ("; generated by PrusaSlicer", "PrusaSlicer", Slic3rProcessor),
    ("; generated by Slic3r", "Slic3r", Slic3rProcessor),
    ("; generated by OrcaSlicer", "OrcaSlicer", Slic3rProcessor),
    (";Generated with Cura_SteamEngine", "Cura", CuraProcessor),
    (";Sliced by ideaMaker", "ideaMaker", IdeaMakerProcessor),
    ("M486", "M486", M486Processor),
)


def identify_slicer_marker(line):
    """Return a processor for the slicer whose banner ``line`` is, else None."""
    line = line.strip()
    for prefix, slicer_name, processor_class in SLICER_MARKERS:
        if line.startswith(prefix):
            logging.info("Identified slicer: %s", slicer_name)
            return processor_class()
    return None


__all__ = [
    "CancellationPreProcessor",
    "CuraProcessor",
    "IdeaMakerProcessor",
    "M486Processor",
    "Slic3rProcessor",
    "identify_slicer_marker",
    "read_lines",
    "rewind",
]
