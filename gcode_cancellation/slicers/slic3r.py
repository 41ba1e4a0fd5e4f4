from . import CancellationPreProcessor

START_MARKER = "; printing object "
STOP_MARKER = "; stop printing object "


def object_id(line):
    return line.split("printing object", 1)[1].strip()


class Slic3rProcessor(CancellationPreProcessor):
    """Slic3r, PrusaSlicer, SuperSlicer and OrcaSlicer label objects with
    ``; printing object <id>`` / ``; stop printing object <id>`` comments."""

    slicer_name = "Slic3r"

    def scan_line(self, line):
        if line.startswith(START_MARKER):
            self.enter_object(object_id(line))
        elif line.startswith(STOP_MARKER) and self.is_current(line):
            self.leave_object()

    def process_line(self, line):
        output = [f"{line}\n"]
        if line.startswith(START_MARKER):
            self.open_object(object_id(line), output)
        elif line.startswith(STOP_MARKER) and self.is_current(line):
            self.close_object(output)
        return output

    def is_current(self, line):
        current_object = self.current_object
        return (
            current_object is not None
            and self.known_objects.get(object_id(line)) is current_object
        )
