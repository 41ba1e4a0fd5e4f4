from . import CancellationPreProcessor
from ..gcode import parse_gcode

NO_OBJECT = "-1"


def is_m486(line):
    return line.upper().startswith("M486")


class M486Processor(CancellationPreProcessor):
    """Marlin style labels: ``M486 T<n>`` declares objects ``-1 .. n-1`` and
    ``M486 S<id>`` switches to one of them. The original ``M486`` lines are
    commented out in the output."""

    slicer_name = "M486"

    def scan_line(self, line):
        if not is_m486(line):
            return

        params = parse_gcode(line).params
        if "T" in params:
            try:
                total = int(params["T"])
            except ValueError:
                return
            for object_id in range(-1, total):
                self.register_object(str(object_id))
        elif "S" in params:
            if params["S"] == NO_OBJECT:
                self.leave_object()
            else:
                self.enter_object(params["S"])

    def process_line(self, line):
        if not is_m486(line):
            return [f"{line}\n"]

        output = [f"; {line}\n"]
        params = parse_gcode(line).params
        if "S" in params:
            if params["S"] == NO_OBJECT:
                self.close_object(output)
            else:
                self.open_object(params["S"], output)
        return output

    def header_objects(self):
        return [
            known_object
            for object_id, known_object in self.known_objects.items()
            if object_id != NO_OBJECT
        ]
