from . import CancellationPreProcessor

PRINTING_MARKER = ";PRINTING:"
PRINTING_ID_MARKER = ";PRINTING_ID:"
END_OF_PRINT = ";REMAINING_TIME: 0"
NO_OBJECT = "-1"


def marker_value(line):
    return line.split(":", 1)[1].strip()


class IdeaMakerProcessor(CancellationPreProcessor):
    """ideaMaker names an object on a ``;PRINTING:`` line and identifies it on
    the ``;PRINTING_ID:`` line right after it; id ``-1`` is no object."""

    slicer_name = "ideaMaker"

    def start_discovery(self):
        self.pending_name = None

    def scan_line(self, line):
        if line.startswith(PRINTING_MARKER):
            self.pending_name = marker_value(line)
            return

        name, self.pending_name = self.pending_name, None
        if not line.startswith(PRINTING_ID_MARKER):
            return

        object_id = marker_value(line)
        if object_id == NO_OBJECT:
            self.leave_object()
        elif name is None and object_id not in self.known_objects:
            # An id without a preceding name only resumes a known object.
            self.leave_object()
        else:
            self.enter_object(object_id, name or None)

    def process_line(self, line):
        output = [f"{line}\n"]

        if line.startswith(PRINTING_ID_MARKER):
            object_id = marker_value(line)
            if object_id == NO_OBJECT:
                self.close_object(output)
            else:
                self.open_object(object_id, output)
        elif line.rstrip() == END_OF_PRINT:
            self.close_object(output)

        return output
