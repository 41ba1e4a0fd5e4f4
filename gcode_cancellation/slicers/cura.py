from . import CancellationPreProcessor

MESH_MARKER = ";MESH:"
NONMESH = "NONMESH"
TIME_ELAPSED_MARKER = ";TIME_ELAPSED:"


def mesh_id(line):
    return line.split(":", 1)[1].strip()


class CuraProcessor(CancellationPreProcessor):
    """Objects are delimited by ``;MESH:<name>`` comments.

    ``;MESH:NONMESH`` marks travel and skirt moves between meshes. The last
    ``;TIME_ELAPSED:`` line closes the final object when no mesh marker
    follows it.
    """

    slicer_name = "Cura"

    def start_discovery(self):
        self.last_time_elapsed = None

    def scan_line(self, line):
        if line.startswith(MESH_MARKER):
            object_id = mesh_id(line)
            if object_id == NONMESH:
                self.leave_object()
            else:
                self.enter_object(object_id)
        elif line.startswith(TIME_ELAPSED_MARKER):
            self.last_time_elapsed = line

    def process_line(self, line):
        output = [f"{line}\n"]

        if line.startswith(MESH_MARKER):
            object_id = mesh_id(line)
            if object_id == NONMESH:
                self.close_object(output)
            else:
                self.open_object(object_id, output)

        if self.last_time_elapsed is not None and line == self.last_time_elapsed:
            self.close_object(output)

        return output
