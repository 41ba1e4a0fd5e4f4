import io

import pytest

from gcode_cancellation.layers import LayerFilter


def square(cx, cy, side):
    half = side / 2.0
    corners = [
        (cx + half, cy - half),
        (cx + half, cy + half),
        (cx - half, cy + half),
        (cx - half, cy - half),
    ]
    lines = [f"G0 X{cx - half:.3f} Y{cy - half:.3f} F9000"]
    lines += [f"G1 X{x:.3f} Y{y:.3f} E0.5" for x, y in corners]
    return lines


def center_of(index):
    return 30.0 + 50.0 * index, 50.0


def m486_gcode(objects=4, layers=25, side=lambda layer: 10.0):
    lines = ["; sample G-code with M486 labels", "; layer_height = 0.2", ""]
    lines += [f"M486 T{objects}", "G28", "M83"]
    for layer in range(layers):
        lines.append(";LAYER_CHANGE")
        lines.append(f"G1 Z{0.2 * (layer + 1):.2f} F3000")
        for index in range(objects):
            lines.append(f"M486 S{index}")
            lines += square(*center_of(index), side(layer))
        lines.append("M486 S-1")
    lines += ["G1 X0 Y200 F6000", "M84"]
    return "\n".join(lines) + "\n"


def cura_gcode(names=("cube.stl", "cylinder.stl", "cube.stl(1)"), layers=25,
               trailing_nonmesh=True):
    lines = [
        ";FLAVOR:Marlin",
        ";TIME:1234",
        ";Filament used: 1.2m",
        ";Generated with Cura_SteamEngine 5.2.1",
        "M140 S60",
        "M105",
        "G28 ;Home",
        f";LAYER_COUNT:{layers}",
    ]
    for layer in range(layers):
        lines.append(f";LAYER:{layer}")
        for index, name in enumerate(names):
            lines.append(f";MESH:{name}")
            lines.append(";TYPE:WALL-OUTER")
            lines += square(*center_of(index), 10.0)
        if trailing_nonmesh or layer < layers - 1:
            lines.append(";MESH:NONMESH")
            lines.append(f"G0 F9000 X0 Y0 Z{0.2 * (layer + 2):.2f}")
        lines.append(f";TIME_ELAPSED:{10.5 * (layer + 1):.6f}")
    lines += ["G91", "G1 E-2 F2700", "M107", ";End of Gcode"]
    return "\n".join(lines) + "\n"


def slic3r_gcode(banner="; generated by PrusaSlicer 2.6.0+linux-x64 on 2023-05-01 at 10:00:00 UTC",
                 labels=("cube id:0 copy 0", "Dé id:1 copy 0"), layers=25):
    lines = [
        banner,
        "",
        "; external perimeters extrusion width = 0.45mm",
        "",
        "M73 P0 R10",
        "M201 X1000 Y1000",
        "G28",
    ]
    for layer in range(layers):
        lines.append(";LAYER_CHANGE")
        lines.append(f";Z:{0.2 * (layer + 1):.2f}")
        lines.append(f"G1 Z{0.2 * (layer + 1):.2f} F720")
        for index, label in enumerate(labels):
            lines.append(f"; printing object {label}")
            lines += square(*center_of(index), 10.0)
            lines.append(f"; stop printing object {label}")
    lines += ["M107", "; filament used [mm] = 123.4"]
    return "\n".join(lines) + "\n"


def ideamaker_gcode(names=("cube.stl", "cylinder.stl"), layers=25):
    lines = [
        ";Sliced by ideaMaker 4.3.3.6560, 2023-05-01 10:00:00",
        ";Dimension:300.000000 300.000000 300.000000 0.400000",
        "",
        "M140 S60",
        "G28",
    ]
    for layer in range(layers):
        lines.append(f";LAYER:{layer}")
        lines.append(f";Z:{0.2 * (layer + 1):.3f}")
        for index, name in enumerate(names):
            lines.append(f";PRINTING: {name}")
            lines.append(f";PRINTING_ID: {index}")
            lines += square(*center_of(index), 10.0)
        if layer < layers - 1:
            lines.append(";PRINTING: ")
            lines.append(";PRINTING_ID: -1")
            lines.append("G0 X0 Y0 F9000")
    lines += [";REMAINING_TIME: 0", "M104 S0", "M84"]
    return "\n".join(lines) + "\n"


def run(processor, text, layers="*"):
    output = processor.process(io.BytesIO(text.encode("utf-8")), LayerFilter.parse(layers))
    return "".join(output).split("\n")


def count(lines, line):
    return sum(1 for candidate in lines if candidate == line)


@pytest.fixture
def samples():
    return {
        "m486": m486_gcode,
        "cura": cura_gcode,
        "slic3r": slic3r_gcode,
        "ideamaker": ideamaker_gcode,
    }


@pytest.fixture
def run_processor():
    return run


@pytest.fixture
def count_lines():
    return count
