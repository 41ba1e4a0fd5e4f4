import os
import shutil
import logging
import tempfile
from pathlib import Path

from .errors import (
    CreateOutputDirectory,
    FilterParserError,
    FlushTempFile,
    InvalidLayerFilter,
    IoError,
    PreprocessError,
    ReadError,
    TempFileError,
    UnknownSlicer,
    WriteError,
)
from .layers import LayerFilter
from .slicers import (
    CuraProcessor,
    IdeaMakerProcessor,
    M486Processor,
    Slic3rProcessor,
    identify_slicer_marker,
    read_lines,
    rewind,
)

ANNOTATED_MARKERS = ("EXCLUDE_OBJECT_DEFINE", "DEFINE_OBJECT")


# -----------------------------------------------------------------------------#
# Stream level processing.
# -----------------------------------------------------------------------------
def process(input_stream, output, layer_filter):
    """Annotate the G-code in ``input_stream`` and write it to ``output``.

    ``input_stream`` must be seekable. ``output`` receives bytes. Files that
    already define objects are copied through unchanged.
    """
    processor = None
    try:
        for line in read_lines(input_stream):
            if line.startswith(ANNOTATED_MARKERS):
                logging.info("GCode already supports cancellation")
                rewind(input_stream)
                try:
                    shutil.copyfileobj(input_stream, output)
                except OSError as e:
                    raise WriteError() from e
                return
            if processor is None:
                processor = identify_slicer_marker(line)
    except OSError as e:
        raise ReadError() from e

    if processor is None:
        logging.error("Could not identify slicer")
        raise UnknownSlicer()

    rewind(input_stream)
    try:
        chunks = processor.process(input_stream, layer_filter)
    except OSError as e:
        raise ReadError() from e
    while True:
        try:
            chunk = next(chunks)
        except StopIteration:
            break
        except OSError as e:
            raise ReadError() from e
        try:
            output.write(chunk.encode("utf-8"))
        except OSError as e:
            raise WriteError() from e


# -----------------------------------------------------------------------------#
# File level processing with a staged output file.
# -----------------------------------------------------------------------------
def parse_layer_filter(layers):
    if isinstance(layers, LayerFilter):
        return layers
    try:
        return LayerFilter.parse(layers)
    except FilterParserError as e:
        raise InvalidLayerFilter(f"Invalid layer filter definition: {e}") from e


def destination_path(src, output_suffix=None, output_dir=None):
    dest_path = Path(src)
    if output_dir is not None:
        dest_path = Path(output_dir) / dest_path.name
    if output_suffix:
        if dest_path.suffix:
            dest_path = dest_path.with_suffix(f".{output_suffix}{dest_path.suffix}")
        else:
            dest_path = dest_path.with_suffix(f".{output_suffix}")
    return dest_path


def preprocess_file(src, layers="*", output_suffix=None, output_dir=None):
    """Process ``src`` and write the result in place or next to it.

    Returns the path that was written.
    """
    layer_filter = parse_layer_filter(layers)
    src = Path(src)
    dest_path = destination_path(src, output_suffix, output_dir)
    logging.debug("Writing %s to %s", src, dest_path)

    if output_dir is not None:
        try:
            dest_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise CreateOutputDirectory() from e

    try:
        staging = tempfile.NamedTemporaryFile(
            mode="wb",
            dir=dest_path.parent,
            prefix=f".{dest_path.name}.",
            suffix=".tmp",
            delete=False,
        )
    except OSError as e:
        raise TempFileError() from e

    try:
        with staging:
            try:
                input_stream = open(src, "rb")
            except OSError as e:
                raise IoError(src) from e
            with input_stream:
                process(input_stream, staging, layer_filter)
            try:
                staging.flush()
                os.fsync(staging.fileno())
            except OSError as e:
                raise FlushTempFile() from e
        try:
            shutil.copymode(src, staging.name)
        except OSError:
            logging.debug("Could not copy permissions of %s", src)
        try:
            os.replace(staging.name, dest_path)
        except OSError as e:
            raise IoError(dest_path) from e
    except BaseException:
        try:
            os.remove(staging.name)
        except FileNotFoundError:
            pass
        raise

    return dest_path


# -----------------------------------------------------------------------------#
# Single slicer entry points for callers that already know the slicer.
# -----------------------------------------------------------------------------
def _run(processor, infile, layer_filter):
    return processor.process(infile, parse_layer_filter(layer_filter))


def preprocess_slicer(infile, layer_filter="*"):
    return _run(Slic3rProcessor(), infile, layer_filter)


def preprocess_cura(infile, layer_filter="*"):
    return _run(CuraProcessor(), infile, layer_filter)


def preprocess_ideamaker(infile, layer_filter="*"):
    return _run(IdeaMakerProcessor(), infile, layer_filter)


def preprocess_m486(infile, layer_filter="*"):
    return _run(M486Processor(), infile, layer_filter)


__all__ = [
    "PreprocessError",
    "destination_path",
    "parse_layer_filter",
    "preprocess_cura",
    "preprocess_file",
    "preprocess_ideamaker",
    "preprocess_m486",
    "preprocess_slicer",
    "process",
]
