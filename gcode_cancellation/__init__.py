"""Inject Klipper EXCLUDE_OBJECT markers into sliced G-code files."""

__version__ = "0.1.0"

from .errors import (  # noqa: E402
    FilterParserError,
    PreprocessError,
    UnknownSlicer,
)
from .layers import LayerFilter  # noqa: E402
from .preprocess import (  # noqa: E402
    preprocess_cura,
    preprocess_file,
    preprocess_ideamaker,
    preprocess_m486,
    preprocess_slicer,
    process,
)

__all__ = [
    "__version__",
    "FilterParserError",
    "LayerFilter",
    "PreprocessError",
    "UnknownSlicer",
    "preprocess_cura",
    "preprocess_file",
    "preprocess_ideamaker",
    "preprocess_m486",
    "preprocess_slicer",
    "process",
]
