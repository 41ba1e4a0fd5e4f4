# -----------------------------------------------------------------------------#
# Layer filter parsing errors.
# -----------------------------------------------------------------------------
class FilterParserError(ValueError):
    template = "The layer filter value {} could not be parsed"

    def __init__(self, value):
        self.value = value
        super().__init__(self.template.format(value))


class StartValueError(FilterParserError):
    template = "The start value {} could not be parsed"


class StopValueError(FilterParserError):
    template = "The stop value {} could not be parsed"


class StepSizeError(FilterParserError):
    template = "The given step size of {} could not be parsed"


# -----------------------------------------------------------------------------#
# File level processing errors.
# -----------------------------------------------------------------------------
class PreprocessError(Exception):
    message = "Something bad happened :("

    def __init__(self, message=None):
        super().__init__(message or self.message)


class IoError(PreprocessError):
    def __init__(self, path):
        self.path = path
        super().__init__(f"Error reading/writing file {path}")


class RewindError(PreprocessError):
    message = "Error seeking to beginning of file"


class ReadError(PreprocessError):
    message = "Error reading lines from input file"


class WriteError(PreprocessError):
    message = "Error writing to output file"


class InvalidLayerFilter(PreprocessError):
    message = "Invalid layer filter definition"


class CreateOutputDirectory(PreprocessError):
    message = "Error creating output directory"


class TempFileError(PreprocessError):
    message = "Error creating temporary working file"


class FlushTempFile(PreprocessError):
    message = "Error writing changes to temporary working file"


class UnknownSlicer(PreprocessError):
    message = "The slicer that created this G-Code file could not be identified"
