"""Per-file errors raised by the extraction pipeline."""


class ExtractError(Exception):
    """Base class for failures while extracting matches from one file."""

    kind = "extract"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class UnsupportedFormat(ExtractError):
    """No subtitle format could be determined for the file."""

    kind = "format"

    def __init__(self, message: str = "invalid file format") -> None:
        super().__init__(message)


class MalformedContent(ExtractError):
    """The content does not follow the grammar of its detected format."""

    kind = "parse"


class InvalidPattern(ExtractError):
    """The search pattern could not be compiled."""

    kind = "regex"
