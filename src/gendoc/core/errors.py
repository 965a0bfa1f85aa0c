from collections.abc import Sequence


class GenDocError(Exception):
    """Base class for every error raised by gendoc."""


class InputError(GenDocError):
    """The request could not be read or decoded."""


class ConfigError(GenDocError):
    """The plugin parameter or environment holds an invalid setting."""


class ResolutionError(GenDocError):
    """A coordinate path could not be resolved against a schema tree.

    ``path`` is the remaining suffix where the walk failed until the comment
    collector calls ``locate`` with the source location it was resolving.
    """

    def __init__(self, message: str, path: Sequence[int] = ()) -> None:
        super().__init__(message)
        self.path = list(path)
        self.file_name = ""

    def locate(self, file_name: str, path: Sequence[int]) -> None:
        self.file_name = file_name
        self.path = list(path)

    @property
    def location(self) -> str:
        if self.file_name:
            return f"{self.file_name} at path {self.path}"
        return f"path {self.path}"


class StructuralMismatchError(ResolutionError):
    """The schema tree does not have the shape the path expects."""


class MalformedCoordinateError(ResolutionError):
    """The path ends on a field number instead of an element."""


class RecoverableResolutionError(ResolutionError):
    """A single comment record is unusable but the run may continue."""


class StaleCoordinateError(RecoverableResolutionError):
    """A repeated-field index points past the end of the collection."""

    def __init__(self, message: str, path: Sequence[int] = (), label: str = "", length: int = 0) -> None:
        super().__init__(message, path)
        self.label = label
        self.length = length
