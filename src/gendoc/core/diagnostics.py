import logging
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

_INDENT = "    "


@dataclass(frozen=True)
class DiagnosticEntry:
    level: int
    depth: int
    message: str

    def format(self) -> str:
        return f"{_INDENT * self.depth}{self.message}"


@dataclass
class Diagnostics:
    """Collects depth-indented messages produced while walking schema trees.

    Each entry is mirrored to the module logger, so the collector can be
    rendered as a standalone artifact or ignored in favour of regular logging.
    """

    entries: list[DiagnosticEntry] = field(default_factory=list)

    def add(self, level: int, depth: int, message: str, *args: object) -> None:
        text = message % args if args else message
        self.entries.append(DiagnosticEntry(level=level, depth=depth, message=text))
        logger.log(level, "%s%s", _INDENT * depth, text)

    def debug(self, depth: int, message: str, *args: object) -> None:
        self.add(logging.DEBUG, depth, message, *args)

    def info(self, depth: int, message: str, *args: object) -> None:
        self.add(logging.INFO, depth, message, *args)

    def warning(self, depth: int, message: str, *args: object) -> None:
        self.add(logging.WARNING, depth, message, *args)

    def warnings(self) -> list[DiagnosticEntry]:
        return [entry for entry in self.entries if entry.level >= logging.WARNING]

    def render(self) -> str:
        return "".join(f"{entry.format()}\n" for entry in self.entries)
