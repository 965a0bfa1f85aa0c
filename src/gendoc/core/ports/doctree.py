from collections.abc import Sequence
from typing import Protocol


class DocumentationTree(Protocol):
    def attach_comment(self, name_chain: Sequence[str], comment: str) -> None: ...

    def render(self) -> str: ...
