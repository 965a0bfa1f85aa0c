from dataclasses import dataclass, field


@dataclass
class DocNode:
    """A documented schema element: file, message, field, enum, value, service or method."""

    kind: str
    name: str
    signature: str = ""
    number: int | None = None
    comment: str = ""
    children: list["DocNode"] = field(default_factory=list)

    def child(self, name: str) -> "DocNode | None":
        for node in self.children:
            if node.name == name:
                return node
        return None

    def children_of(self, kind: str) -> list["DocNode"]:
        return [node for node in self.children if node.kind == kind]
