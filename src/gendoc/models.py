from pydantic import BaseModel, Field

# Comments of this length or shorter are treated as empty.
TRIVIAL_COMMENT_LENGTH = 1


def is_significant(comment: str) -> bool:
    return len(comment) > TRIVIAL_COMMENT_LENGTH


class CommentRecord(BaseModel):
    file_name: str
    path: list[int]
    leading: str = ""
    detached: list[str] = Field(default_factory=list)

    @property
    def has_leading(self) -> bool:
        return is_significant(self.leading)


class ResolvedComment(BaseModel):
    name_chain: list[str]
    comment: str
    path: list[int]

    @property
    def qualified_name(self) -> str:
        return ".".join(name for name in self.name_chain[1:] if name)
