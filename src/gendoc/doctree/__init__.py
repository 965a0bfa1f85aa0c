from gendoc.doctree.node import DocNode
from gendoc.doctree.render import clean_comment, render, render_markdown, render_tree
from gendoc.doctree.tree import DocTree, create_tree, file_node

__all__ = [
    "DocNode",
    "DocTree",
    "clean_comment",
    "create_tree",
    "file_node",
    "render",
    "render_markdown",
    "render_tree",
]
