"""NodeRenderer protocol: stable interface for tree renderers.

Any renderer that implements ``render(node) -> str`` conforms to this protocol.
The built-in ``MarkdownRenderer`` is the reference implementation.

Example:
    from colonnade.renderers.protocol import NodeRenderer

    def normalize(renderer: NodeRenderer, doc: Document) -> str:
        return renderer.render(doc)

"""

from typing import Protocol

from colonnade.nodes import Node


class NodeRenderer(Protocol):
    """Protocol for tree renderers.

    Implementations accept any node (usually a Document) and return text.

    """

    def render(self, node: Node) -> str:
        """Render a tree to a string.

        Args:
            node: The node to render.

        Returns:
            Rendered string output.

        """
        ...
