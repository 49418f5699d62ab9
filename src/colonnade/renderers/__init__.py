"""Colonnade renderers.

Renderers convert typed tree nodes into output formats.

Available Renderers:
- MarkdownRenderer: Renders a tree back to Markdown with directives

Thread Safety:
Rendering state is local to each render() call.
Safe for concurrent use from multiple threads.

"""

from colonnade.renderers.markdown import MarkdownRenderer, to_markdown

__all__ = ["MarkdownRenderer", "to_markdown"]
