"""Line-window lexer for Markdown with directives.

The lexer turns source text into a flat, balanced stream of enter/exit
events. It recognizes paragraphs, ATX headings, block quotes, character
escapes and references, and the three directive forms.

Architecture:
lexer/
├── __init__.py          # Re-exports Lexer
├── core.py              # Lexer class (mixin composition, lines, tokens)
├── classifiers/
│   └── directive.py     # Names, labels and attribute lists
└── scanners/
    ├── block.py         # Blocks, block quotes, leaf and container directives
    └── inline.py        # Phrasing: data, escapes, references, text directives

Usage:
    >>> from colonnade.lexer import Lexer
    >>> [token.type.name for kind, token in Lexer(":a").tokenize() if kind.name == "ENTER"]
    ['PARAGRAPH', 'DIRECTIVE_TEXT', 'DIRECTIVE_TEXT_SEQUENCE', 'DIRECTIVE_TEXT_NAME']

"""

from colonnade.lexer.core import Lexer
from colonnade.lexer.lines import Line, Run

__all__ = ["Lexer", "Line", "Run"]
