"""
Syntax set: language grammars for fenced code blocks

Grammars are Pygments lexer classes. A fence's language token is looked
up first as a lexer alias ("python", "rs", "sh") and then as a file
extension ("py", "rs", "toml"). Unknown tokens resolve to None so the
block degrades to plain text.
"""

from functools import lru_cache
from typing import Optional, Type

from pygments.lexer import Lexer
from pygments.lexers import find_lexer_class_by_name, find_lexer_class_for_filename
from pygments.util import ClassNotFound


@lru_cache(maxsize=256)
def _lexerClass_find(token: str) -> Optional[Type[Lexer]]:
    try:
        return find_lexer_class_by_name(token)
    except ClassNotFound:
        pass
    return find_lexer_class_for_filename(f"snippet.{token}")


class SyntaxSet:
    """Lookup of grammars by short language token"""

    def syntax_findByToken(self, token: str) -> Optional[Type[Lexer]]:
        """
        Find the grammar for a language token.

        Args:
            token: Language annotation of a fenced code block

        Returns:
            Pygments lexer class, or None when the token is empty or unknown
        """
        token = token.strip().lower()
        if not token:
            return None
        return _lexerClass_find(token)
