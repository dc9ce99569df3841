"""Filesafe filename conversion for article notes.

This module converts Instapaper article titles to filenames that are safe on
all file systems. Unlike slug generation, the title stays readable: only the
characters file systems reject are removed.
"""

import re

# \ / : < > ? | * " and C0 control characters
HOSTILE_CHARS = re.compile(r'[\\/:<>?|*"\x00-\x1f]')

MAX_FILENAME_LENGTH = 250


class FilesafeConverter:
    """Converts article titles to note filenames.

    Conversion rules:
    - Path-hostile characters (\\ / : < > ? | * ") and control characters
      are stripped
    - The result is truncated to 250 characters, then trimmed
    - An empty result becomes "Untitled-{article_id}"
    - No extension is added; callers append ".md"

    Examples:
        - "A/B:C?" → "ABC"
        - "  Why: a story  " → "Why a story"
        - "???" (article 42) → "Untitled-42"
    """

    @staticmethod
    def title_to_filename(title: str, article_id: int) -> str:
        """Convert an article title to a filesafe note name.

        Args:
            title: The article title
            article_id: Bookmark ID used for the fallback name

        Returns:
            A non-empty filesafe name without extension

        Examples:
            >>> FilesafeConverter.title_to_filename("A/B:C?", 1)
            'ABC'
            >>> FilesafeConverter.title_to_filename("", 42)
            'Untitled-42'
        """
        name = HOSTILE_CHARS.sub('', title or '')
        name = name[:MAX_FILENAME_LENGTH].strip()
        if not name:
            name = f"Untitled-{article_id}"
        return name
