"""Derive environment key suffixes from field identifiers.

Purpose
-------
Turn a field identifier such as ``AutoSplitVar`` or ``max_conns`` into the
upper-case, underscore-delimited suffix the key resolver prefixes. The module
is pure: no I/O and no dependency on the rest of the package.

Segmentation rules (``split_words`` enabled), applied left to right:

1. a lowercase letter followed by an uppercase letter starts a new segment;
2. a run of uppercase letters followed by a lowercase letter hands its last
   uppercase letter to the next segment (``HTTPServer`` -> ``HTTP``, ``Server``);
3. digits append to the preceding segment and never open one; an uppercase
   letter directly after a digit opens a new segment (``S3Bucket``);
4. underscores already present are kept as boundaries, empty segments dropped.
"""

from __future__ import annotations


def derive_suffix(name: str, split_words: bool = False) -> str:
    """Return the key suffix for *name*.

    Examples
    --------
    >>> derive_suffix('AutoSplitVar')
    'AUTOSPLITVAR'
    >>> derive_suffix('AutoSplitVar', split_words=True)
    'AUTO_SPLIT_VAR'
    >>> derive_suffix('HTTPServer', split_words=True)
    'HTTP_SERVER'
    """

    if not split_words:
        return name.upper()
    return "_".join(split_words_of(name)).upper()


def split_words_of(name: str) -> list[str]:
    """Segment *name* into words, preserving the original casing.

    Examples
    --------
    >>> split_words_of('MultiWordVarWithAutoSplit')
    ['Multi', 'Word', 'Var', 'With', 'Auto', 'Split']
    >>> split_words_of('HTTP2Server')
    ['HTTP2', 'Server']
    >>> split_words_of('max_HTTPConns')
    ['max', 'HTTP', 'Conns']
    """

    words: list[str] = []
    for part in name.split("_"):
        words.extend(_segment(part))
    return words


def _segment(part: str) -> list[str]:
    segments: list[str] = []
    current = ""
    for index, char in enumerate(part):
        if current and char.isupper():
            previous = current[-1]
            following = part[index + 1] if index + 1 < len(part) else ""
            if previous.islower() or previous.isdigit():
                segments.append(current)
                current = ""
            elif previous.isupper() and following.islower():
                segments.append(current)
                current = ""
        current += char
    if current:
        segments.append(current)
    return segments
