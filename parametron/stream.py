"""
Token stream: a forward-only cursor over the raw argument vector.

The parser walks the stream token by token; parameters pull their own values
from it. Before dispatching a parameter the parser stores the user-facing label
that triggered it (e.g. '-o' or '--output') in `option`, so value errors always
cite what the user actually typed rather than internal identifiers.
"""


def extract_option(token, /):
    """
    return the option part of a token (everything before the first '=').
    """
    return token.partition("=")[0]


def looks_like_option(token, /):
    """
    whether a token is option-shaped: '--name', '-x' or '-xyz'.

    the literal '-' and '--' are not options; they are positional arguments.
    """
    return token.startswith("-") and token not in ("-", "--")


class TokenStream:
    """
    Cursor over argv with one-token lookahead.

    Contract
    - has_next(): whether any token remains.
    - peek(): the next token without consuming it (None when exhausted).
    - next(): consume and return the next token; raises IndexError when exhausted.
    - current: the token most recently returned by next().
    - option: label of the option being resolved (diagnostics only).

    The cursor is never rewound.
    """
    __slots__ = ("_tokens", "_index", "_current", "option")

    def __init__(self, tokens=(), /):
        tokens = tuple(tokens)
        for token in tokens:
            if not isinstance(token, str):
                raise TypeError("TokenStream() argument must be an iterable of strings")
        self._tokens = tokens
        self._index = 0
        self._current = None
        self.option = None

    @property
    def index(self):
        return self._index

    @property
    def current(self):
        return self._current

    def has_next(self):
        return self._index < len(self._tokens)

    def peek(self):
        return self._tokens[self._index] if self.has_next() else None

    def next(self):
        if not self.has_next():
            raise IndexError("token stream is exhausted")
        self._current = self._tokens[self._index]
        self._index += 1
        return self._current

    def __len__(self):
        return len(self._tokens) - self._index

    def __repr__(self):
        return "TokenStream(index=%d, tokens=%r)" % (self._index, self._tokens)


__all__ = (
    "TokenStream",
    "extract_option",
    "looks_like_option",
)
