#!/usr/bin/env python3
"""
Error kinds raised while extracting acpu_level tables.
Every failure is fatal; main() reports it once and exits non-zero.
"""


def _clip(snippet, width=60):
    """Shorten a source snippet for one-line error messages"""
    if snippet is None:
        return ''
    snippet = ' '.join(str(snippet).split())
    if len(snippet) > width:
        return snippet[:width - 3] + '...'
    return snippet


class OppExtractError(Exception):
    """Base class for all extraction failures."""
    kind = 'OppExtractError'

    def __init__(self, message, snippet=None):
        self.snippet = snippet
        if snippet:
            message = f"{message} (near '{_clip(snippet)}')"
        super().__init__(message)

    def describe(self) -> str:
        return f"{self.kind}: {self}"


class MissingField(OppExtractError):
    kind = 'MissingField'

    def __init__(self, field: str, index: int, snippet=None):
        self.field = field
        self.index = index
        super().__init__(f"row is missing '{field}' (token {index})", snippet)


class MalformedDescriptor(OppExtractError):
    kind = 'MalformedDescriptor'

    def __init__(self, token: str, snippet=None):
        self.token = token
        super().__init__(f"expected L2(<level>) descriptor, got '{token}'", snippet)


class UnknownTier(OppExtractError):
    kind = 'UnknownTier'

    def __init__(self, designator, layout_name: str):
        self.designator = designator
        self.layout_name = layout_name
        super().__init__(f"tier '{designator}' is not known to the {layout_name} layout")


class StructuralMismatch(OppExtractError):
    kind = 'StructuralMismatch'

    def __init__(self, detail: str, snippet=None):
        self.detail = detail
        super().__init__(detail, snippet)


class NumericParseError(OppExtractError):
    kind = 'NumericParseError'

    def __init__(self, field: str, token: str, snippet=None):
        self.field = field
        self.token = token
        super().__init__(f"'{field}' is not a number: '{token}'", snippet)


class SanityLimitExceeded(OppExtractError):
    kind = 'SanityLimitExceeded'

    def __init__(self, count: int, limit: int):
        self.count = count
        self.limit = limit
        super().__init__(
            f"{count} rows exceed the limit of {limit}; "
            "if the table really is this large, raise the layout's row_limit")
