"""
Internal errors raised while generating a social card.

They never reach the client as-is: the OG route converts every one of them into
the same generic 500 response. Keeping them apart only makes the logs useful.
"""


class CardGenerationError(Exception):
    """Base class for every failure happening while building a card image."""


class FontUnavailableError(CardGenerationError):
    """The font asset could not be read from disk or downloaded."""


class CardRenderError(CardGenerationError):
    """Pillow failed to compose or encode the card."""
