"""Exceptions raised by the fetch / normalize / combine pipeline."""

from typing import Optional


class FeedError(Exception):
    """Base class for every pipeline error."""


class MalformedPostError(FeedError):
    """A raw post lacks a required field, or the field cannot be parsed."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class FeedUnavailableError(FeedError):
    """A subscription's feed could not be retrieved or decoded."""

    def __init__(self, message: str, url: str = "", status: Optional[int] = None):
        super().__init__(message)
        self.url = url
        self.status = status


class UnknownProviderError(FeedError):
    def __init__(self, post_type: str):
        super().__init__(f"No provider registered for subscription type '{post_type}'")
        self.post_type = post_type
