"""Selector grammar errors."""


class InvalidSelectorError(ValueError):
    """Raised when a selector string cannot be parsed."""
