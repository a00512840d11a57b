"""Player valuation."""

from .value import current_worth, value

__all__ = ["current_worth", "value"]
