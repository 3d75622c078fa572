"""Package initializer for `miacasa_site`."""

from .normalize import to_string_list
from .tiers import derive_investment_tier

__all__ = ["derive_investment_tier", "to_string_list"]
