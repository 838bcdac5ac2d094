from .core import find_near_matches, replace_text
from .replacers import Replacer, default_replacers

__all__ = ["replace_text", "find_near_matches", "Replacer", "default_replacers"]
