from .locate import fuzzy_search, locate_block, search_window
from .similarity import bag_distance, levenshtein_distance, similarity

__all__ = [
    "fuzzy_search",
    "locate_block",
    "search_window",
    "bag_distance",
    "levenshtein_distance",
    "similarity",
]
