"""
courserate: course & professor ratings with an ordered (AVL) course index.
"""

from courserate.store import AddResult, RatingStore

__all__ = ["AddResult", "RatingStore"]
