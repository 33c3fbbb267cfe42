"""
Keyword analytics helpers.

- genre.py: keyword to Genre classification
"""

from trivia_service.analytics.genre import GENRE_HINTS, classify_genre, list_genres

__all__ = [
    "GENRE_HINTS",
    "classify_genre",
    "list_genres",
]
