"""
Sycamore church platform API.

Devotional engagement for the companion mobile app: reading streaks,
progress, achievements and likes.
"""

__version__ = "1.0.0"
