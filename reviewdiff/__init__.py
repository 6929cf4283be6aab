"""
reviewdiff - word diffs and conflict views for code review.
"""

__version__ = "1.0.0"
