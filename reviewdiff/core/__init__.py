"""
Core engine: word diffs and conflict structuring.
"""
