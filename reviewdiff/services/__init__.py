"""
Services: file input and settings.
"""
