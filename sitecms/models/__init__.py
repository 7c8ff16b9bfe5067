"""
Models Package

Exports all models for easy importing.
"""

from sitecms.models.post import TITLE_MAX_LENGTH, Post, utcnow

__all__ = ['TITLE_MAX_LENGTH', 'Post', 'utcnow']
