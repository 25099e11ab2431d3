"""
NoteSync Backend - Collaborative Note Editing Service

Shared notes with per-note roles, live presence and an activity trail.
"""

__version__ = "1.0.0"
