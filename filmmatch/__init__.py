"""FilmMatch backend: DB models, services, REST API.

The package serves a swipe-style movie discovery feed, persists
likes/dislikes/superlikes, ratings and preferences, and ships a small
HTTP client and terminal swipe CLI.
"""
