# apps/core/__init__.py

"""
Core - main application of Mini Trello

Contains:
- Models (User, Board, Card, Task, Invitation) and their membership rows
- Permission resolver and API decorators
- Email-code authentication and invitation services
- JSON API error middleware
"""
