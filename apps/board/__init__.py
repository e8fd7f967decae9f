# apps/board/__init__.py

"""
Board - API and realtime layer of Mini Trello

Features:
- JSON API for boards, cards, tasks and invitations
- Websocket rooms per board (card-updated, task-moved)
"""
