# apps/__init__.py

"""
Mini Trello - Django applications

This package contains the project applications:
- core: models, authentication, permissions and invitations
- board: JSON API for boards, cards and tasks, websockets
"""

__version__ = '0.1.0'
