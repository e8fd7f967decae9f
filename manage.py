#!/usr/bin/env python
"""
Django's command-line utility for administrative tasks.

Mini Trello - collaborative task boards
"""

import os
import sys


def main():
    """Run administrative tasks."""

    # Development settings by default
    os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings.development')

    try:
        from django.core.management import call_command, execute_from_command_line
    except ImportError as exc:
        raise ImportError(
            "Couldn't import Django. Are you sure it's installed and "
            "available on your PYTHONPATH environment variable? Did you "
            "forget to activate a virtual environment?"
        ) from exc

    # Project shortcuts
    if len(sys.argv) > 1 and sys.argv[1] == 'setup':
        import django
        django.setup()

        print("🚀 Setting up Mini Trello...")

        print("📊 Applying migrations...")
        call_command('migrate', interactive=False)

        print("🌱 Seeding demo data...")
        call_command('seed_demo')

        print("✅ Setup finished!")
        return

    execute_from_command_line(sys.argv)


if __name__ == '__main__':
    main()
