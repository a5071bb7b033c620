#!/usr/bin/env python
"""
Django's command-line utility for administrative tasks.

Task Board - collaborative task boards
"""

import os
import sys


def main():
    """Run administrative tasks."""

    # Development settings by default
    os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings.development')

    try:
        from django.core.management import execute_from_command_line
    except ImportError as exc:
        raise ImportError(
            "Couldn't import Django. Are you sure it's installed and "
            "available on your PYTHONPATH environment variable? Did you "
            "forget to activate a virtual environment?"
        ) from exc

    # Task Board shortcuts
    if len(sys.argv) > 1:
        command = sys.argv[1]

        # First run: migrations, static files and demo data
        if command == 'setup':
            print("🚀 Setting up Task Board...")

            print("📊 Applying migrations...")
            if os.system(f'{sys.executable} manage.py migrate') != 0:
                print("❌ Migrations failed")
                return

            print("📁 Collecting static files...")
            os.system(f'{sys.executable} manage.py collectstatic --noinput')

            print("🌱 Seeding demo data...")
            os.system(f'{sys.executable} manage.py seed')

            print("✅ Setup done!")
            return

        elif command == 'backup':
            print("💾 Creating database backup...")
            from datetime import datetime
            timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
            backup_file = f"backup_taskboard_{timestamp}.json"
            os.system(f'{sys.executable} manage.py dumpdata core --indent 2 > {backup_file}')
            print(f"✅ Backup created: {backup_file}")
            return

    execute_from_command_line(sys.argv)


if __name__ == '__main__':
    main()
