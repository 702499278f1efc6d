#!/usr/bin/env python
"""
Command-line entry point for the patient portal backend.

Besides Django's own commands this exposes ``seed_portal`` (demo
hospitals and records) and ``ensure_demo_user``.
"""
import os
import sys


def main() -> None:
    os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'portal.settings')
    try:
        from django.core.management import execute_from_command_line  # type: ignore
    except ImportError as exc:
        raise ImportError(
            "Couldn't import Django. Is it installed in the active virtual environment?"
        ) from exc
    execute_from_command_line(sys.argv)


if __name__ == '__main__':
    main()
