#!/usr/bin/env python3
"""
Management script for maintenance commands
Usage: python manage.py <command> [args]
"""
import sys
import importlib
from pathlib import Path

COMMANDS_DIR = Path(__file__).parent / "management" / "commands"


def list_commands():
    print("Usage: python manage.py <command> [args]")
    print("Available commands:")
    for file in sorted(COMMANDS_DIR.glob("*.py")):
        if file.name == "__init__.py":
            continue
        module = importlib.import_module(f"management.commands.{file.stem}")
        summary = (module.run.__doc__ or "").strip().splitlines()
        print(f"  {file.stem:<20} {summary[0] if summary else ''}")


def main():
    if len(sys.argv) < 2:
        list_commands()
        return

    command = sys.argv[1]

    try:
        module = importlib.import_module(f"management.commands.{command}")
    except ImportError:
        print(f"Command '{command}' not found")
        return

    if hasattr(module, 'run'):
        module.run()
    else:
        print(f"Command '{command}' does not have a run() function")

if __name__ == "__main__":
    main()
