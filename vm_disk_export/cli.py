#!/usr/bin/env python3
"""
Command-line entry point for VM Disk Export.
"""

from dotenv import load_dotenv

from vm_disk_export.commands.export import export_os_disk


def main() -> None:
    # Always load .env if present
    load_dotenv()
    export_os_disk()


if __name__ == "__main__":
    main()
