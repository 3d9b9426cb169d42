"""Command line entry point for instruction sync."""
import argparse
import logging
import sys
from pathlib import Path

from rich.console import Console

from ai_instructions_sync.actions import (
    export_instructions, import_instructions, register_project_open_import
)
from ai_instructions_sync.config import LOG_LEVELS, config
from ai_instructions_sync.host import ConsoleHost

console = Console()

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Sync AI Assistant custom instructions between workspace.xml and markdown files"
    )
    parser.add_argument(
        "command",
        choices=["export", "import", "open"],
        help="export to files, import from files, or run the silent on-open import"
    )
    parser.add_argument(
        "--project-root",
        type=Path,
        help="Project directory (default: from config)"
    )
    parser.add_argument(
        "--workspace-file",
        type=Path,
        help="Workspace document relative to the project (default: .idea/workspace.xml)"
    )
    parser.add_argument(
        "--instructions-dir",
        type=Path,
        help="Instructions directory relative to the project (default: .ai)"
    )
    parser.add_argument(
        "--log-level",
        choices=LOG_LEVELS,
        default=config.log_level,
        help="Logging level"
    )
    return parser

def main(argv=None) -> int:
    """Main entry point for the sync command."""
    args = build_parser().parse_args(argv)

    # Configure logging
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    updates = {}
    if args.workspace_file:
        updates["workspace_file"] = args.workspace_file
    if args.instructions_dir:
        updates["instructions_dir"] = args.instructions_dir
    settings = config.model_copy(update=updates)
    project_root = args.project_root or settings.project_root

    host = ConsoleHost(console)
    if args.command == "export":
        export_instructions(project_root, host, settings)
    elif args.command == "import":
        import_instructions(project_root, host, settings)
    else:
        register_project_open_import(host, settings)
        host.open_project(project_root)

    return 1 if host.error_count else 0

if __name__ == "__main__":
    sys.exit(main())
