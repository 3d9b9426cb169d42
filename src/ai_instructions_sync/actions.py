"""User-facing export and import actions for a project."""
import logging
import threading
import weakref
from pathlib import Path
from typing import Optional, Union

from ai_instructions_sync.config import SyncConfig, config
from ai_instructions_sync.exceptions import (
    DocumentNotFoundError, InstructionsDirectoryNotFoundError, SyncError
)
from ai_instructions_sync.export_import.exporter import InstructionExporter
from ai_instructions_sync.export_import.importer import InstructionImporter
from ai_instructions_sync.host import Host
from ai_instructions_sync.models.schema import ImportResult

logger = logging.getLogger(__name__)

# Entries vanish once no running action references the lock
_project_locks: "weakref.WeakValueDictionary[Path, threading.Lock]" = weakref.WeakValueDictionary()
_project_locks_guard = threading.Lock()

def _project_lock(project_root: Path) -> threading.Lock:
    """Get the lock that serializes sync runs for one project."""
    key = project_root.resolve()
    with _project_locks_guard:
        lock = _project_locks.get(key)
        if lock is None:
            lock = _project_locks[key] = threading.Lock()
        return lock

def _settings_for(project_root: Union[str, Path], settings: Optional[SyncConfig]) -> SyncConfig:
    return (settings or config).for_project(project_root)

def export_instructions(project_root: Union[str, Path], host: Host,
                        settings: Optional[SyncConfig] = None) -> str:
    """Export the project's instructions to its instructions directory and report the outcome."""
    settings = _settings_for(project_root, settings)
    document_path = settings.get_workspace_path()
    output_dir = settings.get_instructions_path()

    error = False
    with _project_lock(settings.project_root):
        try:
            result = InstructionExporter().export(document_path, output_dir)
        except DocumentNotFoundError:
            message = f"{document_path.name} not found in the project."
            error = True
        except SyncError as e:
            logger.error(f"Export failed: {e}")
            message = f"Error exporting instructions: {e}"
            error = True
        else:
            if result.is_empty:
                message = "No instructions found to export."
            else:
                lines = [
                    f"Successfully exported {len(result.written_files)} files "
                    f"to {output_dir.name} directory:"
                ]
                lines.extend(f"Exported: {filename}" for filename in result.written_files)
                message = "\n".join(lines)

    host.prompt_result(message, error=error)
    return message

def _run_import(settings: SyncConfig, host: Host) -> ImportResult:
    importer = InstructionImporter(host)
    with _project_lock(settings.project_root):
        return importer.import_directory(
            settings.get_workspace_path(), settings.get_instructions_path()
        )

def import_instructions(project_root: Union[str, Path], host: Host,
                        settings: Optional[SyncConfig] = None) -> str:
    """Merge the project's instruction files into its workspace document and report the outcome."""
    settings = _settings_for(project_root, settings)
    document_name = settings.get_workspace_path().name
    dir_name = settings.get_instructions_path().name

    error = False
    try:
        result = _run_import(settings, host)
    except DocumentNotFoundError:
        message = f"{document_name} not found in the project."
        error = True
    except InstructionsDirectoryNotFoundError:
        message = f"No {dir_name} directory found. Nothing to import."
    except SyncError as e:
        logger.error(f"Import failed: {e}")
        message = f"Error importing instructions: {e}"
        error = True
    else:
        if result.is_empty:
            message = f"No instruction files found in {dir_name} directory."
        else:
            message = (
                f"Successfully imported {result.merged_count} instruction files "
                f"into {document_name}."
            )

    host.prompt_result(message, error=error)
    return message

def import_on_project_open(project_root: Union[str, Path], host: Host,
                           settings: Optional[SyncConfig] = None) -> Optional[ImportResult]:
    """Import silently when a project opens; failures are only logged."""
    settings = _settings_for(project_root, settings)
    try:
        result = _run_import(settings, host)
    except InstructionsDirectoryNotFoundError:
        logger.debug(f"No instructions directory in {settings.project_root}, skipping import")
        return None
    except SyncError as e:
        logger.warning(f"Import on project open failed for {settings.project_root}: {e}")
        return None

    logger.info(f"Imported {result.merged_count} instructions on opening {settings.project_root}")
    return result

def register_project_open_import(host: Host, settings: Optional[SyncConfig] = None) -> None:
    """Run import_on_project_open whenever the host opens a project."""
    host.on_project_opened(lambda project_root: import_on_project_open(project_root, host, settings))
