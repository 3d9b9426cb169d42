"""Import custom instructions from markdown files into the workspace document."""
import logging
import re
from pathlib import Path
from typing import Dict, List, Optional

from pydantic import ValidationError

from ai_instructions_sync.config import INSTRUCTION_FILE_SUFFIX
from ai_instructions_sync.exceptions import (
    DocumentNotFoundError, InstructionsDirectoryNotFoundError, SyncError
)
from ai_instructions_sync.host import Host
from ai_instructions_sync.models.schema import ImportResult, InstructionEntry
from ai_instructions_sync.storage.workspace_document import WorkspaceDocument

logger = logging.getLogger(__name__)

# "# <id>" on the first line
_HEADER = re.compile(r"\A#[ \t]+(\S+)")

def parse_instruction_text(text: str) -> Optional[InstructionEntry]:
    """Split file text into its id heading and content, or None if there is no heading."""
    match = _HEADER.match(text)
    if not match:
        return None

    try:
        return InstructionEntry(
            instruction_id=match.group(1),
            content=text[match.end():].strip()
        )
    except ValidationError:
        return None

def parse_instruction_file(file_path: Path) -> Optional[InstructionEntry]:
    """Parse an instruction file, returning None for files that are not instructions."""
    try:
        with open(file_path, "r", encoding="utf-8") as f:
            text = f.read()
    except UnicodeDecodeError:
        logger.debug(f"Skipping {file_path}: not UTF-8 text")
        return None

    entry = parse_instruction_text(text)
    if entry is None:
        logger.debug(f"Skipping {file_path}: no '# <id>' header line or text XML cannot hold")
    return entry

class InstructionImporter:
    """Merge instruction files from a directory into workspace.xml."""

    def __init__(self, host: Optional[Host] = None):
        """Initialize importer; host is told when the document changes."""
        self.host = host

    def list_instruction_files(self, import_dir: Path) -> List[Path]:
        """Get candidate instruction files, non-recursively, sorted by name."""
        return sorted(
            p for p in import_dir.iterdir()
            if p.is_file() and p.name.endswith(INSTRUCTION_FILE_SUFFIX)
        )

    def read_instructions(self, import_dir: Path, result: ImportResult) -> Dict[str, str]:
        """Read all instruction files into an id -> content mapping."""
        instructions: Dict[str, str] = {}
        try:
            files = self.list_instruction_files(import_dir)
        except OSError as e:
            raise SyncError(f"Could not list {import_dir}: {e}", import_dir) from e

        for file_path in files:
            try:
                entry = parse_instruction_file(file_path)
            except OSError as e:
                raise SyncError(f"Could not read {file_path}: {e}", file_path) from e
            if entry is None:
                result.skipped_files.append(file_path.name)
                continue

            if entry.instruction_id in instructions:
                logger.warning(f"Instruction {entry.instruction_id} defined twice, using {file_path.name}")
            instructions[entry.instruction_id] = entry.content

        return instructions

    def import_directory(self, document_path: Path, import_dir: Path) -> ImportResult:
        """Merge every instruction file in import_dir into the document."""
        document = WorkspaceDocument(document_path)
        if not document.exists():
            raise DocumentNotFoundError(f"Workspace document {document_path} does not exist", document_path)
        if not import_dir.is_dir():
            raise InstructionsDirectoryNotFoundError(
                f"Import directory {import_dir} does not exist", import_dir
            )

        result = ImportResult()
        instructions = self.read_instructions(import_dir, result)
        if not instructions:
            logger.info(f"No instruction files found in {import_dir}")
            return result

        document.load()
        document.ensure_section()

        for instruction_id, content in instructions.items():
            result.record(instruction_id, document.upsert(instruction_id, content))

        # Nothing counts as merged until the document is on disk
        document.save()

        if self.host is not None:
            self.host.notify_changed(document_path)

        logger.info(
            f"Imported {result.merged_count} instructions into {document_path} "
            f"({len(result.created)} created, {len(result.updated)} updated)"
        )
        return result
