"""Export custom instructions from the workspace document to markdown files."""
import logging
import re
from pathlib import Path
from typing import Set

from ai_instructions_sync.config import INSTRUCTION_FILE_SUFFIX
from ai_instructions_sync.exceptions import DocumentNotFoundError, InstructionsWriteError
from ai_instructions_sync.models.schema import ExportResult, InstructionEntry
from ai_instructions_sync.storage.workspace_document import WorkspaceDocument

logger = logging.getLogger(__name__)

_UNSAFE_FILENAME_CHARS = re.compile(r"[^a-zA-Z0-9-]")

def instruction_filename(instruction_id: str) -> str:
    """Derive the markdown file name for an instruction id."""
    return _UNSAFE_FILENAME_CHARS.sub("_", instruction_id) + INSTRUCTION_FILE_SUFFIX

def render_instruction_file(entry: InstructionEntry) -> str:
    """Render an entry as a markdown file with the id as its heading."""
    return f"# {entry.instruction_id}\n\n{entry.content}"

class InstructionExporter:
    """Export instruction entries from workspace.xml to one file per entry."""

    def _unique_filename(self, instruction_id: str, taken: Set[str]) -> str:
        """Pick a file name not yet used in this export run.

        Distinct ids can sanitize to the same name (``a/b`` and ``a:b``), so
        later ones get a numeric suffix instead of overwriting the first.
        """
        filename = instruction_filename(instruction_id)
        if filename not in taken:
            return filename

        stem = filename[:-len(INSTRUCTION_FILE_SUFFIX)]
        counter = 2
        while f"{stem}_{counter}{INSTRUCTION_FILE_SUFFIX}" in taken:
            counter += 1
        renamed = f"{stem}_{counter}{INSTRUCTION_FILE_SUFFIX}"
        logger.warning(f"File name {filename} already used, exporting {instruction_id} as {renamed}")
        return renamed

    def export(self, document_path: Path, output_dir: Path) -> ExportResult:
        """Write every instruction in the document to output_dir."""
        document = WorkspaceDocument(document_path)
        if not document.exists():
            raise DocumentNotFoundError(f"Workspace document {document_path} does not exist", document_path)

        # Ensure export directory exists
        try:
            output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise InstructionsWriteError(f"Could not create directory {output_dir}: {e}", output_dir) from e

        entries = document.load().entries()
        result = ExportResult()
        if not entries:
            logger.info(f"No instructions found in {document_path}")
            return result

        taken: Set[str] = set()
        for entry in entries:
            filename = self._unique_filename(entry.instruction_id, taken)
            file_path = output_dir / filename

            try:
                with open(file_path, "w", encoding="utf-8") as f:
                    f.write(render_instruction_file(entry))
            except OSError as e:
                raise InstructionsWriteError(f"Could not write {file_path}: {e}", file_path) from e

            taken.add(filename)
            result.written_files.append(filename)
            logger.info(f"Exported instruction {entry.instruction_id} to {file_path}")

        return result
