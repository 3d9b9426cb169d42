"""Read and write custom instructions inside the IDE workspace document.

The workspace document is an XML file holding many unrelated IDE settings.
Instructions live in a single component::

    <component name="AIAssistantCustomInstructionsStorage">
      <option name="instructions">
        <map>
          <entry key="<id>">
            <value>
              <AIAssistantStoredInstruction>
                <option name="actionId" value="<id>"/>
                <option name="content" value="<content>"/>
              </AIAssistantStoredInstruction>
            </value>
          </entry>
        </map>
      </option>
    </component>

Everything outside this component is carried through load and save untouched.
"""
import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import List, Optional

from lxml import etree as ET
from pydantic import ValidationError

from ai_instructions_sync.config import (
    ACTION_ID_OPTION, COMPONENT_NAME, CONTENT_OPTION, INSTRUCTIONS_OPTION,
    STORED_INSTRUCTION_TAG,
)
from ai_instructions_sync.exceptions import (
    DocumentNotFoundError, DocumentParseError, DocumentWriteError
)
from ai_instructions_sync.models.schema import InstructionEntry, MergeOutcome

logger = logging.getLogger(__name__)

INDENT = "  "

def _parser() -> ET.XMLParser:
    # Keep comments, processing instructions and CDATA so they survive a save
    return ET.XMLParser(
        remove_comments=False, remove_pis=False, strip_cdata=False,
        resolve_entities=False
    )

def load_document(path: Path) -> ET._ElementTree:
    """Parse the workspace document, keeping comments and processing instructions."""
    if not path.exists():
        raise DocumentNotFoundError(f"Workspace document {path} does not exist", path)

    try:
        return ET.parse(str(path), parser=_parser())
    except ET.ParseError as e:
        raise DocumentParseError(f"Malformed workspace document {path}: {e}", path) from e
    except OSError as e:
        raise DocumentParseError(f"Could not read workspace document {path}: {e}", path) from e

def save_document(tree: ET._ElementTree, path: Path) -> None:
    """Serialize the document and atomically replace the file at path.

    The document is written to a temporary file next to the target, parsed
    back, and moved over the target only once that succeeds. The temporary
    file never outlives this call.
    """
    try:
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{path.name}.", suffix=".tmp", dir=path.parent
        )
    except OSError as e:
        raise DocumentWriteError(f"Could not write workspace document {path}: {e}", path) from e

    tmp_path = Path(tmp_name)
    replaced = False
    try:
        with os.fdopen(fd, "wb") as f:
            tree.write(f, encoding="UTF-8", xml_declaration=True)

        # Never swap in a file the next load would reject
        ET.parse(str(tmp_path), parser=_parser())

        if path.exists():
            shutil.copymode(path, tmp_path)
        os.replace(tmp_path, path)
        replaced = True
    except (OSError, TypeError, ValueError, ET.ParseError) as e:
        raise DocumentWriteError(f"Could not write workspace document {path}: {e}", path) from e
    finally:
        if not replaced:
            tmp_path.unlink(missing_ok=True)

    logger.info(f"Saved workspace document {path}")

def _find_option(parent: ET._Element, name: str) -> Optional[ET._Element]:
    for option in parent.findall("option"):
        if option.get("name") == name:
            return option
    return None

def _find_or_create(parent: ET._Element, tag: str) -> ET._Element:
    child = parent.find(tag)
    if child is None:
        child = ET.SubElement(parent, tag)
    return child

def _set_option(parent: ET._Element, name: str, value: str) -> None:
    option = _find_option(parent, name)
    if option is None:
        option = ET.SubElement(parent, "option", {"name": name})
    option.set("value", value)

def locate_section(root: ET._Element) -> Optional[ET._Element]:
    """Find the top-level instructions component, if the document has one."""
    for component in root.findall("component"):
        if component.get("name") == COMPONENT_NAME:
            return component
    return None

def ensure_section(root: ET._Element) -> ET._Element:
    """Return the instructions component, appending an empty one if missing."""
    section = locate_section(root)
    if section is not None:
        return section

    section = ET.Element("component", {"name": COMPONENT_NAME})
    option = ET.SubElement(section, "option", {"name": INSTRUCTIONS_OPTION})
    ET.SubElement(option, "map")

    # Slot in after the last component with the same indentation
    if len(root):
        last = root[-1]
        section.tail = last.tail
        last.tail = root.text
    root.append(section)

    logger.info(f"Created {COMPONENT_NAME} component")
    return section

def instructions_map(section: ET._Element, create: bool = False) -> Optional[ET._Element]:
    """Find the <map> holding instruction entries, optionally creating it."""
    option = _find_option(section, INSTRUCTIONS_OPTION)
    if option is None:
        if not create:
            return None
        option = ET.SubElement(section, "option", {"name": INSTRUCTIONS_OPTION})

    mapping = option.find("map")
    if mapping is None and create:
        mapping = ET.SubElement(option, "map")
    return mapping

def list_entries(section: ET._Element) -> List[InstructionEntry]:
    """List instruction entries in document order.

    Entries missing the key, the stored instruction record or its content
    option are skipped.
    """
    mapping = instructions_map(section)
    if mapping is None:
        return []

    entries = []
    for entry in mapping.findall("entry"):
        key = entry.get("key")
        stored = entry.find(f"value/{STORED_INSTRUCTION_TAG}")
        content_option = _find_option(stored, CONTENT_OPTION) if stored is not None else None

        if not key or content_option is None:
            logger.debug(f"Skipping malformed instruction entry {key!r}")
            continue

        try:
            entries.append(
                InstructionEntry(instruction_id=key, content=content_option.get("value", ""))
            )
        except ValidationError:
            logger.debug(f"Skipping instruction entry with invalid id {key!r}")

    return entries

def upsert_entry(section: ET._Element, instruction_id: str, content: str) -> MergeOutcome:
    """Update the entry for instruction_id in place or append a new one."""
    mapping = instructions_map(section, create=True)

    for entry in mapping.findall("entry"):
        if entry.get("key") == instruction_id:
            value = _find_or_create(entry, "value")
            stored = _find_or_create(value, STORED_INSTRUCTION_TAG)
            _set_option(stored, ACTION_ID_OPTION, instruction_id)
            _set_option(stored, CONTENT_OPTION, content)
            logger.debug(f"Updated instruction {instruction_id}")
            return MergeOutcome.UPDATED

    entry = ET.SubElement(mapping, "entry", {"key": instruction_id})
    value = ET.SubElement(entry, "value")
    stored = ET.SubElement(value, STORED_INSTRUCTION_TAG)
    ET.SubElement(stored, "option", {"name": ACTION_ID_OPTION, "value": instruction_id})
    ET.SubElement(stored, "option", {"name": CONTENT_OPTION, "value": content})
    logger.debug(f"Created instruction {instruction_id}")
    return MergeOutcome.CREATED

class WorkspaceDocument:
    """A workspace document loaded from disk for the length of one operation."""

    def __init__(self, path: Path):
        """Initialize with the document path; nothing is read yet."""
        self.path = path
        self.tree: Optional[ET._ElementTree] = None
        self._modified = False

    def exists(self) -> bool:
        return self.path.is_file()

    def load(self) -> "WorkspaceDocument":
        """Parse the document from disk."""
        self.tree = load_document(self.path)
        self._modified = False
        return self

    @property
    def root(self) -> ET._Element:
        if self.tree is None:
            self.load()
        return self.tree.getroot()

    def section(self) -> Optional[ET._Element]:
        return locate_section(self.root)

    def ensure_section(self) -> ET._Element:
        if self.section() is None:
            self._modified = True
        return ensure_section(self.root)

    def entries(self) -> List[InstructionEntry]:
        """Get all well-formed entries, or an empty list when there is no section."""
        section = self.section()
        if section is None:
            return []
        return list_entries(section)

    def upsert(self, instruction_id: str, content: str) -> MergeOutcome:
        """Create or update one instruction entry."""
        outcome = upsert_entry(self.ensure_section(), instruction_id, content)
        self._modified = True
        return outcome

    def save(self) -> None:
        """Write the document back to its original location."""
        if self.tree is None:
            self.load()
        if self._modified:
            section = self.section()
            if section is not None:
                ET.indent(section, space=INDENT, level=1)
        save_document(self.tree, self.path)
        self._modified = False
