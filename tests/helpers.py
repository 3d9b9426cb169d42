"""Shared test data and doubles for instruction sync tests."""
from pathlib import Path
from typing import Dict, Optional

from ai_instructions_sync.storage.workspace_document import WorkspaceDocument

WORKSPACE_XML = """<?xml version="1.0" encoding="UTF-8"?>
<project version="4">
  <component name="ChangeListManager">
    <list default="true" id="5f0c6a7e" name="Changes" comment="" />
  </component>
  <!-- keep this comment -->
  <component name="AIAssistantCustomInstructionsStorage">
    <option name="instructions">
      <map>
        <entry key="AIAssistant.Chat">
          <value>
            <AIAssistantStoredInstruction>
              <option name="actionId" value="AIAssistant.Chat" />
              <option name="content" value="Answer briefly.&#10;Use British English." />
            </AIAssistantStoredInstruction>
          </value>
        </entry>
        <entry key="AIAssistant.VCS.GenerateCommitMessage">
          <value>
            <AIAssistantStoredInstruction>
              <option name="actionId" value="AIAssistant.VCS.GenerateCommitMessage" />
              <option name="content" value="Use the imperative mood." />
            </AIAssistantStoredInstruction>
          </value>
        </entry>
      </map>
    </option>
  </component>
  <component name="PropertiesComponent">{"keyToString": {"last_opened_file_path": "/tmp"}}</component>
</project>
"""

WORKSPACE_WITHOUT_SECTION_XML = """<?xml version="1.0" encoding="UTF-8"?>
<project version="4">
  <component name="ChangeListManager">
    <list default="true" id="5f0c6a7e" name="Changes" comment="" />
  </component>
  <component name="PropertiesComponent">{"keyToString": {"last_opened_file_path": "/tmp"}}</component>
</project>
"""

def read_instructions(path: Path) -> Dict[str, str]:
    """Load a workspace document and return its instructions as id -> content."""
    return {e.instruction_id: e.content for e in WorkspaceDocument(path).load().entries()}

def write_instruction(directory: Path, name: str, text: str) -> Path:
    """Write a raw instruction file."""
    directory.mkdir(parents=True, exist_ok=True)
    file_path = directory / name
    file_path.write_text(text, encoding="utf-8")
    return file_path

class RecordingHost:
    """Host double that records every call."""

    def __init__(self):
        self.changed = []
        self.prompts = []
        self.callbacks = []

    def notify_changed(self, path: Path) -> None:
        self.changed.append(path)

    def prompt_result(self, message: str, error: bool = False) -> None:
        self.prompts.append((message, error))

    def on_project_opened(self, callback) -> None:
        self.callbacks.append(callback)

    @property
    def last_prompt(self) -> Optional[tuple]:
        return self.prompts[-1] if self.prompts else None

