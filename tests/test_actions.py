"""Tests for the user-facing export and import actions."""
import gc
import io

from rich.console import Console

from ai_instructions_sync import actions
from ai_instructions_sync.actions import (
    export_instructions, import_instructions, import_on_project_open,
    register_project_open_import
)
from ai_instructions_sync.host import ConsoleHost
from helpers import read_instructions, write_instruction

class TestExportAction:
    """Test the export action messages."""

    def test_export_summary(self, project, host):
        """Test the success summary lists every exported file."""
        message = export_instructions(project, host)

        assert message == (
            "Successfully exported 2 files to .ai directory:\n"
            "Exported: AIAssistant_Chat.md\n"
            "Exported: AIAssistant_VCS_GenerateCommitMessage.md"
        )
        assert host.last_prompt == (message, False)
        assert (project / ".ai" / "AIAssistant_Chat.md").exists()

    def test_export_nothing(self, project, host):
        """Test the message when the document holds no instructions."""
        (project / ".idea" / "workspace.xml").write_text("<project />", encoding="utf-8")

        assert export_instructions(project, host) == "No instructions found to export."
        assert host.last_prompt[1] is False

    def test_export_missing_document(self, tmp_path, host):
        """Test the message when the project has no workspace.xml."""
        message = export_instructions(tmp_path, host)

        assert message == "workspace.xml not found in the project."
        assert host.last_prompt == (message, True)

    def test_export_malformed_document(self, project, host):
        """Test parse failures become a single error message."""
        (project / ".idea" / "workspace.xml").write_text("<project>", encoding="utf-8")

        message = export_instructions(project, host)

        assert message.startswith("Error exporting instructions: ")
        assert host.last_prompt[1] is True

class TestImportAction:
    """Test the import action messages."""

    def test_import_summary(self, project, host):
        """Test the success summary and the change notification."""
        write_instruction(project / ".ai", "chat.md", "# AIAssistant.Chat\n\nnew")

        message = import_instructions(project, host)

        assert message == "Successfully imported 1 instruction files into workspace.xml."
        assert host.changed == [project / ".idea" / "workspace.xml"]
        assert read_instructions(project / ".idea" / "workspace.xml")["AIAssistant.Chat"] == "new"

    def test_import_missing_document(self, tmp_path, host):
        """Test the message when the project has no workspace.xml."""
        write_instruction(tmp_path / ".ai", "chat.md", "# AIAssistant.Chat\n\nnew")

        message = import_instructions(tmp_path, host)

        assert message == "workspace.xml not found in the project."
        assert host.last_prompt[1] is True

    def test_import_missing_directory(self, project, host):
        """Test the message when there is no .ai directory."""
        message = import_instructions(project, host)

        assert message == "No .ai directory found. Nothing to import."
        assert host.last_prompt[1] is False

    def test_import_empty_directory(self, project, host):
        """Test the message when no file carries an instruction."""
        write_instruction(project / ".ai", "notes.md", "plain notes")

        message = import_instructions(project, host)

        assert message == "No instruction files found in .ai directory."
        assert host.changed == []

    def test_import_malformed_document(self, project, host):
        """Test parse failures become a single error message."""
        (project / ".idea" / "workspace.xml").write_text("<project>", encoding="utf-8")
        write_instruction(project / ".ai", "chat.md", "# AIAssistant.Chat\n\nnew")

        message = import_instructions(project, host)

        assert message.startswith("Error importing instructions: ")
        assert host.last_prompt[1] is True

class TestImportOnProjectOpen:
    """Test the silent import run when a project opens."""

    def test_imports_without_prompting(self, project, host):
        """Test the import happens and nothing is shown."""
        write_instruction(project / ".ai", "chat.md", "# AIAssistant.Chat\n\nopened")

        result = import_on_project_open(project, host)

        assert result.merged_count == 1
        assert host.prompts == []
        assert read_instructions(project / ".idea" / "workspace.xml")["AIAssistant.Chat"] == "opened"

    def test_failures_are_swallowed(self, project, host):
        """Test that errors are logged rather than raised or shown."""
        (project / ".idea" / "workspace.xml").write_text("<project>", encoding="utf-8")
        write_instruction(project / ".ai", "chat.md", "# AIAssistant.Chat\n\nopened")

        assert import_on_project_open(project, host) is None
        assert host.prompts == []

    def test_missing_directory_is_quiet(self, project, host):
        """Test a project without .ai is simply skipped."""
        assert import_on_project_open(project, host) is None
        assert host.prompts == []

    def test_registered_with_console_host(self, project):
        """Test the callback registered on the host runs the import."""
        write_instruction(project / ".ai", "chat.md", "# AIAssistant.Chat\n\nfrom hook")
        output = io.StringIO()
        console_host = ConsoleHost(Console(file=output))

        register_project_open_import(console_host)
        console_host.open_project(project)

        assert console_host.changed_paths == [project / ".idea" / "workspace.xml"]
        assert output.getvalue() == ""
        assert read_instructions(project / ".idea" / "workspace.xml")["AIAssistant.Chat"] == "from hook"

class TestConsoleHost:
    """Test the terminal host."""

    def test_prompt_result_counts_errors(self):
        """Test that results are printed and errors counted."""
        output = io.StringIO()
        console_host = ConsoleHost(Console(file=output, width=80))

        console_host.prompt_result("All good")
        console_host.prompt_result("Broken", error=True)

        assert "All good" in output.getvalue()
        assert "Broken" in output.getvalue()
        assert console_host.error_count == 1

class TestProjectLock:
    """Test the per-project lock registry."""

    def test_same_project_shares_lock(self, tmp_path):
        """Test that spellings of one project root map to one lock."""
        (tmp_path / "sub").mkdir()
        lock = actions._project_lock(tmp_path)
        assert actions._project_lock(tmp_path / "sub" / "..") is lock
        assert actions._project_lock(tmp_path / "other") is not lock

    def test_unused_locks_are_released(self, tmp_path):
        """Test that locks for projects no longer in use are dropped."""
        key = tmp_path.resolve()
        lock = actions._project_lock(tmp_path)
        assert key in actions._project_locks

        del lock
        gc.collect()

        assert key not in actions._project_locks

    def test_actions_leave_no_locks_behind(self, project, host):
        """Test that finished actions do not grow the registry."""
        export_instructions(project, host)
        gc.collect()

        assert project.resolve() not in actions._project_locks
