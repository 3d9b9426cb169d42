"""Shared fixtures for instruction sync tests."""
import pytest

from helpers import WORKSPACE_WITHOUT_SECTION_XML, WORKSPACE_XML, RecordingHost

@pytest.fixture
def workspace_file(tmp_path):
    """Create a workspace.xml holding two instructions and unrelated settings."""
    path = tmp_path / "workspace.xml"
    path.write_text(WORKSPACE_XML, encoding="utf-8")
    return path

@pytest.fixture
def bare_workspace_file(tmp_path):
    """Create a workspace.xml with no instructions component."""
    path = tmp_path / "workspace.xml"
    path.write_text(WORKSPACE_WITHOUT_SECTION_XML, encoding="utf-8")
    return path

@pytest.fixture
def project(tmp_path):
    """Create a project directory with .idea/workspace.xml."""
    root = tmp_path / "project"
    (root / ".idea").mkdir(parents=True)
    (root / ".idea" / "workspace.xml").write_text(WORKSPACE_XML, encoding="utf-8")
    return root

@pytest.fixture
def host():
    return RecordingHost()
