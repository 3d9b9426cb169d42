"""Synchronize AI Assistant custom instructions between workspace.xml and .ai files."""
__version__ = "0.1.0"
