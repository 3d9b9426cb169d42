"""Export and import utilities for custom instructions."""
from .exporter import InstructionExporter, instruction_filename, render_instruction_file
from .importer import InstructionImporter, parse_instruction_file, parse_instruction_text

__all__ = [
    "InstructionExporter",
    "InstructionImporter",
    "instruction_filename",
    "render_instruction_file",
    "parse_instruction_file",
    "parse_instruction_text",
]
