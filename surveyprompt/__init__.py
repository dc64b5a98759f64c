"""Interactive terminal prompts (input, confirm, password, multiline, editor, multi-select) and answer storage."""

__version__ = "0.1.0"