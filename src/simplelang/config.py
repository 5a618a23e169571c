"""
Configuration constants for the simple front end
"""

# Grammar configuration
GRAMMAR_FILE = "simple.lark"
GRAMMAR_START_RULE = "start"
GRAMMAR_PARSER = "earley"
GRAMMAR_LEXER = "dynamic"
GRAMMAR_AMBIGUITY = "resolve"

# Source handling
DEFAULT_SOURCE_NAME = "<input>"
DEFAULT_FILE_ENCODING = "utf-8"

# Error reporting
ERROR_POINTER_CHAR = "^"
ERROR_CONTEXT_CHARS = 60  # Characters of the offending line shown on each side of the error
END_OF_INPUT = "end of input"

# Readable names for grammar terminals that are not plain strings
TERMINAL_DESCRIPTIONS = {
    "NUMBER": "number",
    "NAME": "variable",
    "BINOP": "operator",
}

# Printer
INDENT = "    "
