"""Shared constant values for the tapebf runtime."""

INSTRUCTION_SYMBOLS = "<>+-.,[]"

TAPE_SIZE = 65536
CELL_MODULUS = 256

RENDER_WIDTH = 100
DIAGNOSTIC_DELAY = 0.01

EMPTY_CELL_GLYPH = "¿"
INVISIBLE_CELL_GLYPH = "?"
POINTER_GLYPH = "↥"
OUTPUT_PLACEHOLDER = "\0"

BANNER_RULE = "---------------------------------------"

CLEAR_SEQUENCE = "\x1b[2J\x1b[H"

SNAPSHOT_VERSION = "1.0"
LOGBOOK_FILE = "tapebf.logbook.jsonl"
KEY_FILE = "tapebf_private_key.pem"
PUB_FILE = "tapebf_public_key.pem"
LOGBOOK_LIMIT = 10

__all__ = [
    "INSTRUCTION_SYMBOLS",
    "TAPE_SIZE",
    "CELL_MODULUS",
    "RENDER_WIDTH",
    "DIAGNOSTIC_DELAY",
    "EMPTY_CELL_GLYPH",
    "INVISIBLE_CELL_GLYPH",
    "POINTER_GLYPH",
    "OUTPUT_PLACEHOLDER",
    "BANNER_RULE",
    "CLEAR_SEQUENCE",
    "SNAPSHOT_VERSION",
    "LOGBOOK_FILE",
    "KEY_FILE",
    "PUB_FILE",
    "LOGBOOK_LIMIT",
]
