"""Services for Photocard Collector."""

from photocard_collector.services.filename_decoder import (
    DecodeError,
    FilenameDecoder,
    ParsedFilename,
    decode_filename,
)
from photocard_collector.services.lexicon import DEFAULT_LEXICON, Lexicon

__all__ = [
    "DecodeError",
    "FilenameDecoder",
    "ParsedFilename",
    "decode_filename",
    "Lexicon",
    "DEFAULT_LEXICON",
]
