"""
File I/O service for reading conflict-marked files and patches.

Handles:
- Encoding detection
- Binary file rejection
- Line ending detection and normalization
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, auto
from pathlib import Path
from typing import Optional

import chardet

logger = logging.getLogger(__name__)


class LineEnding(Enum):
    """Line ending style."""
    LF = auto()      # Unix: \n
    CRLF = auto()    # Windows: \r\n
    CR = auto()      # Old Mac: \r
    MIXED = auto()   # Mixed endings
    NONE = auto()    # No line endings (single line or empty)


@dataclass
class FileContent:
    """Container for file content with metadata."""
    content: str
    encoding: str
    line_ending: LineEnding


@dataclass
class ReadResult:
    """Result of a file read operation."""
    success: bool
    content: Optional[FileContent] = None
    error: Optional[str] = None
    is_binary: bool = False


class FileIOService:
    """Service for safe text file reading."""

    # Binary file signatures (magic bytes)
    BINARY_SIGNATURES = [
        b'\x89PNG',        # PNG
        b'\xff\xd8\xff',   # JPEG
        b'GIF8',           # GIF
        b'PK\x03\x04',     # ZIP
        b'\x1f\x8b',       # GZIP
        b'%PDF',           # PDF
        b'\x7fELF',        # ELF
    ]

    BOMS = [
        (b'\xef\xbb\xbf', 'utf-8-sig'),
        (b'\xff\xfe', 'utf-16-le'),
        (b'\xfe\xff', 'utf-16-be'),
    ]

    def __init__(
        self,
        default_encoding: str = 'utf-8',
        fallback_encoding: str = 'latin-1',
        binary_check_size: int = 8192,
        max_text_size: int = 50 * 1024 * 1024  # 50MB
    ):
        self.default_encoding = default_encoding
        self.fallback_encoding = fallback_encoding
        self.binary_check_size = binary_check_size
        self.max_text_size = max_text_size

    def read_file(
        self,
        path: Path | str,
        encoding: Optional[str] = None,
        normalize_line_endings: bool = False
    ) -> ReadResult:
        """
        Read a text file with automatic encoding detection.

        Args:
            path: Path to the file
            encoding: Force specific encoding (auto-detect if None)
            normalize_line_endings: Convert all line endings to \\n

        Returns:
            ReadResult with content or error information
        """
        path = Path(path)

        if not path.exists():
            return ReadResult(success=False, error=f"File not found: {path}")

        if not path.is_file():
            return ReadResult(success=False, error=f"Not a file: {path}")

        try:
            file_size = path.stat().st_size
            if file_size > self.max_text_size:
                return ReadResult(
                    success=False,
                    error=f"File too large ({file_size / 1024 / 1024:.2f} MB). "
                          f"Max size is {self.max_text_size / 1024 / 1024:.2f} MB."
                )

            raw_content = path.read_bytes()
        except PermissionError:
            return ReadResult(success=False, error=f"Permission denied: {path}")
        except OSError as e:
            return ReadResult(success=False, error=f"OS error: {e}")

        return self.read_bytes(raw_content, str(path), encoding, normalize_line_endings)

    def read_bytes(
        self,
        raw_content: bytes,
        name: str = '<stdin>',
        encoding: Optional[str] = None,
        normalize_line_endings: bool = False
    ) -> ReadResult:
        """Decode bytes already read from a file or pipe, rejecting binary content."""
        if self._is_binary(raw_content[:self.binary_check_size]):
            return ReadResult(success=False, is_binary=True,
                              error=f"Input appears to be binary: {name}")

        return ReadResult(
            success=True,
            content=self.decode(raw_content, encoding, normalize_line_endings)
        )

    def decode(
        self,
        raw_content: bytes,
        encoding: Optional[str] = None,
        normalize_line_endings: bool = False
    ) -> FileContent:
        """Decode raw bytes, detecting BOM and encoding."""
        detected_encoding = encoding or self._detect_encoding(raw_content)

        for marker, bom_encoding in self.BOMS:
            if raw_content.startswith(marker):
                detected_encoding = bom_encoding
                raw_content = raw_content[len(marker):]
                break

        try:
            content = raw_content.decode(detected_encoding)
        except (UnicodeDecodeError, LookupError):
            logger.debug(
                "Could not decode as %s, falling back to %s",
                detected_encoding, self.fallback_encoding
            )
            content = raw_content.decode(self.fallback_encoding, errors='replace')
            detected_encoding = self.fallback_encoding

        line_ending = self._detect_line_ending(content)
        if normalize_line_endings:
            content = self.normalize(content)

        return FileContent(
            content=content,
            encoding=detected_encoding,
            line_ending=line_ending
        )

    @staticmethod
    def normalize(content: str) -> str:
        """Convert all line endings to \\n."""
        return content.replace('\r\n', '\n').replace('\r', '\n')

    def _is_binary(self, chunk: bytes) -> bool:
        """Check if a leading chunk of bytes looks binary."""
        for marker, _ in self.BOMS:
            if chunk.startswith(marker):
                return False

        for sig in self.BINARY_SIGNATURES:
            if chunk.startswith(sig):
                return True

        if b'\x00' in chunk:
            return True

        # Check ratio of non-text bytes
        non_text = sum(1 for b in chunk if b < 9 or (b > 13 and b < 32))
        return len(chunk) > 0 and non_text / len(chunk) > 0.3

    def _detect_encoding(self, content: bytes) -> str:
        """Detect encoding of content."""
        if not content:
            return self.default_encoding

        result = chardet.detect(content)

        if result['confidence'] > 0.7 and result['encoding']:
            encoding = result['encoding'].lower()
            if encoding == 'ascii':
                return 'utf-8'  # ASCII is subset of UTF-8
            return encoding

        return self.default_encoding

    @staticmethod
    def _detect_line_ending(content: str) -> LineEnding:
        """Detect line ending style in content."""
        crlf_count = content.count('\r\n')
        lf_count = content.count('\n') - crlf_count
        cr_count = content.count('\r') - crlf_count

        total = crlf_count + lf_count + cr_count
        if total == 0:
            return LineEnding.NONE

        if crlf_count == total:
            return LineEnding.CRLF
        elif lf_count == total:
            return LineEnding.LF
        elif cr_count == total:
            return LineEnding.CR
        else:
            return LineEnding.MIXED
