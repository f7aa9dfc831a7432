"""
Custom exceptions for the wordvec package.
"""


class WordVecError(Exception):
    """Base exception for all wordvec errors."""
    pass


class VectorFormatError(WordVecError):
    """
    Error parsing a binary vector file.

    Raised when:
    - The stream is empty
    - The header line is not valid UTF-8
    - The header does not contain exactly two integers
    """

    def __init__(self, message: str, header_line: str = None):
        super().__init__(message)
        self.header_line = header_line


class VocabularyIncompleteError(WordVecError):
    """
    Loaded vocabulary is smaller than its header declared.

    Only raised by explicit completeness checks. A plain load accepts a
    truncated file and stops at the last complete entry.
    """

    def __init__(self, message: str, declared: int = 0, loaded: int = 0):
        super().__init__(message)
        self.declared = declared
        self.loaded = loaded


class WordVecConfigError(WordVecError):
    """
    Error in wordvec configuration.

    Raised when:
    - Configuration file is missing or not valid YAML
    - Configuration values cannot be converted to their expected type
    """
    pass
