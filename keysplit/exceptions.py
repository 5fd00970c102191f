"""
keysplit Exceptions - Custom exception hierarchy for the keysplit library.

All exceptions inherit from KeySplitError for easy catching of library-specific
errors. Every class carries the process exit code the CLI reports for it.
"""


class KeySplitError(Exception):
    """
    Base exception for all keysplit errors.

    Example:
        try:
            keysplit.split("bundle.pdf", "out/", pattern=r"Invoice (\\d+)")
        except KeySplitError as e:
            print(f"Split failed: {e}")
            sys.exit(e.exit_code)
    """
    exit_code = 1


class ConfigurationError(KeySplitError):
    """
    Invalid run configuration, detected before any page is read.

    Raised when:
    - Pattern does not compile
    - Pattern has no capture group, or the key group does not exist
    - An option has an unknown value
    """
    exit_code = 5


class NoSplitModeError(ConfigurationError):
    """No split pattern was supplied, so there is nothing to split on."""
    exit_code = 4


class InputError(KeySplitError):
    """
    Error reading the source document.

    Raised when:
    - Page text cannot be extracted
    - A page index is outside the document
    - A page has no key under the "fail" no-match policy
    """
    exit_code = 6


class InputNotFoundError(InputError):
    """Source file does not exist."""
    exit_code = 1


class InputFormatError(InputError):
    """Source file is not a supported or valid document."""
    exit_code = 2


class OutputError(KeySplitError):
    """
    Error writing an output document.

    Raised when:
    - The output file cannot be written or finalized
    - Two segments claim the same name under the "fail" collision policy
    """
    exit_code = 7


class OutputDirectoryError(OutputError):
    """Output directory does not exist."""
    exit_code = 3
