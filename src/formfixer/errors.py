# src/formfixer/errors.py


class FormFixerError(Exception):
    """Base class for all errors raised by the form analysis core."""
    status_code = 500


class InvalidInput(FormFixerError, ValueError):
    """The HTML payload is missing or empty. Raised before any parsing takes place."""
    status_code = 400


class ParseDegraded(FormFixerError):
    """
    The parser could not interpret the markup.

    Never surfaces to callers: the DOMBuilder records it on the document and
    continues with an empty control set.
    """


class AccessibilityUnavailable(FormFixerError):
    """The external accessibility auditor (browser + axe-core) could not be run."""
    status_code = 503
