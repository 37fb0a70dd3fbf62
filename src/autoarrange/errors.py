"""Exceptions raised by autoarrange."""


class AutoArrangeError(Exception):
    """Base class for autoarrange errors."""


class ConfigurationInvalid(AutoArrangeError):
    """The classification policy is missing or malformed.

    Raised before any traversal starts; a scan cannot run without a valid
    category table and size-bucket table.
    """


class ScanCancelled(AutoArrangeError):
    """A scan was aborted through its cancellation token."""
