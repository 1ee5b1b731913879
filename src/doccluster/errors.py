"""Exceptions raised by doccluster."""


class DocClusterError(Exception):
    """Base class for doccluster errors."""


class NotFoundError(DocClusterError, LookupError):
    """A requested document is unknown or has no embedded chunk."""


class LabelGenerationError(DocClusterError):
    """The label generator failed or returned an unusable reply."""
