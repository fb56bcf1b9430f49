"""Exceptions and warnings raised by the link codecs."""


class LinkError(Exception):
    """Base class for every failure to decode or encode a link record."""


class NotALinkFile(LinkError):
    """The fixed header is short, has the wrong size, or the wrong magic CLSID."""


class TruncatedInput(LinkError):
    """A declared length runs past the end of the available bytes."""


class CorruptRecord(LinkError):
    """A sub-block's internal sizes or offsets are inconsistent."""


class InvalidLength(CorruptRecord):
    """A size field is smaller than the structure it must at least cover."""


class UnknownFormat(CorruptRecord):
    """An advertised-info block carries an unrecognised signature."""


class InvalidAdvertisedFormat(LinkError):
    """An ``::{GUID}:value::`` advertised-target string is malformed."""


class TerminatorWarning(UserWarning):
    """The trailing zero terminator is missing or non-zero."""
