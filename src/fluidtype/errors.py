"""Errors raised by the generator and the importer."""


class TypographyError(Exception):
    """Base class for fluidtype errors."""


class InvalidModelError(TypographyError):
    """The token/breakpoint model cannot be compiled."""


class MalformedInputError(TypographyError):
    """Stylesheet text does not follow the generated convention."""
