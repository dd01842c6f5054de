"""Fluid typography compiler: token model to custom-property CSS and back."""

from .errors import TypographyError, InvalidModelError, MalformedInputError
from .model import Breakpoint, Token, TypographyModel
from .generator import GeneratedCss, TokenScale, compute_scale, generate, generate_model
from .importer import ImportResult, parse

__all__ = [
    "TypographyError",
    "InvalidModelError",
    "MalformedInputError",
    "Breakpoint",
    "Token",
    "TypographyModel",
    "GeneratedCss",
    "TokenScale",
    "compute_scale",
    "generate",
    "generate_model",
    "ImportResult",
    "parse",
]
