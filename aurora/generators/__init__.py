"""Generation collaborators: sections, logos and full revisions."""

from .base import (
    GenerationCancelledError,
    GenerationError,
    LogoRequest,
    LogoSource,
    Reviser,
    RevisionRequest,
    SectionRequest,
    SectionSource,
)
from .logo import LogoGenerator
from .revision import DocumentReviser
from .section import SectionGenerator

__all__ = [
    "DocumentReviser",
    "GenerationCancelledError",
    "GenerationError",
    "LogoGenerator",
    "LogoRequest",
    "LogoSource",
    "Reviser",
    "RevisionRequest",
    "SectionGenerator",
    "SectionRequest",
    "SectionSource",
]
