"""Metadata extraction package interfaces."""

from .models import ExtractedMetadata, ValidationResult
from .registry import AdapterRegistry, build_default_registry
from .sandbox import PageSandbox, SandboxError, SoupPageSandbox
from .service import InjectionPayload, MetadataService

__all__ = [
    "AdapterRegistry",
    "ExtractedMetadata",
    "InjectionPayload",
    "MetadataService",
    "PageSandbox",
    "SandboxError",
    "SoupPageSandbox",
    "ValidationResult",
    "build_default_registry",
]
