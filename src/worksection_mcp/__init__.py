"""worksection_mcp package exports."""

from .core import (
    ApiEnvelope,
    AttachmentInput,
    WorksectionApiError,
    WorksectionAttachmentError,
    WorksectionClient,
    WorksectionClientError,
    WorksectionConfig,
    WorksectionConfigError,
    WorksectionHTTPError,
    WorksectionInputError,
    WorksectionParseError,
    WorksectionTransportError,
    build_request,
    register_discovered_tools,
    register_resources,
    sign,
)

__all__ = [
    # Client
    "WorksectionClient",
    "WorksectionConfig",
    "ApiEnvelope",
    "AttachmentInput",
    # Exceptions
    "WorksectionClientError",
    "WorksectionConfigError",
    "WorksectionInputError",
    "WorksectionAttachmentError",
    "WorksectionTransportError",
    "WorksectionHTTPError",
    "WorksectionApiError",
    "WorksectionParseError",
    # Request helpers
    "build_request",
    "sign",
    # Server utilities
    "register_discovered_tools",
    "register_resources",
]
