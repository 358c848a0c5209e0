"""Core domain surface for worksection-mcp (transport-agnostic)."""

from .attachments import (
    AttachmentInput,
    AttachmentPayload,
    InlineSource,
    RemoteSource,
    resolve_attachments,
)
from .client import WorksectionClient
from .config import WorksectionConfig, config_from_env, load_env_config
from .context import bind_request_id, current_request_id, reset_request_id
from .errors import (
    WorksectionApiError,
    WorksectionAttachmentError,
    WorksectionClientError,
    WorksectionConfigError,
    WorksectionHTTPError,
    WorksectionInputError,
    WorksectionParseError,
    WorksectionTransportError,
)
from .models import ApiEnvelope, TaskAttachment
from .registry import (
    discover_tool_modules,
    iter_tool_functions,
    register_discovered_tools,
)
from .request import build_request, canonical_query, encode_params, sign
from .resources import register_resources

__all__ = [
    # Client
    "WorksectionClient",
    "WorksectionConfig",
    "ApiEnvelope",
    "TaskAttachment",
    # Exceptions
    "WorksectionClientError",
    "WorksectionConfigError",
    "WorksectionInputError",
    "WorksectionAttachmentError",
    "WorksectionTransportError",
    "WorksectionHTTPError",
    "WorksectionApiError",
    "WorksectionParseError",
    # Request building
    "encode_params",
    "canonical_query",
    "sign",
    "build_request",
    # Attachments
    "AttachmentInput",
    "AttachmentPayload",
    "InlineSource",
    "RemoteSource",
    "resolve_attachments",
    # Config helpers
    "config_from_env",
    "load_env_config",
    # Registry helpers
    "discover_tool_modules",
    "iter_tool_functions",
    "register_discovered_tools",
    "register_resources",
    # Context
    "bind_request_id",
    "reset_request_id",
    "current_request_id",
]
