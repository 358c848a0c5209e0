"""
Tool discovery and FastMCP registration.

Every public coroutine in ``worksection_mcp.core.tools.*`` whose first
parameter is ``client`` becomes an MCP tool named after the function. The
client is injected per call and hidden from the published schema.
"""

from __future__ import annotations

import importlib
import inspect
import logging
import pkgutil
from types import ModuleType
from typing import Callable, Dict, Iterable, List, NamedTuple, get_type_hints

from .client import WorksectionClient
from .errors import WorksectionClientError
from .observability import log_event

log = logging.getLogger("worksection_mcp.core.registry")

TOOLS_PACKAGE = "worksection_mcp.core.tools"
CLIENT_PARAM = "client"

ClientProvider = Callable[[], WorksectionClient]


class ToolEntry(NamedTuple):
    name: str
    module: str
    func: Callable


def discover_tool_modules(package_name: str = TOOLS_PACKAGE) -> List[ModuleType]:
    """Import every module of the tools package; broken modules are logged."""
    package = importlib.import_module(package_name)
    found: List[ModuleType] = []
    for info in pkgutil.iter_modules(package.__path__, package.__name__ + "."):
        try:
            found.append(importlib.import_module(info.name))
        except Exception as exc:  # pragma: no cover - logged, not fatal
            log.error("Failed importing tool module %s: %s", info.name, exc)
    return found


def _takes_client_first(func: Callable) -> bool:
    params = list(inspect.signature(func).parameters)
    return bool(params) and params[0] == CLIENT_PARAM


def iter_tool_functions(module: ModuleType) -> Iterable[Callable]:
    for name, func in inspect.getmembers(module, inspect.iscoroutinefunction):
        if name.startswith("_") or func.__module__ != module.__name__:
            continue
        if not _takes_client_first(func):
            log.debug("Skipping %s.%s: no leading client", module.__name__, name)
            continue
        yield func


def collect_tools(modules: Iterable[ModuleType]) -> List[ToolEntry]:
    """Flatten modules into tool entries; names must be unique across modules."""
    by_name: Dict[str, ToolEntry] = {}
    for module in modules:
        for func in iter_tool_functions(module):
            if func.__name__ in by_name:
                raise ValueError(
                    f"Duplicate tool name detected: {func.__name__} "
                    f"({by_name[func.__name__].module} and {module.__name__})"
                )
            by_name[func.__name__] = ToolEntry(func.__name__, module.__name__, func)
    return list(by_name.values())


def as_client_provider(
    client_provider: ClientProvider | WorksectionClient,
) -> ClientProvider:
    if isinstance(client_provider, WorksectionClient):
        shared = client_provider
        return lambda: shared
    return client_provider


def _public_signature(func: Callable) -> inspect.Signature:
    """Signature without the client, with string annotations resolved."""
    sig = inspect.signature(func)
    hints = get_type_hints(func)
    params = [
        p.replace(annotation=hints.get(p.name, p.annotation))
        for p in list(sig.parameters.values())[1:]
    ]
    return sig.replace(
        parameters=params,
        return_annotation=hints.get("return", sig.return_annotation),
    )


def _bind_client(entry: ToolEntry, client_provider: ClientProvider) -> Callable:
    func = entry.func

    async def tool(*args, **kwargs):
        try:
            return await func(client_provider(), *args, **kwargs)
        except WorksectionClientError as exc:
            # reported to the MCP caller as a tool error, never as data
            log_event(
                "tool_failed",
                level=logging.WARNING,
                tool=entry.name,
                error_type=type(exc).__name__,
            )
            raise

    tool.__name__ = entry.name
    tool.__qualname__ = entry.name
    tool.__doc__ = func.__doc__
    tool.__module__ = entry.module
    tool.__signature__ = _public_signature(func)  # type: ignore[attr-defined]
    return tool


def register_discovered_tools(
    app,
    client_provider: ClientProvider | WorksectionClient,
    modules: List[ModuleType] | None = None,
) -> List[str]:
    """Register discovered tools on an app that exposes a ``.tool`` decorator."""
    if not hasattr(app, "tool"):
        raise TypeError("app must expose a 'tool' decorator")

    provider = as_client_provider(client_provider)
    if modules is None:
        modules = discover_tool_modules()
    entries = collect_tools(modules)
    for entry in entries:
        app.tool(name=entry.name)(_bind_client(entry, provider))
        log.info("Registered tool: %s (%s)", entry.name, entry.module)
    return [entry.name for entry in entries]


__all__ = [
    "ClientProvider",
    "ToolEntry",
    "as_client_provider",
    "collect_tools",
    "discover_tool_modules",
    "iter_tool_functions",
    "register_discovered_tools",
]
