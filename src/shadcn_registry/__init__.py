from shadcn_registry.catalog import add_item, list_items, remove_item, removable_names
from shadcn_registry.config import ToolConfig, load_config
from shadcn_registry.e2e import create_test_app
from shadcn_registry.errors import (
    AlreadyExists,
    CommandFailed,
    NotFound,
    PromptCancelled,
    RegistryError,
    ServerNotReady,
    ValidationError,
)
from shadcn_registry.exports import render_exports, write_registry_exports
from shadcn_registry.process import run_command, wait_for_http
from shadcn_registry.project import create_registry_project

__version__ = "0.1.0"

__all__ = [
    "AlreadyExists",
    "CommandFailed",
    "NotFound",
    "PromptCancelled",
    "RegistryError",
    "ServerNotReady",
    "ToolConfig",
    "ValidationError",
    "__version__",
    "add_item",
    "create_registry_project",
    "create_test_app",
    "list_items",
    "load_config",
    "remove_item",
    "removable_names",
    "render_exports",
    "run_command",
    "wait_for_http",
    "write_registry_exports",
]
