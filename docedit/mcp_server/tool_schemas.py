"""MCP tool schemas (list_tools) for the document editing service.

The fixed tools (ping, list_operations, document_session) are declared here.
Every operation registry becomes one more tool whose input schema is built
from the registry: an ``operation`` enum, the target (``session_id`` or
``path``) and the union of the parameters its operations read.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping

from mcp.types import Tool

from docedit.operations import OperationRegistry

TARGET_PROPERTIES: Dict[str, Any] = {
    "session_id": {
        "type": "string",
        "description": (
            "Session identifier from document_session open/create. "
            "Use this OR path, not both."
        ),
    },
    "path": {
        "type": "string",
        "description": (
            "Document path for a one-shot call without a session. The file is loaded, the "
            "operation runs, and the file is written back only if the document changed."
        ),
    },
    "output_path": {
        "type": "string",
        "description": "Path mode only: write the changed document here instead of over 'path'.",
    },
}


def registry_input_schema(registry: OperationRegistry) -> Dict[str, Any]:
    """Merge every operation's parameters into one object schema."""
    properties: Dict[str, Any] = {
        "operation": {
            "type": "string",
            "enum": registry.names(),
            "description": "Operation to run. Call list_operations for per-operation details.",
        },
        **TARGET_PROPERTIES,
    }
    users: Dict[str, List[str]] = {}
    for op in registry:
        for spec in op.parameters:
            users.setdefault(spec.name, []).append(op.name)
            if spec.name not in properties:
                properties[spec.name] = spec.to_json_schema()
    for name, op_names in users.items():
        schema = dict(properties[name])
        schema["description"] = f"{schema['description']} (used by: {', '.join(op_names)})"
        if schema["type"] == "array" and name == "data":
            # batch_write also accepts an object keyed by cell address
            schema = {"type": ["array", "object"], "description": schema["description"]}
        properties[name] = schema
    return {"type": "object", "properties": properties, "required": ["operation"]}


def registry_tool(registry: OperationRegistry) -> Tool:
    operations = "; ".join(
        f"{op.name}{' (modifies)' if op.mutates else ''}: {op.description}" for op in registry
    )
    return Tool(
        name=registry.name,
        description=(
            f"{registry.description} ({registry.domain} documents). "
            f"OPERATIONS: {operations}. "
            "TARGET: pass session_id for an open session, or path for a one-shot edit."
        ),
        inputSchema=registry_input_schema(registry),
    )


async def build_tools(registries: Mapping[str, OperationRegistry]) -> List[Tool]:
    tools = [
        Tool(
            name="ping",
            description=(
                "Health check - Verify service availability. "
                "WORKFLOW: Use this first to confirm the service is responsive before making other requests. "
                "Returns server status and current timestamp."
            ),
            inputSchema={"type": "object", "properties": {}},
        ),
        Tool(
            name="list_operations",
            description=(
                "Operation Discovery - List document tools, their operations, parameters and the JSON "
                "schema of each operation's result. "
                "WORKFLOW: Call this before using a document tool to learn which parameters an operation "
                "reads and what it returns. Filter with 'tool' or 'domain' "
                "(excel, word, powerpoint, pdf, email)."
            ),
            inputSchema={
                "type": "object",
                "properties": {
                    "tool": {"type": "string", "description": "Only describe this tool."},
                    "domain": {"type": "string", "description": "Only describe tools of this domain."},
                },
            },
        ),
        Tool(
            name="document_session",
            description=(
                "Session Lifecycle - Keep a document open across several calls. "
                "OPERATIONS: open (path, mode readonly|readwrite), create (path, overwrite), "
                "save (session_id, optional output_path), close (session_id, discard), "
                "status (session_id), list. "
                "WORKFLOW: open or create, run document tools with the returned session_id, then close. "
                "Closing saves unsaved changes unless discard=true. Read-only sessions reject "
                "operations that modify the document."
            ),
            inputSchema={
                "type": "object",
                "properties": {
                    "operation": {
                        "type": "string",
                        "enum": ["open", "create", "save", "close", "list", "status"],
                    },
                    "path": {"type": "string", "description": "Document path (open, create)."},
                    "session_id": {"type": "string", "description": "Session id (save, close, status)."},
                    "mode": {
                        "type": "string",
                        "enum": ["readonly", "readwrite"],
                        "default": "readwrite",
                    },
                    "output_path": {"type": "string", "description": "Save to this path instead."},
                    "overwrite": {"type": "boolean", "default": False},
                    "discard": {"type": "boolean", "default": False},
                },
                "required": ["operation"],
            },
        ),
    ]
    tools.extend(registry_tool(registry) for registry in registries.values())
    return tools
