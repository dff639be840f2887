from typing import Any, Dict, List

TOOLS_SCHEMAS: List[Dict[str, Any]] = [
    {
        "name": "calculate",
        "description": "Perform basic mathematical calculations",
        "inputSchema": {
            "type": "object",
            "properties": {
                "expression": {
                    "type": "string",
                    "description": 'Mathematical expression to evaluate (e.g., "2 + 3 * 4")',
                },
            },
            "required": ["expression"],
        },
    },
    {
        "name": "generate_uuid",
        "description": "Generate a random UUID",
        "inputSchema": {
            "type": "object",
            "properties": {
                "version": {
                    "type": "number",
                    "description": "UUID version (4 for random)",
                    "default": 4,
                },
            },
            "required": [],
        },
    },
    {
        "name": "reverse_string",
        "description": "Reverse a given string",
        "inputSchema": {
            "type": "object",
            "properties": {
                "text": {"type": "string", "description": "Text to reverse"},
            },
            "required": ["text"],
        },
    },
    {
        "name": "current_time",
        "description": "Get current date and time",
        "inputSchema": {
            "type": "object",
            "properties": {
                "format": {
                    "type": "string",
                    "description": "Format for the timestamp (iso, unix, readable)",
                    "default": "iso",
                },
            },
            "required": [],
        },
    },
]
