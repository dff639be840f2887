"""
Tool handlers.

Every handler takes the raw `arguments` mapping from a tools/call request and
returns the text to send back, or raises.
"""

from sample_tools.tools.calculator import calculate
from sample_tools.tools.clock import current_time
from sample_tools.tools.identifiers import generate_uuid
from sample_tools.tools.text import reverse_string

__all__ = ["calculate", "current_time", "generate_uuid", "reverse_string"]
