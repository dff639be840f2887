import logging

logger = logging.getLogger("SampleTools.mcp.utils")

TRUNCATION_SUFFIX = "\n\n[Response truncated due to size limits]"


def truncate_tool_text(text: str, name: str, max_chars: int) -> str:
    """Apply the configured length limit to tool responses."""
    if len(text) > max_chars:
        logger.info("Truncating response for tool '%s' (%d -> %d chars)", name, len(text), max_chars)
        cutoff = max(0, max_chars - len(TRUNCATION_SUFFIX))
        return text[:cutoff] + TRUNCATION_SUFFIX
    return text
