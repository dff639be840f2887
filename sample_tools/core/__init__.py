from sample_tools.core.config import ServerConfig

__all__ = ["ServerConfig"]
