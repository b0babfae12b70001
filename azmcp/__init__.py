"""Azure MCP Server.

Exposes Azure resource operations as uniformly-shaped commands:
- Hierarchical command tree (area -> subgroup -> command)
- Uniform command contract with option binding and validation
- Normalized response envelope (status, message, results)
- Tenant- and retry-scoped Azure client caching
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
