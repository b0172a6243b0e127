"""Vehicle Intelligence MCP Server.

VIN decoding, safety recalls, model catalogs, and consumer complaints
from NHTSA's public vehicle APIs, exposed as read-only MCP tools.
"""

__version__ = "1.0.0"
