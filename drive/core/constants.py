"""Core constants: route prefixes and HTTP header names.

Single source of truth for values shared by routes, URL building and tests.
"""

API_V1_PREFIX = "/api/v1"
PUBLIC_PREFIX = "/public"

# Request header carrying the explicit extension for raw-body uploads.
HEADER_FILE_EXTENSION = "X-File-Extension"
# Response header with the resource digest (downloads and HEAD).
HEADER_RESOURCE_HASH = "X-Resource-Hash"
