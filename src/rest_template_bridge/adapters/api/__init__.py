"""
HTTP layer of the REST template bridge.

* :class:`BaseAPIClient` wraps HTTPX with header handling and transport error mapping.
* :class:`RestTemplateClient` knows the service's endpoints and payload shapes.
* :class:`BasicAuth` / :class:`BearerAuth` build the ``Authorization`` header.
"""

from .auth import AuthStrategy, BasicAuth, BearerAuth, basic_auth_header, bearer_auth_header
from .base import CONNECTION_FAILED_MESSAGE, BaseAPIClient
from .rest_template import RestTemplateClient, parse_count

__all__ = [
    "AuthStrategy",
    "BaseAPIClient",
    "BasicAuth",
    "BearerAuth",
    "CONNECTION_FAILED_MESSAGE",
    "RestTemplateClient",
    "basic_auth_header",
    "bearer_auth_header",
    "parse_count",
]
