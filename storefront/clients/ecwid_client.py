"""
Ecwid REST API client.

Talks to two API surfaces of the same store:
- admin/catalog API (bearer API key)
- storefront/session API (bearer session token of the checkout)
"""

import json
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

import requests

from storefront.adapters.base import CommerceAPIError
from storefront.constants import ECWID_API_URL, ECWID_STOREFRONT_API_URL
from storefront.services.tag_cache import TagCache
from storefront.utils.logger import get_logger, log_with_context

logger = get_logger(__name__)

QueryParams = Dict[str, Union[str, List[str]]]


class EcwidAPIError(CommerceAPIError):
    """Ecwid API or transport error."""
    pass


@dataclass
class EcwidResponse:
    status: int
    body: Any


class EcwidClient:
    """Ecwid REST API client with tag-cached catalog reads."""

    def __init__(
        self,
        store_id: str,
        api_key: str,
        timeout: int = 10,
        cache: Optional[TagCache] = None
    ):
        """
        Initialize Ecwid client.

        Args:
            store_id: Ecwid store ID
            api_key: Ecwid secret/public API token
            timeout: Request timeout in seconds
            cache: Response cache for tagged GET requests
        """
        self.store_id = store_id
        self.api_key = api_key
        self.timeout = timeout
        self.cache = cache if cache is not None else TagCache()

        self.api_endpoint = f"{ECWID_API_URL}{store_id}"
        self.storefront_api_endpoint = f"{ECWID_STOREFRONT_API_URL}{store_id}"

        self.session = requests.Session()
        self.session.headers.update({
            "Accept": "application/json",
            "Content-Type": "application/json",
            "User-Agent": "Ecwid-Storefront/1.0"
        })

    def fetch(
        self,
        method: str,
        path: str,
        storefront: bool = False,
        query: Optional[QueryParams] = None,
        headers: Optional[Dict[str, str]] = None,
        tags: Optional[List[str]] = None,
        payload: Any = None,
        cache: bool = True
    ) -> EcwidResponse:
        """
        Send a request to one of the Ecwid APIs.

        Tagged GET requests are answered from the cache when possible.

        Args:
            method: HTTP method
            path: Path below the store endpoint, e.g. "/products"
            storefront: Use the storefront API instead of the admin API
            query: Query parameters; list values repeat the key
            headers: Extra headers; may override Authorization
            tags: Cache tags for the response
            payload: JSON body
            cache: Allow caching of this request

        Returns:
            EcwidResponse with status and decoded body (None if not JSON)

        Raises:
            EcwidAPIError: On transport errors or an error body
        """
        base = self.storefront_api_endpoint if storefront else self.api_endpoint
        url = base + path
        params = self._encode_query(query)

        cache_key = None
        if cache and tags and method.upper() == 'GET':
            cache_key = self._cache_key(method, url, params)
            cached = self.cache.get(cache_key)
            if cached is not None:
                return cached

        request_headers = {"Authorization": f"Bearer {self.api_key}"}
        if headers:
            request_headers.update(headers)

        try:
            response = self.session.request(
                method.upper(),
                url,
                params=params,
                json=payload,
                headers=request_headers,
                timeout=self.timeout
            )
        except requests.RequestException as e:
            raise EcwidAPIError(f"Ecwid API error: {str(e)}")

        try:
            body = response.json()
        except ValueError:
            body = None

        if isinstance(body, dict) and body.get('errors'):
            error = body['errors'][0]
            log_with_context(
                logger, "WARNING",
                "Ecwid API returned errors",
                path=path,
                status=response.status_code,
                errors=body['errors']
            )
            if isinstance(error, dict):
                raise EcwidAPIError(
                    error.get('message') or str(error),
                    status=error.get('status') or response.status_code or 500
                )
            raise EcwidAPIError(str(error), status=response.status_code or 500)

        result = EcwidResponse(status=response.status_code, body=body)

        if cache_key and response.ok:
            self.cache.set(cache_key, result, tags)

        return result

    def revalidate_tag(self, tag: str) -> int:
        """Drop cached responses labelled with tag."""
        dropped = self.cache.revalidate_tag(tag)
        log_with_context(
            logger, "INFO",
            "Revalidated cache tag",
            tag=tag,
            dropped=dropped
        )
        return dropped

    @staticmethod
    def _encode_query(query: Optional[QueryParams]) -> List[tuple]:
        params = []
        for key, values in (query or {}).items():
            if isinstance(values, (list, tuple)):
                params.extend((key, value) for value in values)
            else:
                params.append((key, values))
        return params

    @staticmethod
    def _cache_key(method: str, url: str, params: List[tuple]) -> str:
        return json.dumps([method.upper(), url, sorted(params)])
