"""
UptimeRobot Upstream
====================

Builds the form-encoded getMonitors request and maps the UptimeRobot response
back to either parsed JSON or a ProxyError.

The API key is injected here and never leaves the server: it is not logged
and never appears in anything returned to the client.
"""

import json
import logging
from typing import Any, Dict, Mapping, Optional

import httpx

from ..errors import ConfigurationError, ProxyError, UnexpectedError, UpstreamError

logger = logging.getLogger("uptime_proxy.proxy.upstream")

FORM_HEADERS = {"Content-Type": "application/x-www-form-urlencoded"}

# Fixed getMonitors options, sent on every request unless the client overrides them.
DEFAULT_PARAMETERS: Dict[str, str] = {
    "format": "json",
    "logs": "1",
    "response_times": "1",
    "all_time_uptime_ratio": "1",
}


def create_upstream_client(
    timeout: Optional[float] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    """
    Create the shared HTTP client for UptimeRobot calls.

    Redirects are followed and no timeout applies unless one is configured.

    Args:
        timeout: Seconds to wait for UptimeRobot, or None for no limit
        transport: Optional transport override (tests use httpx.MockTransport)
    """
    return httpx.AsyncClient(
        timeout=timeout,
        follow_redirects=True,
        transport=transport,
    )


def flatten_value(value: Any) -> str:
    """
    Convert a JSON value to a form parameter string.

    Mirrors how a browser form encoder stringifies values, so that
    ``{"monitors": [1, 2]}`` becomes ``monitors=1,2``.
    """
    if isinstance(value, str):
        return value
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, list):
        return ",".join("" if item is None else flatten_value(item) for item in value)
    return json.dumps(value, separators=(",", ":"))


def parse_client_request(raw_body: bytes) -> Dict[str, Any]:
    """
    Parse the inbound body into a ClientRequest mapping.

    Raises:
        ValueError: If the body is not JSON or not a JSON object
    """
    payload = json.loads(raw_body)

    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ValueError(
            f"request body must be a JSON object, got {type(payload).__name__}"
        )
    return payload


def build_upstream_parameters(
    api_key: str,
    client_request: Mapping[str, Any],
    protect_api_key: bool = False,
) -> Dict[str, str]:
    """
    Merge the fixed getMonitors parameters with client overrides.

    Client fields win on key collision, including ``api_key`` and ``format``,
    unless ``protect_api_key`` is set, in which case the configured key is
    always sent.

    Args:
        api_key: Configured UptimeRobot API key
        client_request: Parsed inbound JSON object
        protect_api_key: Ignore a client-supplied api_key

    Returns:
        Ordered mapping of parameter name to string value
    """
    parameters: Dict[str, str] = {"api_key": api_key, **DEFAULT_PARAMETERS}

    for key, value in client_request.items():
        parameters[str(key)] = flatten_value(value)

    if protect_api_key:
        if parameters["api_key"] != api_key:
            logger.warning("Ignoring client-supplied api_key override")
        parameters["api_key"] = api_key

    return parameters


async def fetch_monitors(
    client: httpx.AsyncClient,
    url: str,
    api_key: Optional[str],
    raw_body: bytes,
    protect_api_key: bool = False,
) -> Any:
    """
    Forward one get-monitors request to UptimeRobot.

    Flow:
    1. Fail with ConfigurationError if no API key is configured
    2. Parse the inbound body as a JSON object
    3. Merge fixed parameters with client overrides
    4. POST the form-encoded parameters upstream
    5. Raise UpstreamError for non-2xx responses
    6. Return the parsed upstream JSON

    Raises:
        ConfigurationError: No API key configured (upstream is not contacted)
        UpstreamError: UptimeRobot returned a non-2xx status
        UnexpectedError: Any other failure
    """
    if not api_key:
        logger.error("UptimeRobot API key is not configured")
        raise ConfigurationError()

    try:
        client_request = parse_client_request(raw_body)
        parameters = build_upstream_parameters(api_key, client_request, protect_api_key)

        logger.info(
            "Proxying getMonitors request to UptimeRobot",
            extra={"override_keys": sorted(client_request.keys())},
        )

        response = await client.post(url, data=parameters, headers=FORM_HEADERS)

        if not response.is_success:
            error_text = response.text
            logger.error(
                f"UptimeRobot API error: {response.status_code} {error_text}",
                extra={"status_code": response.status_code},
            )
            raise UpstreamError(response.status_code, error_text)

        return response.json()

    except ProxyError:
        raise

    except Exception as e:
        logger.error(f"Proxy function error: {e}", exc_info=True)
        raise UnexpectedError.from_exception(e) from e
