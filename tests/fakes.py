"""
tests.fakes

Canned NHTSA payloads and a MockTransport-backed client for tests.
"""

from __future__ import annotations

from typing import Any, Callable

import httpx

HONDA_VIN = "1HGCM82633A004352"
TESLA_VIN = "5YJ3E1EA7KF317000"
FORD_VIN = "1FTFW1ET5DFC10312"

VPIC_HOST = "vpic.nhtsa.dot.gov"
NHTSA_HOST = "api.nhtsa.gov"


def decode_payload(attrs: dict | None = None, **named: str) -> dict:
    """vPIC decode body.

    Keyword names use "_" for spaces ("Model_Year" -> "Model Year"); pass a dict
    for variable names that are not identifiers.
    """
    attrs = dict(attrs or {})
    attrs.update({name.replace("_", " "): value for name, value in named.items()})
    return {
        "Count": len(attrs),
        "Results": [
            {"Variable": name, "Value": value, "VariableId": i}
            for i, (name, value) in enumerate(attrs.items())
        ],
    }


HONDA_DECODE = decode_payload(
    Make="HONDA",
    Model="ACCORD",
    Model_Year="2003",
    Trim="EX-V6",
    Error_Code="0",
    Doors="Not Applicable",
    Plant_City="",
)


def recall_row(n: int) -> dict:
    return {
        "NHTSACampaignNumber": f"03V{n:03d}000",
        "Component": "AIR BAGS",
        "Summary": f"Recall {n}",
        "Consequence": "Injury risk",
        "Remedy": "Dealers will replace the inflator",
        "Manufacturer": "Honda (American Honda Motor Co.)",
        "ReportReceivedDate": "01/01/2003",
    }


def complaint_row(n: int, summary: str = "Brakes failed") -> dict:
    return {
        "odiNumber": 11000000 + n,
        "components": "SERVICE BRAKES",
        "summary": summary,
        "crash": False,
        "fire": False,
        "injuries": 0,
        "deaths": 0,
        "dateOfIncident": "03/15/2021",
        "dateComplaintFiled": "04/01/2021",
    }


Handler = Callable[[httpx.Request], Any]


class FakeNHTSA:
    """Routes requests by (host, first path segment) and records every request."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._routes: dict[tuple[str, str], Handler] = {}

    def route(self, host: str, path_prefix: str, handler: Handler) -> None:
        self._routes[(host, path_prefix)] = handler

    def json(self, host: str, path_prefix: str, body: Any, status_code: int = 200) -> None:
        self.route(host, path_prefix, lambda request: httpx.Response(status_code, json=body))

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        for (host, prefix), handler in self._routes.items():
            if request.url.host == host and request.url.path.startswith(prefix):
                response = handler(request)
                if not isinstance(response, httpx.Response):
                    response = await response
                return response
        return httpx.Response(404, json={"message": "no route"})

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self))

    def requests_to(self, path_prefix: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path.startswith(path_prefix)]
