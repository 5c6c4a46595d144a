"""
Endpoint Request Builders
-------------------------
One pure function per RajaOngkir endpoint. Each returns a fresh
EndpointRequest; nothing here touches the network.

Rules:
- A parameter whose value is None is left out, never sent empty
- GET endpoints carry params in the query string
- POST endpoints carry params as a form-encoded body
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Sequence, Union

DEFAULT_WEIGHT = 1000  # grams

# originType / destinationType values the cost endpoint understands
LOCATION_TYPES = ("city", "subdistrict")

# Several couriers are requested at once as "jne:pos:tiki"
COURIER_SEPARATOR = ":"

Courier = Union[str, Sequence[str]]


@dataclass(frozen=True)
class EndpointRequest:
    """Description of one outgoing call."""
    method: str
    path: str
    params: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_form(self) -> bool:
        """POST requests send params as a form body."""
        return self.method == "POST"


def compact(**params: Any) -> Dict[str, Any]:
    """Drop parameters that were not provided."""
    return {name: value for name, value in params.items() if value is not None}


def courier_code(courier: Optional[Courier]) -> Optional[str]:
    """Join a sequence of courier codes with ':'; pass strings through."""
    if courier is None or isinstance(courier, str):
        return courier
    return COURIER_SEPARATOR.join(courier)


def location_type(value: Optional[str]) -> Optional[str]:
    """Return value if the cost endpoint accepts it, None otherwise."""
    return value if value in LOCATION_TYPES else None


def province(province_id=None) -> EndpointRequest:
    return EndpointRequest("GET", "province", compact(province=province_id))


def city(province_id=None, city_id=None) -> EndpointRequest:
    return EndpointRequest("GET", "city", compact(province=province_id, id=city_id))


def subdistrict(city_id, subdistrict_id=None) -> EndpointRequest:
    """Subdistricts of a city (pro accounts)."""
    return EndpointRequest("GET", "subdistrict", compact(city=city_id, id=subdistrict_id))


def cost(
    origin,
    destination,
    weight=DEFAULT_WEIGHT,
    courier: Optional[Courier] = None,
    origin_type: Optional[str] = None,
    destination_type: Optional[str] = None,
) -> EndpointRequest:
    """
    Domestic shipping cost.

    origin_type and destination_type are only sent when they are exactly
    "city" or "subdistrict"; any other value is dropped.
    """
    return EndpointRequest("POST", "cost", compact(
        origin=origin,
        destination=destination,
        weight=weight,
        courier=courier_code(courier),
        originType=location_type(origin_type),
        destinationType=location_type(destination_type),
    ))


def international_origin(city_id=None, province_id=None) -> EndpointRequest:
    return EndpointRequest(
        "GET", "v2/internationalOrigin", compact(id=city_id, province=province_id)
    )


def international_destination(country_id=None) -> EndpointRequest:
    return EndpointRequest("GET", "v2/internationalDestination", compact(id=country_id))


def international_cost(
    origin,
    destination,
    weight=DEFAULT_WEIGHT,
    courier: Optional[Courier] = None,
) -> EndpointRequest:
    return EndpointRequest("POST", "v2/internationalCost", compact(
        origin=origin,
        destination=destination,
        weight=weight,
        courier=courier_code(courier),
    ))


def waybill(waybill_number, courier: Courier) -> EndpointRequest:
    """Tracking status of one shipment."""
    return EndpointRequest("POST", "waybill", compact(
        waybill=waybill_number,
        courier=courier_code(courier),
    ))
