"""Payment Gate — requirement building, price conversion, and requirement matching."""

import pytest
from starlette.requests import Request

from wall.api.payment_gate import PaymentGate, build_requirements, price_to_atomic
from wall.config import Settings
from wall.core.errors import PaymentRequiredError
from tests.mock_facilitator import MockFacilitator, build_payment_header


def _request(headers: dict | None = None) -> Request:
    raw = [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()]
    return Request({
        "type": "http", "method": "GET", "scheme": "http", "path": "/wall-paid",
        "query_string": b"pendingId=abc", "headers": raw,
        "server": ("wall", 80), "root_path": "",
    })


@pytest.mark.parametrize("price,atomic", [
    ("$0.001", "1000"), ("$1", "1000000"), ("0.25", "250000"), (" $0.01 ", "10000"),
])
def test_price_to_atomic(price, atomic):
    amount, asset, domain = price_to_atomic(price, "base-sepolia")
    assert amount == atomic
    assert asset.startswith("0x")
    assert set(domain) >= {"name", "version"}


@pytest.mark.parametrize("price", ["free", "$0", "-1", ""])
def test_bad_price_rejected(price):
    with pytest.raises(ValueError):
        price_to_atomic(price, "base-sepolia")


def test_requirements_use_configured_terms():
    settings = Settings(network="base", seller_address="0xseller", message_price="$0.002")
    dumped = build_requirements(settings, "http://wall/wall-paid").model_dump(by_alias=True)
    assert dumped["scheme"] == "exact"
    assert dumped["network"] == "base"
    assert dumped["payTo"] == "0xseller"
    assert dumped["maxAmountRequired"] == "2000"
    assert dumped["resource"] == "http://wall/wall-paid"
    assert dumped["asset"].startswith("0x")


def test_networks_have_distinct_assets():
    mainnet = build_requirements(Settings(network="base"), "http://wall/wall-paid")
    testnet = build_requirements(Settings(network="base-sepolia"), "http://wall/wall-paid")
    assert mainnet.asset != testnet.asset


def test_unknown_network_rejected():
    with pytest.raises(ValueError):
        build_requirements(Settings(network="dogechain"), "http://wall/wall-paid")


async def test_resource_drops_query_string():
    gate = PaymentGate(MockFacilitator(), Settings())
    with pytest.raises(PaymentRequiredError) as exc_info:
        await gate.require(_request())
    (accepts,) = exc_info.value.accepts
    assert accepts.resource == "http://wall/wall-paid"


async def test_payment_for_other_network_is_not_verified():
    facilitator = MockFacilitator()
    gate = PaymentGate(facilitator, Settings(network="base-sepolia"))
    header = build_payment_header(network="base")

    with pytest.raises(PaymentRequiredError) as exc_info:
        await gate.require(_request({"X-PAYMENT": header}))
    assert "matching" in exc_info.value.message
    assert facilitator.verify_calls == []


async def test_verified_payment_carries_matched_requirements():
    facilitator = MockFacilitator()
    gate = PaymentGate(facilitator, Settings())
    verified = await gate.require(_request({"X-PAYMENT": build_payment_header()}))

    (payment, requirements) = facilitator.verify_calls[0]
    assert verified.payment is payment
    assert verified.requirements is requirements
    assert requirements.network == "base-sepolia"
