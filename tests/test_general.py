from decimal import Decimal

from conftest import FakeClient, labels, make_state, scrape, series

from cosmos_exporter.errors import UpstreamUnavailable
from cosmos_exporter.exporter import create_app
from cosmos_exporter.types import Coin, Pool


def _client(**overrides):
    results = dict(
        pool=Pool(bonded_tokens=Decimal("1500000000000"), not_bonded_tokens=Decimal("25000000000")),
        community_pool=[Coin("uatom", Decimal("123456.789"))],
        total_supply=[Coin("uatom", Decimal("300000000000000")), Coin("stake", Decimal("42"))],
        inflation=Decimal("0.13"),
        annual_provisions=Decimal("39000000000000"),
    )
    results.update(overrides)
    return FakeClient(**results)


def test_general_metrics():
    status, samples = scrape(make_state(_client()), "/metrics/general")
    assert status == 200
    assert series(samples, "cosmos_pool_bonded_tokens") == {labels(): 1500000}
    assert series(samples, "cosmos_pool_not_bonded_tokens") == {labels(): 25000}
    assert series(samples, "cosmos_general_supply_total") == {
        labels(denom="uatom"): 300000000,
        labels(denom="stake"): 4.2e-5,
    }
    assert series(samples, "cosmos_general_community_pool") == {labels(denom="uatom"): 123456.789 / 1e6}
    assert series(samples, "cosmos_general_inflation") == {labels(): 0.13}
    assert series(samples, "cosmos_general_annual_provisions") == {labels(denom="atom"): 39000000}


def test_chain_id_label_everywhere():
    _, samples = scrape(make_state(_client(), chain_id="testchain"), "/metrics/general")
    assert samples
    assert all(dict(sample_labels)["chain_id"] == "testchain" for _, sample_labels in samples)


def test_pool_failure_leaves_other_metrics():
    client = _client(pool=UpstreamUnavailable("/cosmos.staking.v1beta1.Query/Pool", "DEADLINE_EXCEEDED"))
    status, samples = scrape(make_state(client), "/metrics/general")
    assert status == 200
    assert series(samples, "cosmos_pool_bonded_tokens") == {}
    assert series(samples, "cosmos_pool_not_bonded_tokens") == {}
    assert series(samples, "cosmos_general_inflation") == {labels(): 0.13}
    assert series(samples, "cosmos_general_community_pool")
    assert series(samples, "cosmos_general_supply_total")
    assert series(samples, "cosmos_general_annual_provisions")


def test_successive_scrapes_are_identical():
    state = make_state(_client())
    assert scrape(state, "/metrics/general") == scrape(state, "/metrics/general")


def test_unknown_endpoint():
    status, _ = scrape(make_state(_client()), "/metrics/unknown")
    assert status == 404


def test_text_exposition_content_type():
    response = create_app(make_state(_client())).test_client().get("/metrics/general")
    content_type = response.headers["Content-Type"]
    assert content_type.startswith("text/plain")
    assert "version=0.0.4" in content_type
    assert content_type.count("charset") == 1
