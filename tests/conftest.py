import logging
from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal

import grpc
import pytest
from prometheus_client.parser import text_string_to_metric_families

from cosmos_exporter import address
from cosmos_exporter.address import AddressPrefixes, bech32_encode
from cosmos_exporter.errors import UpstreamUnavailable
from cosmos_exporter.exporter import create_app
from cosmos_exporter.logs import RequestLogger
from cosmos_exporter.startup import ExporterState
from cosmos_exporter.types import BondStatus, ConsensusPubkey, KeyType, Validator


@pytest.fixture(autouse=True)
def cosmos_prefixes(monkeypatch):
    monkeypatch.setattr(address, "_prefixes", AddressPrefixes.from_base("cosmos"))


def valoper(seed=1):
    return bech32_encode("cosmosvaloper", bytes([seed]) * 20)


def account(seed=1):
    return bech32_encode("cosmos", bytes([seed]) * 20)


def make_validator(seed, shares, status=BondStatus.BONDED, jailed=False, moniker=None, pubkey=None):
    if pubkey is None:
        pubkey = ConsensusPubkey(KeyType.ED25519, bytes([seed]) * 32)
    return Validator(
        operator_address=valoper(seed),
        moniker=moniker if moniker is not None else f"validator-{seed}",
        consensus_pubkey=pubkey,
        jailed=jailed,
        status=status,
        tokens=Decimal(shares) * 1000000,
        delegator_shares=Decimal(shares),
        min_self_delegation=Decimal(1),
        commission_rate=Decimal("0.05"),
    )


class FakeClient:
    """Stands in for UpstreamClient; results are values, callables or exceptions."""

    def __init__(self, **results):
        self.results = results
        self.calls = []

    def _get(self, name, *args, **kwargs):
        self.calls.append((name, args, kwargs))
        if name not in self.results:
            raise UpstreamUnavailable(name, "UNIMPLEMENTED")
        result = self.results[name]
        if isinstance(result, Exception):
            raise result
        if callable(result):
            return result(*args, **kwargs)
        return result

    def called(self, name):
        return [c for c in self.calls if c[0] == name]

    def pool(self):
        return self._get("pool")

    def validators(self):
        return self._get("validators")

    def validator(self, address):
        return self._get("validator", address)

    def validator_delegations(self, address):
        return self._get("validator_delegations", address)

    def delegator_delegations(self, address):
        return self._get("delegator_delegations", address)

    def redelegations(self, src_validator=None, delegator=None):
        return self._get("redelegations", src_validator=src_validator, delegator=delegator)

    def unbonding_delegations(self, validator=None, delegator=None):
        return self._get("unbonding_delegations", validator=validator, delegator=delegator)

    def params(self, timeout=None):
        return self._get("params")

    def total_supply(self):
        return self._get("total_supply")

    def all_balances(self, address):
        return self._get("all_balances", address)

    def community_pool(self):
        return self._get("community_pool")

    def inflation(self):
        return self._get("inflation")

    def annual_provisions(self):
        return self._get("annual_provisions")

    def signing_info(self, consensus_address):
        return self._get("signing_info", consensus_address)

    def signing_infos(self):
        return self._get("signing_infos")

    def validator_commission(self, address):
        return self._get("validator_commission", address)

    def validator_outstanding_rewards(self, address):
        return self._get("validator_outstanding_rewards", address)

    def delegation_total_rewards(self, address):
        return self._get("delegation_total_rewards", address)

    def mint_params(self, timeout=None):
        return self._get("mint_params")

    def slashing_params(self):
        return self._get("slashing_params")

    def distribution_params(self):
        return self._get("distribution_params")

    def denoms_metadata(self):
        return self._get("denoms_metadata")

    def cosmos_staking_params(self, timeout=None):
        return self._get("cosmos_staking_params")

    def bank_params(self, timeout=None):
        return self._get("bank_params")

    def zenrock_params(self, timeout=None):
        return self._get("zenrock_params")

    def tendermint_status(self):
        return self._get("tendermint_status")

    def tendermint_validators(self):
        return iter(self._get("tendermint_validators"))


def make_state(client, denom_coefficient=1e6, chain_id="testchain", denom="atom"):
    return ExporterState(
        client=client,
        chain_id=chain_id,
        denom=denom,
        denom_coefficient=denom_coefficient,
        network_type="cosmos",
        limit=1000,
    )


def scrape(state, path, **params):
    """GET ``path`` and return (status, {(name, labels): value})."""
    app = create_app(state)
    response = app.test_client().get(path, query_string=params)
    if response.status_code != 200:
        return response.status_code, {}
    samples = {}
    for family in text_string_to_metric_families(response.get_data(as_text=True)):
        for sample in family.samples:
            samples[(sample.name, frozenset(sample.labels.items()))] = sample.value
    return response.status_code, samples


def series(samples, name):
    """{labels dict without chain_id as a frozenset: value} of one metric."""
    return {
        frozenset((k, v) for k, v in labels if k != "chain_id"): value
        for (sample_name, labels), value in samples.items()
        if sample_name == name
    }


def labels(**kwargs):
    return frozenset(kwargs.items())


@pytest.fixture
def log():
    return RequestLogger(logging.getLogger("cosmos_exporter.tests"))


@pytest.fixture
def grpc_server():
    """In-process gRPC server; ``add(service, {method: handler})`` then ``start()``."""

    class Server:
        def __init__(self):
            self.server = grpc.server(ThreadPoolExecutor(max_workers=4))
            self.port = self.server.add_insecure_port("127.0.0.1:0")

        def add(self, service, methods):
            handlers = {
                name: grpc.unary_unary_rpc_method_handler(
                    behaviour,
                    request_deserializer=method.request.FromString,
                    response_serializer=method.response.SerializeToString,
                )
                for name, (method, behaviour) in methods.items()
            }
            self.server.add_generic_rpc_handlers((grpc.method_handlers_generic_handler(service, handlers),))

        def start(self):
            self.server.start()
            return grpc.insecure_channel(f"127.0.0.1:{self.port}")

    server = Server()
    yield server
    server.server.stop(None)
