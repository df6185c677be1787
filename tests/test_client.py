from decimal import Decimal

import grpc
import pytest

from cosmos_exporter import protos
from cosmos_exporter.client import UpstreamClient
from cosmos_exporter.errors import MalformedUpstream, NotFound, UpstreamUnavailable
from cosmos_exporter.types import BondStatus, KeyType

STAKING = "cosmos.staking.v1beta1"
ZENROCK = "zrchain.validation"


def _cosmos_validator(**overrides):
    message = protos.message
    fields = dict(
        operator_address="cosmosvaloper1test",
        consensus_pubkey=protos.Any(
            type_url="/cosmos.crypto.ed25519.PubKey",
            value=protos.PubKey(key=b"\x01" * 32).SerializeToString(),
        ),
        jailed=False,
        status=3,
        tokens="1500000000000",
        delegator_shares="1500000000000000000000000000000",
        description=message(f"{STAKING}.Description")(moniker=b"bad\xc3\x28name"),
        commission=message(f"{STAKING}.Commission")(
            commission_rates=message(f"{STAKING}.CommissionRates")(rate="50000000000000000"),
        ),
        min_self_delegation="1",
    )
    fields.update(overrides)
    return message(f"{STAKING}.Validator")(**fields)


def _respond(method, **fields):
    return method, lambda request, context: method.response(**fields)


def test_cosmos_staking_records(grpc_server):
    seen = {}

    def validators(request, context):
        seen["limit"] = request.pagination.limit
        return protos.STAKING["Validators"].response(validators=[_cosmos_validator()])

    grpc_server.add(f"{STAKING}.Query", {
        "Validators": (protos.STAKING["Validators"], validators),
        "Pool": _respond(protos.STAKING["Pool"], pool=protos.message(f"{STAKING}.Pool")(
            bonded_tokens="1500000000000", not_bonded_tokens="25000000000")),
    })
    client = UpstreamClient(grpc_server.start(), tendermint=None, limit=250)

    pool = client.pool()
    assert pool.bonded_tokens == Decimal("1500000000000")
    assert pool.not_bonded_tokens == Decimal("25000000000")

    [validator] = client.validators()
    assert seen["limit"] == 250
    assert validator.moniker == "bad(name"
    assert validator.status == BondStatus.BONDED
    assert validator.tokens == Decimal("1500000000000")
    assert validator.delegator_shares == Decimal("1500000000000")
    assert validator.commission_rate == Decimal("0.05")
    assert validator.consensus_pubkey.key_type == KeyType.ED25519
    assert validator.consensus_pubkey.key == b"\x01" * 32


def test_rpc_errors_become_upstream_unavailable(grpc_server):
    def slow(request, context):
        context.abort(grpc.StatusCode.DEADLINE_EXCEEDED, "too slow")

    grpc_server.add(f"{STAKING}.Query", {"Pool": (protos.STAKING["Pool"], slow)})
    client = UpstreamClient(grpc_server.start(), tendermint=None, limit=10)
    with pytest.raises(UpstreamUnavailable) as excinfo:
        client.pool()
    assert excinfo.value.call == "/cosmos.staking.v1beta1.Query/Pool"
    assert "DEADLINE_EXCEEDED" in excinfo.value.reason

    with pytest.raises(UpstreamUnavailable) as excinfo:
        client.inflation()
    assert "UNIMPLEMENTED" in excinfo.value.reason


def test_missing_validator_is_not_found(grpc_server):
    grpc_server.add(f"{STAKING}.Query", {"Validator": _respond(protos.STAKING["Validator"])})
    client = UpstreamClient(grpc_server.start(), tendermint=None, limit=10)
    with pytest.raises(NotFound):
        client.validator("cosmosvaloper1test")


def test_distribution_and_mint_legacy_decimals(grpc_server):
    dec_coin = protos.message("cosmos.base.v1beta1.DecCoin")
    grpc_server.add("cosmos.distribution.v1beta1.Query", {
        "CommunityPool": _respond(protos.DISTRIBUTION["CommunityPool"],
                                  pool=[dec_coin(denom="uatom", amount="123456789000000000000000")]),
    })
    grpc_server.add("cosmos.mint.v1beta1.Query", {
        "Inflation": _respond(protos.MINT["Inflation"], inflation=b"130000000000000000"),
    })
    client = UpstreamClient(grpc_server.start(), tendermint=None, limit=10)
    [coin] = client.community_pool()
    assert coin.denom == "uatom"
    assert coin.amount == Decimal("123456.789")
    assert client.inflation() == Decimal("0.13")


def test_zenrock_dialect_parses_strings(grpc_server):
    message = protos.message
    validator = message(f"{ZENROCK}.Validator")(
        operator_address="zenvaloper1test",
        consensus_pubkey=protos.Any(
            type_url="/cosmos.crypto.ed25519.PubKey",
            value=protos.PubKey(key=b"\x02" * 32).SerializeToString(),
        ).SerializeToString(),
        status=3,
        tokens="1000",
        delegator_shares="123.456",
        description=message(f"{ZENROCK}.Description")(moniker=b"zen"),
        commission=message(f"{ZENROCK}.Commission")(
            commission_rates=message(f"{ZENROCK}.CommissionRates")(rate="0.1")),
        min_self_delegation="1",
    )
    grpc_server.add(f"{ZENROCK}.Query", {
        "Validators": _respond(protos.ZENROCK["Validators"], validators=[validator]),
        "Pool": _respond(protos.ZENROCK["Pool"], pool=message(f"{ZENROCK}.Pool")(
            bonded_tokens="12.5", not_bonded_tokens="not-a-number")),
    })
    client = UpstreamClient(grpc_server.start(), tendermint=None, limit=10, network_type="zenrock")

    [record] = client.validators()
    assert record.delegator_shares == Decimal("123.456")
    assert float(record.delegator_shares) == 123.456
    assert record.commission_rate == Decimal("0.1")
    assert record.consensus_pubkey.key == b"\x02" * 32

    with pytest.raises(MalformedUpstream):
        client.pool()


def test_redelegations_use_standard_staking_on_zenrock(grpc_server):
    seen = {}

    def redelegations(request, context):
        seen["src"] = request.src_validator_addr
        redelegation = protos.message(f"{STAKING}.Redelegation")(
            delegator_address="zen1delegator", validator_src_address="zenvaloper1src",
            validator_dst_address="zenvaloper1dst")
        entry = protos.message(f"{STAKING}.RedelegationEntryResponse")(balance="2500")
        return protos.STAKING["Redelegations"].response(redelegation_responses=[
            protos.message(f"{STAKING}.RedelegationResponse")(redelegation=redelegation, entries=[entry, entry]),
        ])

    grpc_server.add(f"{STAKING}.Query", {"Redelegations": (protos.STAKING["Redelegations"], redelegations)})
    client = UpstreamClient(grpc_server.start(), tendermint=None, limit=10, network_type="zenrock")
    [record] = client.redelegations(src_validator="zenvaloper1src")
    assert seen["src"] == "zenvaloper1src"
    assert record.total == Decimal(5000)
    assert record.validator_dst_address == "zenvaloper1dst"
