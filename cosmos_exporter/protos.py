"""Protobuf messages for the Cosmos SDK and zenrock query services.

The messages are declared at import time through the descriptor API into a
private pool, so the exporter does not need generated ``_pb2`` modules.
Only the fields the exporter reads are declared; unknown fields are kept
by the runtime and ignored.

Free-text fields such as the moniker are declared as ``bytes`` so that a
payload with invalid UTF-8 still decodes.
"""

from google.protobuf import any_pb2, descriptor_pb2, descriptor_pool, duration_pb2, message_factory, timestamp_pb2

_F = descriptor_pb2.FieldDescriptorProto

STRING = _F.TYPE_STRING
BYTES = _F.TYPE_BYTES
BOOL = _F.TYPE_BOOL
INT32 = _F.TYPE_INT32
INT64 = _F.TYPE_INT64
UINT32 = _F.TYPE_UINT32
UINT64 = _F.TYPE_UINT64

ANY = ".google.protobuf.Any"
DURATION = ".google.protobuf.Duration"
TIMESTAMP = ".google.protobuf.Timestamp"
PAGE_REQUEST = ".cosmos.base.query.v1beta1.PageRequest"
PAGE_RESPONSE = ".cosmos.base.query.v1beta1.PageResponse"
COIN = ".cosmos.base.v1beta1.Coin"
DEC_COIN = ".cosmos.base.v1beta1.DecCoin"

REPEATED = True

_pool = descriptor_pool.DescriptorPool()
for _wkt in (any_pb2, duration_pb2, timestamp_pb2):
    _pool.AddSerializedFile(_wkt.DESCRIPTOR.serialized_pb)


def _declare(filename, package, messages, dependencies=()):
    """Add one proto3 file to the pool.

    ``messages`` maps a message name to a list of field tuples
    ``(name, number, type[, repeated])`` where ``type`` is a scalar type
    constant or a fully qualified message name starting with a dot.
    """
    proto = descriptor_pb2.FileDescriptorProto(name=filename, package=package, syntax="proto3")
    proto.dependency.extend(dependencies)
    for message_name, fields in messages.items():
        message = proto.message_type.add(name=message_name)
        for field_def in fields:
            name, number, kind = field_def[:3]
            repeated = len(field_def) > 3 and field_def[3]
            field = message.field.add(name=name, number=number)
            field.label = _F.LABEL_REPEATED if repeated else _F.LABEL_OPTIONAL
            if isinstance(kind, str):
                field.type = _F.TYPE_MESSAGE
                field.type_name = kind
            else:
                field.type = kind
    _pool.AddSerializedFile(proto.SerializeToString())


def message(full_name):
    return message_factory.GetMessageClass(_pool.FindMessageTypeByName(full_name))


_declare("cosmos/base/query/v1beta1/pagination.proto", "cosmos.base.query.v1beta1", {
    "PageRequest": [("key", 1, BYTES), ("offset", 2, UINT64), ("limit", 3, UINT64),
                    ("count_total", 4, BOOL), ("reverse", 5, BOOL)],
    "PageResponse": [("next_key", 1, BYTES), ("total", 2, UINT64)],
})

_declare("cosmos/base/v1beta1/coin.proto", "cosmos.base.v1beta1", {
    "Coin": [("denom", 1, STRING), ("amount", 2, STRING)],
    "DecCoin": [("denom", 1, STRING), ("amount", 2, STRING)],
})

_declare("cosmos/crypto/pubkey.proto", "cosmos.crypto", {
    "PubKey": [("key", 1, BYTES)],
})

_COMMON = ["cosmos/base/query/v1beta1/pagination.proto", "cosmos/base/v1beta1/coin.proto"]

_declare("cosmos/staking/v1beta1/query.proto", "cosmos.staking.v1beta1", {
    "Description": [("moniker", 1, BYTES), ("identity", 2, BYTES), ("website", 3, BYTES),
                    ("security_contact", 4, BYTES), ("details", 5, BYTES)],
    "CommissionRates": [("rate", 1, STRING), ("max_rate", 2, STRING), ("max_change_rate", 3, STRING)],
    "Commission": [("commission_rates", 1, ".cosmos.staking.v1beta1.CommissionRates"),
                   ("update_time", 2, TIMESTAMP)],
    "Validator": [("operator_address", 1, STRING), ("consensus_pubkey", 2, ANY), ("jailed", 3, BOOL),
                  ("status", 4, INT32), ("tokens", 5, STRING), ("delegator_shares", 6, STRING),
                  ("description", 7, ".cosmos.staking.v1beta1.Description"),
                  ("unbonding_height", 8, INT64), ("unbonding_time", 9, TIMESTAMP),
                  ("commission", 10, ".cosmos.staking.v1beta1.Commission"),
                  ("min_self_delegation", 11, STRING)],
    "Params": [("unbonding_time", 1, DURATION), ("max_validators", 2, UINT32), ("max_entries", 3, UINT32),
               ("historical_entries", 4, UINT32), ("bond_denom", 5, STRING),
               ("min_commission_rate", 6, STRING)],
    "Pool": [("not_bonded_tokens", 1, STRING), ("bonded_tokens", 2, STRING)],
    "Delegation": [("delegator_address", 1, STRING), ("validator_address", 2, STRING), ("shares", 3, STRING)],
    "DelegationResponse": [("delegation", 1, ".cosmos.staking.v1beta1.Delegation"), ("balance", 2, COIN)],
    "UnbondingDelegationEntry": [("creation_height", 1, INT64), ("completion_time", 2, TIMESTAMP),
                                 ("initial_balance", 3, STRING), ("balance", 4, STRING)],
    "UnbondingDelegation": [("delegator_address", 1, STRING), ("validator_address", 2, STRING),
                            ("entries", 3, ".cosmos.staking.v1beta1.UnbondingDelegationEntry", REPEATED)],
    "RedelegationEntry": [("creation_height", 1, INT64), ("completion_time", 2, TIMESTAMP),
                          ("initial_balance", 3, STRING), ("shares_dst", 4, STRING)],
    "Redelegation": [("delegator_address", 1, STRING), ("validator_src_address", 2, STRING),
                     ("validator_dst_address", 3, STRING),
                     ("entries", 4, ".cosmos.staking.v1beta1.RedelegationEntry", REPEATED)],
    "RedelegationEntryResponse": [("redelegation_entry", 1, ".cosmos.staking.v1beta1.RedelegationEntry"),
                                  ("balance", 4, STRING)],
    "RedelegationResponse": [("redelegation", 1, ".cosmos.staking.v1beta1.Redelegation"),
                             ("entries", 2, ".cosmos.staking.v1beta1.RedelegationEntryResponse", REPEATED)],
    "QueryValidatorsRequest": [("status", 1, STRING), ("pagination", 2, PAGE_REQUEST)],
    "QueryValidatorsResponse": [("validators", 1, ".cosmos.staking.v1beta1.Validator", REPEATED),
                                ("pagination", 2, PAGE_RESPONSE)],
    "QueryValidatorRequest": [("validator_addr", 1, STRING)],
    "QueryValidatorResponse": [("validator", 1, ".cosmos.staking.v1beta1.Validator")],
    "QueryValidatorDelegationsRequest": [("validator_addr", 1, STRING), ("pagination", 2, PAGE_REQUEST)],
    "QueryValidatorDelegationsResponse": [
        ("delegation_responses", 1, ".cosmos.staking.v1beta1.DelegationResponse", REPEATED),
        ("pagination", 2, PAGE_RESPONSE)],
    "QueryValidatorUnbondingDelegationsRequest": [("validator_addr", 1, STRING), ("pagination", 2, PAGE_REQUEST)],
    "QueryValidatorUnbondingDelegationsResponse": [
        ("unbonding_responses", 1, ".cosmos.staking.v1beta1.UnbondingDelegation", REPEATED),
        ("pagination", 2, PAGE_RESPONSE)],
    "QueryDelegatorDelegationsRequest": [("delegator_addr", 1, STRING), ("pagination", 2, PAGE_REQUEST)],
    "QueryDelegatorDelegationsResponse": [
        ("delegation_responses", 1, ".cosmos.staking.v1beta1.DelegationResponse", REPEATED),
        ("pagination", 2, PAGE_RESPONSE)],
    "QueryDelegatorUnbondingDelegationsRequest": [("delegator_addr", 1, STRING), ("pagination", 2, PAGE_REQUEST)],
    "QueryDelegatorUnbondingDelegationsResponse": [
        ("unbonding_responses", 1, ".cosmos.staking.v1beta1.UnbondingDelegation", REPEATED),
        ("pagination", 2, PAGE_RESPONSE)],
    "QueryRedelegationsRequest": [("delegator_addr", 1, STRING), ("src_validator_addr", 2, STRING),
                                  ("dst_validator_addr", 3, STRING), ("pagination", 4, PAGE_REQUEST)],
    "QueryRedelegationsResponse": [
        ("redelegation_responses", 1, ".cosmos.staking.v1beta1.RedelegationResponse", REPEATED),
        ("pagination", 2, PAGE_RESPONSE)],
    "QueryPoolRequest": [],
    "QueryPoolResponse": [("pool", 1, ".cosmos.staking.v1beta1.Pool")],
    "QueryParamsRequest": [],
    "QueryParamsResponse": [("params", 1, ".cosmos.staking.v1beta1.Params")],
}, dependencies=["google/protobuf/any.proto", "google/protobuf/duration.proto",
                 "google/protobuf/timestamp.proto"] + _COMMON)

_declare("cosmos/bank/v1beta1/query.proto", "cosmos.bank.v1beta1", {
    "Params": [("default_send_enabled", 2, BOOL)],
    "DenomUnit": [("denom", 1, STRING), ("exponent", 2, UINT32), ("aliases", 3, STRING, REPEATED)],
    "Metadata": [("description", 1, STRING), ("denom_units", 2, ".cosmos.bank.v1beta1.DenomUnit", REPEATED),
                 ("base", 3, STRING), ("display", 4, STRING), ("name", 5, STRING), ("symbol", 6, STRING)],
    "QueryAllBalancesRequest": [("address", 1, STRING), ("pagination", 2, PAGE_REQUEST)],
    "QueryAllBalancesResponse": [("balances", 1, COIN, REPEATED), ("pagination", 2, PAGE_RESPONSE)],
    "QueryTotalSupplyRequest": [("pagination", 1, PAGE_REQUEST)],
    "QueryTotalSupplyResponse": [("supply", 1, COIN, REPEATED), ("pagination", 2, PAGE_RESPONSE)],
    "QueryParamsRequest": [],
    "QueryParamsResponse": [("params", 1, ".cosmos.bank.v1beta1.Params")],
    "QueryDenomsMetadataRequest": [("pagination", 1, PAGE_REQUEST)],
    "QueryDenomsMetadataResponse": [("metadatas", 1, ".cosmos.bank.v1beta1.Metadata", REPEATED),
                                    ("pagination", 2, PAGE_RESPONSE)],
}, dependencies=_COMMON)

_declare("cosmos/mint/v1beta1/query.proto", "cosmos.mint.v1beta1", {
    "Params": [("mint_denom", 1, STRING), ("inflation_rate_change", 2, STRING), ("inflation_max", 3, STRING),
               ("inflation_min", 4, STRING), ("goal_bonded", 5, STRING), ("blocks_per_year", 6, UINT64)],
    "QueryParamsRequest": [],
    "QueryParamsResponse": [("params", 1, ".cosmos.mint.v1beta1.Params")],
    "QueryInflationRequest": [],
    "QueryInflationResponse": [("inflation", 1, BYTES)],
    "QueryAnnualProvisionsRequest": [],
    "QueryAnnualProvisionsResponse": [("annual_provisions", 1, BYTES)],
})

_declare("cosmos/distribution/v1beta1/query.proto", "cosmos.distribution.v1beta1", {
    "Params": [("community_tax", 1, STRING), ("base_proposer_reward", 2, STRING),
               ("bonus_proposer_reward", 3, STRING), ("withdraw_addr_enabled", 4, BOOL)],
    "ValidatorAccumulatedCommission": [("commission", 1, DEC_COIN, REPEATED)],
    "ValidatorOutstandingRewards": [("rewards", 1, DEC_COIN, REPEATED)],
    "DelegationDelegatorReward": [("validator_address", 1, STRING), ("reward", 2, DEC_COIN, REPEATED)],
    "QueryParamsRequest": [],
    "QueryParamsResponse": [("params", 1, ".cosmos.distribution.v1beta1.Params")],
    "QueryCommunityPoolRequest": [],
    "QueryCommunityPoolResponse": [("pool", 1, DEC_COIN, REPEATED)],
    "QueryValidatorCommissionRequest": [("validator_address", 1, STRING)],
    "QueryValidatorCommissionResponse": [
        ("commission", 1, ".cosmos.distribution.v1beta1.ValidatorAccumulatedCommission")],
    "QueryValidatorOutstandingRewardsRequest": [("validator_address", 1, STRING)],
    "QueryValidatorOutstandingRewardsResponse": [
        ("rewards", 1, ".cosmos.distribution.v1beta1.ValidatorOutstandingRewards")],
    "QueryDelegationTotalRewardsRequest": [("delegator_address", 1, STRING)],
    "QueryDelegationTotalRewardsResponse": [
        ("rewards", 1, ".cosmos.distribution.v1beta1.DelegationDelegatorReward", REPEATED),
        ("total", 2, DEC_COIN, REPEATED)],
}, dependencies=_COMMON)

_declare("cosmos/slashing/v1beta1/query.proto", "cosmos.slashing.v1beta1", {
    "ValidatorSigningInfo": [("address", 1, STRING), ("start_height", 2, INT64), ("index_offset", 3, INT64),
                             ("jailed_until", 4, TIMESTAMP), ("tombstoned", 5, BOOL),
                             ("missed_blocks_counter", 6, INT64)],
    "Params": [("signed_blocks_window", 1, INT64), ("min_signed_per_window", 2, BYTES),
               ("downtime_jail_duration", 3, DURATION), ("slash_fraction_double_sign", 4, BYTES),
               ("slash_fraction_downtime", 5, BYTES)],
    "QueryParamsRequest": [],
    "QueryParamsResponse": [("params", 1, ".cosmos.slashing.v1beta1.Params")],
    "QuerySigningInfoRequest": [("cons_address", 1, STRING)],
    "QuerySigningInfoResponse": [("val_signing_info", 1, ".cosmos.slashing.v1beta1.ValidatorSigningInfo")],
    "QuerySigningInfosRequest": [("pagination", 1, PAGE_REQUEST)],
    "QuerySigningInfosResponse": [("info", 1, ".cosmos.slashing.v1beta1.ValidatorSigningInfo", REPEATED),
                                  ("pagination", 2, PAGE_RESPONSE)],
}, dependencies=["google/protobuf/duration.proto", "google/protobuf/timestamp.proto"] + _COMMON)

# zenrock keeps the staking shapes but sends every number as a plain string
# and timestamps as unix seconds.
_declare("zrchain/validation/query.proto", "zrchain.validation", {
    "Description": [("moniker", 1, BYTES)],
    "CommissionRates": [("rate", 1, STRING), ("max_rate", 2, STRING), ("max_change_rate", 3, STRING)],
    "Commission": [("commission_rates", 1, ".zrchain.validation.CommissionRates"), ("update_time", 2, INT64)],
    "Validator": [("operator_address", 1, STRING), ("consensus_pubkey", 2, BYTES), ("jailed", 3, BOOL),
                  ("status", 4, INT32), ("tokens", 5, STRING), ("delegator_shares", 6, STRING),
                  ("description", 7, ".zrchain.validation.Description"), ("unbonding_height", 8, INT64),
                  ("unbonding_time", 9, INT64), ("commission", 10, ".zrchain.validation.Commission"),
                  ("min_self_delegation", 11, STRING)],
    "Params": [("unbonding_time", 1, INT64), ("max_validators", 2, UINT32), ("max_entries", 3, UINT32),
               ("historical_entries", 4, UINT32), ("bond_denom", 5, STRING)],
    "Pool": [("not_bonded_tokens", 1, STRING), ("bonded_tokens", 2, STRING)],
    "Delegation": [("delegator_address", 1, STRING), ("validator_address", 2, STRING), ("shares", 3, STRING)],
    "DelegationResponse": [("delegation", 1, ".zrchain.validation.Delegation"), ("balance", 2, COIN)],
    "QueryValidatorsRequest": [("status", 1, STRING), ("pagination", 2, PAGE_REQUEST)],
    "QueryValidatorsResponse": [("validators", 1, ".zrchain.validation.Validator", REPEATED),
                                ("pagination", 2, PAGE_RESPONSE)],
    "QueryValidatorRequest": [("validator_addr", 1, STRING)],
    "QueryValidatorResponse": [("validator", 1, ".zrchain.validation.Validator")],
    "QueryValidatorDelegationsRequest": [("validator_addr", 1, STRING), ("pagination", 2, PAGE_REQUEST)],
    "QueryValidatorDelegationsResponse": [
        ("delegation_responses", 1, ".zrchain.validation.DelegationResponse", REPEATED),
        ("pagination", 2, PAGE_RESPONSE)],
    "QueryDelegatorDelegationsRequest": [("delegator_addr", 1, STRING), ("pagination", 2, PAGE_REQUEST)],
    "QueryDelegatorDelegationsResponse": [
        ("delegation_responses", 1, ".zrchain.validation.DelegationResponse", REPEATED),
        ("pagination", 2, PAGE_RESPONSE)],
    "QueryPoolRequest": [],
    "QueryPoolResponse": [("pool", 1, ".zrchain.validation.Pool")],
    "QueryParamsRequest": [],
    "QueryParamsResponse": [("params", 1, ".zrchain.validation.Params")],
}, dependencies=_COMMON)

Any = message("google.protobuf.Any")
PubKey = message("cosmos.crypto.PubKey")
PageRequest = message("cosmos.base.query.v1beta1.PageRequest")


class Method:
    """A unary gRPC method: full path plus request and response classes."""

    def __init__(self, service, name, request, response):
        self.path = f"/{service}/{name}"
        self.request = message(request)
        self.response = message(response)

    def bind(self, channel):
        return channel.unary_unary(
            self.path,
            request_serializer=self.request.SerializeToString,
            response_deserializer=self.response.FromString,
        )


def _query_methods(package, names):
    return {
        name: Method(f"{package}.Query", name, f"{package}.Query{name}Request", f"{package}.Query{name}Response")
        for name in names
    }


STAKING = _query_methods("cosmos.staking.v1beta1", [
    "Validators", "Validator", "ValidatorDelegations", "ValidatorUnbondingDelegations",
    "DelegatorDelegations", "DelegatorUnbondingDelegations", "Redelegations", "Pool", "Params",
])
BANK = _query_methods("cosmos.bank.v1beta1", ["AllBalances", "TotalSupply", "Params", "DenomsMetadata"])
MINT = _query_methods("cosmos.mint.v1beta1", ["Params", "Inflation", "AnnualProvisions"])
DISTRIBUTION = _query_methods("cosmos.distribution.v1beta1", [
    "Params", "CommunityPool", "ValidatorCommission", "ValidatorOutstandingRewards", "DelegationTotalRewards",
])
SLASHING = _query_methods("cosmos.slashing.v1beta1", ["Params", "SigningInfo", "SigningInfos"])
ZENROCK = _query_methods("zrchain.validation", [
    "Validators", "Validator", "ValidatorDelegations", "DelegatorDelegations", "Pool", "Params",
])
