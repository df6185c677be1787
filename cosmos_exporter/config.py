"""Command line flags and the optional config file.

Values are resolved as defaults, then the config file, then explicit flags.
The config file uses dotenv syntax; keys are the flag names with dashes or
underscores, in any case (``DENOM_EXPONENT=6``, ``tendermint-rpc=...``).
"""

import argparse
from dataclasses import dataclass, fields
from typing import Optional

from dotenv import dotenv_values

from .address import AddressPrefixes
from .client import NETWORK_TYPES
from .errors import ConfigInvalid
from .logs import LEVELS

DEFAULTS = {
    "config": None,
    "denom": None,
    "denom_coefficient": None,
    "denom_exponent": None,
    "listen_address": ":9300",
    "node": "localhost:9090",
    "tendermint_rpc": "http://localhost:26657",
    "log_level": "info",
    "json": False,
    "limit": 1000,
    "network_type": "",
    "chain_id": "",
    "bech_prefix": "persistence",
    "bech_account_prefix": None,
    "bech_account_pubkey_prefix": None,
    "bech_validator_prefix": None,
    "bech_validator_pubkey_prefix": None,
    "bech_consensus_node_prefix": None,
    "bech_consensus_node_pubkey_prefix": None,
}


def _bool(value):
    if isinstance(value, bool):
        return value
    if value.strip().lower() in ("1", "true", "yes", "on"):
        return True
    if value.strip().lower() in ("0", "false", "no", "off", ""):
        return False
    raise ValueError(f"not a boolean: {value!r}")


def _uint(value):
    number = int(value)
    if number < 0:
        raise ValueError(f"must not be negative: {value!r}")
    return number


CONVERTERS = {
    "denom_coefficient": float,
    "denom_exponent": _uint,
    "limit": _uint,
    "json": _bool,
}


@dataclass(frozen=True)
class ExporterConfig:
    config: Optional[str]
    denom: Optional[str]
    denom_coefficient: Optional[float]
    denom_exponent: Optional[int]
    listen_address: str
    node: str
    tendermint_rpc: str
    log_level: str
    json: bool
    limit: int
    network_type: str
    chain_id: str
    bech_prefix: str
    bech_account_prefix: Optional[str]
    bech_account_pubkey_prefix: Optional[str]
    bech_validator_prefix: Optional[str]
    bech_validator_pubkey_prefix: Optional[str]
    bech_consensus_node_prefix: Optional[str]
    bech_consensus_node_pubkey_prefix: Optional[str]

    def prefixes(self) -> AddressPrefixes:
        derived = AddressPrefixes.from_base(self.bech_prefix)
        return AddressPrefixes(
            account=self.bech_account_prefix or derived.account,
            account_pubkey=self.bech_account_pubkey_prefix or derived.account_pubkey,
            validator=self.bech_validator_prefix or derived.validator,
            validator_pubkey=self.bech_validator_pubkey_prefix or derived.validator_pubkey,
            consensus_node=self.bech_consensus_node_prefix or derived.consensus_node,
            consensus_node_pubkey=self.bech_consensus_node_pubkey_prefix or derived.consensus_node_pubkey,
        )

    def listen(self):
        """(host, port) of the listen address; an empty host binds every interface."""
        host, sep, port = self.listen_address.rpartition(":")
        if not sep:
            raise ConfigInvalid(f"listen address {self.listen_address!r} has no port")
        try:
            port = int(port)
        except ValueError:
            raise ConfigInvalid(f"invalid port in listen address {self.listen_address!r}") from None
        return host.strip("[]") or "0.0.0.0", port


def build_parser():
    parser = argparse.ArgumentParser(prog="cosmos-exporter", description="Prometheus exporter for Cosmos SDK chains")
    parser.add_argument("--config", help="Config file path; explicit flags override its values")
    parser.add_argument("--denom", help="Cosmos coin denom")
    parser.add_argument("--denom-coefficient", type=float, help="Denom coefficient (default 1)")
    parser.add_argument("--denom-exponent", type=_uint, help="Denom exponent")
    parser.add_argument("--listen-address", help="The address this exporter would listen on (default :9300)")
    parser.add_argument("--node", help="RPC node address (default localhost:9090)")
    parser.add_argument("--tendermint-rpc", help="Tendermint RPC address (default http://localhost:26657)")
    parser.add_argument("--log-level", help="Logging level (default info)")
    parser.add_argument("--json", action="store_const", const=True, help="Output logs as JSON")
    parser.add_argument("--limit", type=_uint, help="Pagination limit for gRPC requests (default 1000)")
    parser.add_argument("--network-type", help="Network type: cosmos or zenrock; autodetected when empty")
    parser.add_argument("--chain-id", help="Chain id; discovered from Tendermint RPC when empty")
    parser.add_argument("--bech-prefix", help="Bech32 global prefix (default persistence)")
    parser.add_argument("--bech-account-prefix", help="Bech32 account prefix")
    parser.add_argument("--bech-account-pubkey-prefix", help="Bech32 pubkey prefix")
    parser.add_argument("--bech-validator-prefix", help="Bech32 validator prefix")
    parser.add_argument("--bech-validator-pubkey-prefix", help="Bech32 validator pubkey prefix")
    parser.add_argument("--bech-consensus-node-prefix", help="Bech32 consensus node prefix")
    parser.add_argument("--bech-consensus-node-pubkey-prefix", help="Bech32 consensus node pubkey prefix")
    return parser


def read_config_file(path):
    try:
        with open(path) as f:
            raw = dotenv_values(stream=f)
    except OSError as e:
        raise ConfigInvalid(f"could not read config file {path}: {e}") from e
    values = {}
    for key, value in raw.items():
        name = key.strip().lower().replace("-", "_")
        if name not in DEFAULTS or name == "config":
            raise ConfigInvalid(f"unknown key {key!r} in config file {path}")
        if value is None:
            continue
        converter = CONVERTERS.get(name)
        try:
            values[name] = converter(value) if converter else value
        except ValueError as e:
            raise ConfigInvalid(f"invalid value for {key!r} in config file {path}: {e}") from e
    return values


def load_config(argv=None) -> ExporterConfig:
    args = build_parser().parse_args(argv)
    explicit = {k: v for k, v in vars(args).items() if v is not None}

    values = dict(DEFAULTS)
    if args.config:
        values.update(read_config_file(args.config))
    values.update(explicit)

    config = ExporterConfig(**{f.name: values[f.name] for f in fields(ExporterConfig)})
    validate(config)
    return config


def validate(config):
    if config.denom_coefficient is not None and config.denom_exponent is not None:
        raise ConfigInvalid("denom-coefficient and denom-exponent are mutually exclusive")
    if config.denom_coefficient is not None and config.denom_coefficient <= 0:
        raise ConfigInvalid("denom-coefficient must be positive")
    if config.log_level.lower() not in LEVELS:
        raise ConfigInvalid(f"unknown log level {config.log_level!r}")
    if config.network_type and config.network_type not in NETWORK_TYPES:
        raise ConfigInvalid(f"network type must be one of {', '.join(NETWORK_TYPES)}, got {config.network_type!r}")
    if config.limit == 0:
        raise ConfigInvalid("limit must be positive")
    if not config.bech_prefix:
        raise ConfigInvalid("bech-prefix must not be empty")
    config.listen()
