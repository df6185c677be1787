"""Process start: chain id, denom and network type discovery."""

import logging
from dataclasses import dataclass

import grpc

from . import address
from .client import COSMOS, ZENROCK, UpstreamClient
from .errors import ConfigInvalid, ExporterError
from .tendermint import TendermintRPC

logger = logging.getLogger(__name__)

PROBE_TIMEOUT = 5

# chains whose network type is known without probing
KNOWN_NETWORKS = {
    "diamond-1": ZENROCK,
}


@dataclass(frozen=True)
class ExporterState:
    """Everything a handler needs; written once before serving."""

    client: UpstreamClient
    chain_id: str
    denom: str
    denom_coefficient: float
    network_type: str
    limit: int


def resolve_chain_id(config, client) -> str:
    if config.chain_id:
        logger.info("Using provided chain id", extra={"chain_id": config.chain_id})
        return config.chain_id
    try:
        chain_id = client.tendermint_status()
    except ExporterError as e:
        raise ConfigInvalid(f"could not get chain id from Tendermint RPC, set --chain-id: {e}") from e
    logger.info("Got chain id from node_info.network", extra={"chain_id": chain_id})
    return chain_id


def resolve_denom(config, client):
    """Return ``(denom, coefficient)``.

    Flags win; otherwise the first bank denom metadata entry decides, using
    its display unit unless a denom was given.
    """
    if config.denom:
        if config.denom_coefficient is not None:
            logger.info("Using provided denom and coefficient",
                        extra={"denom": config.denom, "coefficient": config.denom_coefficient})
            return config.denom, config.denom_coefficient
        if config.denom_exponent is not None:
            coefficient = float(10 ** config.denom_exponent)
            logger.info("Using provided denom and exponent",
                        extra={"denom": config.denom, "exponent": config.denom_exponent, "coefficient": coefficient})
            return config.denom, coefficient

    try:
        metadatas = client.denoms_metadata()
    except ExporterError as e:
        raise ConfigInvalid(f"could not query denom metadata: {e}") from e
    if not metadatas:
        raise ConfigInvalid(
            "No denom infos. Try running the binary with --denom and --denom-coefficient to set them manually.")

    metadata = metadatas[0]
    denom = config.denom or metadata.display
    for unit in metadata.denom_units:
        logger.debug("Denom info", extra={"denom": unit.denom, "exponent": unit.exponent})
        if unit.denom == denom:
            coefficient = float(10 ** unit.exponent)
            logger.info("Got denom info", extra={"denom": denom, "coefficient": coefficient})
            return denom, coefficient
    raise ConfigInvalid(f"Could not find the denom info for {denom!r}")


def determine_network_type(config, chain_id, client) -> str:
    if config.network_type:
        logger.info("Using provided network type", extra={"network_type": config.network_type})
        return config.network_type
    if chain_id in KNOWN_NETWORKS:
        network_type = KNOWN_NETWORKS[chain_id]
        logger.info("Network type determined by chain id", extra={"chain_id": chain_id, "network_type": network_type})
        return network_type

    probes = [
        ("staking params", COSMOS, client.cosmos_staking_params),
        ("bank params", COSMOS, client.bank_params),
        ("mint params", COSMOS, client.mint_params),
        ("validation params", ZENROCK, client.zenrock_params),
    ]
    for name, network_type, probe in probes:
        try:
            probe(timeout=PROBE_TIMEOUT)
        except ExporterError as e:
            logger.debug(f"Failed to get {name}", extra={"error": str(e)})
            continue
        logger.info("Network type determined by probing", extra={"network_type": network_type, "probe": name})
        return network_type
    raise ConfigInvalid("could not determine network type, set --network-type")


def build_state(config, channel=None, session=None) -> ExporterState:
    address.configure_prefixes(config.prefixes())
    if channel is None:
        channel = grpc.insecure_channel(config.node)
    tendermint = TendermintRPC(config.tendermint_rpc, session=session)

    probe_client = UpstreamClient(channel, tendermint, config.limit)
    chain_id = resolve_chain_id(config, probe_client)
    denom, coefficient = resolve_denom(config, probe_client)
    network_type = determine_network_type(config, chain_id, probe_client)

    client = probe_client if network_type == COSMOS else UpstreamClient(channel, tendermint, config.limit, network_type)
    return ExporterState(
        client=client,
        chain_id=chain_id,
        denom=denom,
        denom_coefficient=coefficient,
        network_type=network_type,
        limit=config.limit,
    )
