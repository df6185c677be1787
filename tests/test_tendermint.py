import base64
from unittest.mock import Mock

import pytest
import requests

from cosmos_exporter.errors import MalformedUpstream, UpstreamUnavailable
from cosmos_exporter.tendermint import TendermintRPC


def _response(payload):
    response = Mock()
    response.json.return_value = payload
    response.raise_for_status.return_value = None
    return response


def _validators_page(entries, total):
    return _response({"result": {"validators": entries, "total": str(total)}})


def _entry(address, key, key_type="tendermint/PubKeyEd25519"):
    return {"address": address, "pub_key": {"type": key_type, "value": base64.b64encode(key).decode()}}


def test_status_returns_network():
    session = Mock()
    session.get.return_value = _response({"result": {"node_info": {"network": "cosmoshub-4"}}})
    rpc = TendermintRPC("http://localhost:26657/", session=session)
    assert rpc.status() == "cosmoshub-4"
    session.get.assert_called_once_with("http://localhost:26657/status", params=None, timeout=10)


def test_status_without_network_is_malformed():
    session = Mock()
    session.get.return_value = _response({"result": {"node_info": {}}})
    with pytest.raises(MalformedUpstream):
        TendermintRPC("http://node", session=session).status()


def test_connection_error_is_unavailable():
    session = Mock()
    session.get.side_effect = requests.ConnectionError("refused")
    with pytest.raises(UpstreamUnavailable):
        TendermintRPC("http://node", session=session).status()


def test_validators_are_read_page_by_page_and_lazily():
    key = b"\xaa" + bytes(30) + b"\xbb"
    session = Mock()
    session.get.side_effect = [
        _validators_page([_entry("01", b"\x01" * 32), _entry("02", b"\x02" * 32)], total=3),
        _validators_page([_entry("ABCDEF", key, "cometbft/PubKeyBn254")], total=3),
    ]
    validators = TendermintRPC("http://node", session=session).validators()
    assert session.get.call_count == 0

    entries = list(validators)
    assert [v.address for v in entries] == ["01", "02", "ABCDEF"]
    assert entries[2].pubkey_type == "cometbft/PubKeyBn254"
    assert entries[2].pubkey == key
    pages = [c.kwargs["params"]["page"] for c in session.get.call_args_list]
    assert pages == [1, 2]


def test_bad_pubkey_is_malformed():
    session = Mock()
    session.get.return_value = _validators_page(
        [{"address": "01", "pub_key": {"type": "x", "value": "%%%"}}], total=1)
    with pytest.raises(MalformedUpstream):
        list(TendermintRPC("http://node", session=session).validators())
