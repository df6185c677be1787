#!/usr/bin/env python3

import logging
import sys
import time

import grpc
from flask import Flask, Response, request
from prometheus_client.exposition import CONTENT_TYPE_PLAIN_0_0_4

from .config import load_config
from .errors import BadRequest, ExporterError
from .handlers import ENDPOINTS
from .logs import RequestLogger, setup_logging
from .startup import build_state

logger = logging.getLogger("cosmos_exporter")


def create_app(state):
    app = Flask(__name__)

    def scrape(endpoint, collect):
        def view():
            log = RequestLogger(logger, endpoint=endpoint)
            started = time.time()
            try:
                gauges = collect(state, log, request.args)
            except BadRequest as e:
                log.error("Bad request", extra={"error": str(e)})
                return Response(f"{e}\n", status=400, mimetype="text/plain")
            except ExporterError as e:
                log.error("Could not get primary entity", extra={"error": str(e)})
                return Response(f"{e}\n", status=500, mimetype="text/plain")
            log.info("Request processed", extra={"method": request.method, "request_time": time.time() - started})
            return Response(gauges.render(), content_type=CONTENT_TYPE_PLAIN_0_0_4)
        return view

    for path, collect in ENDPOINTS.items():
        app.add_url_rule(path, endpoint=path, view_func=scrape(path, collect))

    @app.route('/health')
    def health():
        return {"status": "healthy", "timestamp": time.time()}

    @app.route('/')
    def index():
        links = "\n".join(f'        <li><a href="{path}">{path}</a></li>' for path in ENDPOINTS)
        return f"""
    <h1>Cosmos Exporter</h1>
    <p>Available endpoints:</p>
    <ul>
{links}
        <li><a href="/health">/health</a> - Health check</li>
    </ul>
    <h2>Configuration:</h2>
    <ul>
        <li>Chain ID: {state.chain_id}</li>
        <li>Network Type: {state.network_type}</li>
        <li>Denom: {state.denom}</li>
        <li>Denom Coefficient: {state.denom_coefficient}</li>
        <li>Pagination Limit: {state.limit}</li>
    </ul>
    """

    return app


def main(argv=None):
    setup_logging()
    try:
        config = load_config(argv)
    except ExporterError as e:
        logger.critical("Invalid configuration", extra={"error": str(e)})
        return 1
    setup_logging(config.log_level, config.json)

    channel = grpc.insecure_channel(config.node)
    try:
        state = build_state(config, channel=channel)
        host, port = config.listen()
        app = create_app(state)
        logger.info("Listening", extra={"address": config.listen_address, "chain_id": state.chain_id,
                                        "network_type": state.network_type})
        app.run(host=host, port=port, debug=False, threaded=True)
    except ExporterError as e:
        logger.critical("Could not start the exporter", extra={"error": str(e)})
        return 1
    finally:
        channel.close()
    return 0


if __name__ == '__main__':
    sys.exit(main())
