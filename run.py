#!/usr/bin/env python3
"""
Entry point for the Room Gateway.

Usage:
    python run.py

Environment Variables:
    FLASK_ENV: development, production or testing (default: development)
    PORT: Port to run on (default: 5000)
    USERS_SERVER_URL: Base URL of the users service
    ROOMS_SERVER_URL: Base URL of the rooms service
    JWT_SECRET: Secret the access tokens are signed with
    LOG_LEVEL: Logging level (default: INFO)
"""
import logging
import os


def run_gateway():
    """Run the gateway service."""
    from gateway.app import create_app

    app = create_app()
    logging.basicConfig(
        level=app.config['LOG_LEVEL'],
        format='%(asctime)s %(levelname)s %(name)s: %(message)s'
    )

    port = app.config['PORT']
    debug = os.getenv('FLASK_ENV', 'development') == 'development'

    logging.getLogger(__name__).info(f"Starting Gateway on port {port}...")
    app.run(host=app.config['HOST'], port=port, debug=debug)


if __name__ == '__main__':
    run_gateway()
