import os
from typing import Optional

from flask import Flask, request, jsonify

from .config import config
from .downstream import RoomsService, UsersService
from .errors import DEFAULT_MESSAGE, GatewayError
from .identity import IdentityResolver
from .service_client import ServiceClient, SessionPerThread
from .session_orchestrator import SessionOrchestrator
from .token_verifier import TokenVerifier


def create_app(config_name: str = None, transport=None) -> Flask:
    """Application factory for the gateway service."""
    if config_name is None:
        config_name = os.getenv('FLASK_ENV', 'development')

    app = Flask(__name__)
    app.config.from_object(config[config_name])

    # One transport shared by both downstream services
    if transport is None:
        transport = SessionPerThread()
    timeout = app.config['REQUEST_TIMEOUT']

    users = UsersService(ServiceClient(app.config['USERS_SERVER_URL'], transport, timeout))
    rooms = RoomsService(ServiceClient(app.config['ROOMS_SERVER_URL'], transport, timeout))
    verifier = TokenVerifier(app.config['JWT_SECRET'], app.config['JWT_ALGORITHM'])
    identity = IdentityResolver(users, verifier)

    # Store services on app for access in routes
    app.identity = identity
    app.sessions = SessionOrchestrator(
        users,
        rooms,
        identity,
        lookup_workers=app.config['USER_LOOKUP_WORKERS']
    )

    register_error_handlers(app)
    register_api_routes(app)

    return app


def register_error_handlers(app: Flask):
    """Every failure leaves the gateway as {"message": ...} with a status."""

    @app.errorhandler(GatewayError)
    def handle_gateway_error(error: GatewayError):
        return jsonify({'message': error.message}), error.status

    @app.errorhandler(500)
    def handle_internal_error(error):
        # Flask has already logged the original exception
        return jsonify({'message': DEFAULT_MESSAGE}), 500


def register_api_routes(app: Flask):
    """Register API routes."""

    def credential() -> Optional[str]:
        token = request.headers.get(app.config['TOKEN_HEADER'])
        if token:
            return token
        auth_header = request.headers.get('Authorization', '')
        if auth_header.startswith('Bearer '):
            return auth_header.split(' ', 1)[1].strip() or None
        return None

    def body() -> dict:
        data = request.get_json(silent=True)
        return data if isinstance(data, dict) else {}

    def require_fields(data: dict, *fields: str) -> dict:
        for name in fields:
            value = data.get(name)
            if value is None or (isinstance(value, str) and not value.strip()):
                raise GatewayError.validation(f"{name.capitalize()} is required.")
            if isinstance(value, str):
                data[name] = value.strip()
        return data

    def require_credential() -> str:
        token = credential()
        if not token:
            raise GatewayError.validation("Token required.")
        return token

    def caller_id() -> str:
        return app.identity.normalize_id(body().get('_id'), credential())

    # ==================== Accounts ====================

    @app.route('/signup', methods=['POST'])
    def api_sign_up():
        """Register a new account with the users service."""
        details = require_fields(body(), 'username', 'password')
        return jsonify(app.sessions.sign_up(details)), 201

    @app.route('/signin', methods=['POST'])
    def api_sign_in():
        """Sign in with the users service."""
        details = require_fields(body(), 'username', 'password')
        return jsonify(app.sessions.sign_in(details)), 201

    @app.route('/user/<user_id>', methods=['GET'])
    def api_user_exists(user_id: str):
        """Whether the users service knows this id."""
        return jsonify(app.sessions.get_user_exists(user_id)), 201

    # ==================== Room sessions ====================

    @app.route('/join/<room_code>', methods=['POST'])
    def api_join(room_code: str):
        """Join a room, signed in or as a temporary player."""
        data = app.sessions.join(
            room_code,
            credential=credential(),
            username=body().get('username')
        )
        return jsonify(data), 201

    @app.route('/leave', methods=['POST'])
    def api_leave():
        """Leave the caller's room, deleting it if they own it."""
        app.sessions.leave_room(caller_id())
        return '', 200

    @app.route('/createroom', methods=['POST'])
    def api_create_room():
        """Create a room owned by the signed-in caller."""
        data = app.sessions.create_room(require_credential())
        return jsonify(data), 201

    @app.route('/room', methods=['GET'])
    def api_owned_room():
        """The room the caller owns, if any."""
        return jsonify(app.sessions.get_owned_room(caller_id())), 201

    @app.route('/getrole/<user_id>', methods=['GET'])
    def api_get_role(user_id: str):
        """A user's role in their room, with their username."""
        return jsonify(app.sessions.get_role(user_id)), 201

    # ==================== Games ====================

    @app.route('/startgame', methods=['POST'])
    def api_start_game():
        """Start the game in the caller's room."""
        user_id = caller_id()
        return jsonify(app.sessions.start_game(user_id, body().get('settings'))), 201

    @app.route('/endgame', methods=['POST'])
    def api_end_game():
        """End the game in the caller's room."""
        return jsonify(app.sessions.end_game(caller_id())), 201

    # ==================== Health Check ====================

    @app.route('/health')
    def health_check():
        """Health check endpoint."""
        return jsonify({
            'status': 'healthy',
            'users_service': app.config['USERS_SERVER_URL'],
            'rooms_service': app.config['ROOMS_SERVER_URL']
        })
