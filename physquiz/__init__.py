import random

from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_bcrypt import Bcrypt
from flask_login import LoginManager
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
import click
from physquiz.config import Config

db = SQLAlchemy()
bcrypt = Bcrypt()
login_manager = LoginManager()
migrate = Migrate()
socketio = SocketIO(async_mode=None)

ROUNDS_EXTENSION = 'physquiz.rounds'


def build_rounds(flask_app, notify=None):
    """Wire the core services for one app from its config."""
    from physquiz.services.accounts import AccountDirectory
    from physquiz.services.credentials import BcryptVerifier
    from physquiz.services.leaderboard import Leaderboard
    from physquiz.services.questions import QuestionCatalog
    from physquiz.services.rounds import RoundOrchestrator, TargetSettings
    from physquiz.services.sessions import SessionStore
    from physquiz.models import utcnow

    cfg = flask_app.config
    verifier = BcryptVerifier(bcrypt)
    return RoundOrchestrator(
        accounts=AccountDirectory(db.session, verifier, clock=utcnow),
        sessions=SessionStore(db.session, clock=utcnow),
        leaderboard=Leaderboard(db.session),
        catalog=QuestionCatalog(),
        target=TargetSettings(
            gravity=cfg['GRAVITY'],
            wall_distance=cfg['TARGET_WALL_DISTANCE_M'],
            radius=cfg['TARGET_RADIUS_M'],
            max_height=cfg['TARGET_MAX_HEIGHT_M'],
            angle_min_deg=cfg['TARGET_ANGLE_MIN_DEG'],
            angle_max_deg=cfg['TARGET_ANGLE_MAX_DEG'],
        ),
        answer_tolerance=cfg['NUMERIC_ANSWER_TOLERANCE'],
        rng=random.Random(cfg.get('RANDOM_SEED')),
        notify=notify,
    )


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    allowed_origins = flask_app.config.get('ALLOWED_ORIGINS', [])

    db.init_app(flask_app)
    bcrypt.init_app(flask_app)
    login_manager.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, supports_credentials=True, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    from physquiz.main import main
    flask_app.register_blueprint(main, url_prefix='/api')

    from physquiz.api.rounds import rounds
    flask_app.register_blueprint(rounds, url_prefix='/api')

    from physquiz.socketio_events import register_socketio_handlers, broadcast_session_event
    register_socketio_handlers(testing=flask_app.config.get('TESTING', False))

    flask_app.extensions[ROUNDS_EXTENSION] = build_rounds(flask_app, notify=broadcast_session_event)

    from physquiz.models import User
    from physquiz.errors import PhysQuizError

    @login_manager.user_loader
    def load_user(user_id):
        return db.session.get(User, int(user_id))

    @login_manager.unauthorized_handler
    def unauthorized():
        return jsonify({'error': 'Login required'}), 401

    @click.command('db-reset')
    def db_reset_command():
        """Drops, recreates, and seeds the database."""
        rounds = flask_app.extensions[ROUNDS_EXTENSION]
        with flask_app.app_context():
            db.drop_all()
            db.create_all()

            # Seed users
            for name in ('testuser1', 'testuser2', 'testuser3'):
                rounds.register(name, 'password')
            click.echo('Database has been reset and seeded!')

    @click.command('leaderboard')
    @click.argument('mode')
    @click.option('--limit', default=None, type=int, help='Number of rows to show.')
    def leaderboard_command(mode, limit):
        """Prints the high-score ranking for MODE."""
        from physquiz.records import GameMode
        rounds = flask_app.extensions[ROUNDS_EXTENSION]
        try:
            game_mode = GameMode.parse(mode)
        except ValueError as exc:
            raise click.BadParameter(str(exc), param_hint='MODE')
        if limit is None:
            limit = flask_app.config['LEADERBOARD_DEFAULT_LIMIT']
        try:
            rows = rounds.leaderboard(game_mode, limit)
        except PhysQuizError as exc:
            raise click.ClickException(str(exc))
        if not rows:
            click.echo(f'No completed {game_mode.value} sessions yet.')
            return
        for position, row in enumerate(rows, start=1):
            click.echo(f'{position:>3}. {row.username:<20} {row.high_score}')

    flask_app.cli.add_command(db_reset_command)
    flask_app.cli.add_command(leaderboard_command)

    return flask_app


def get_rounds():
    """The RoundOrchestrator wired for the current app."""
    from flask import current_app
    return current_app.extensions[ROUNDS_EXTENSION]
