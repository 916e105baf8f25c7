import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///physquiz.db'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    # bcrypt cost factor for stored credentials
    BCRYPT_LOG_ROUNDS = int(os.environ.get('BCRYPT_LOG_ROUNDS', '12'))
    # SHA-256 pre-hash so passphrases past bcrypt's 72-byte limit still work
    BCRYPT_HANDLE_LONG_PASSWORDS = True
    # Target mode geometry (metres, m/s^2, degrees)
    GRAVITY = float(os.environ.get('GRAVITY', '9.8'))
    TARGET_WALL_DISTANCE_M = float(os.environ.get('TARGET_WALL_DISTANCE_M', '13.0'))
    TARGET_RADIUS_M = float(os.environ.get('TARGET_RADIUS_M', '0.28'))
    TARGET_MAX_HEIGHT_M = float(os.environ.get('TARGET_MAX_HEIGHT_M', '7.0'))
    TARGET_ANGLE_MIN_DEG = float(os.environ.get('TARGET_ANGLE_MIN_DEG', '30'))
    TARGET_ANGLE_MAX_DEG = float(os.environ.get('TARGET_ANGLE_MAX_DEG', '60'))
    # Absolute tolerance for free-response numeric answers
    NUMERIC_ANSWER_TOLERANCE = float(os.environ.get('NUMERIC_ANSWER_TOLERANCE', '0.01'))
    LEADERBOARD_DEFAULT_LIMIT = int(os.environ.get('LEADERBOARD_DEFAULT_LIMIT', '10'))
    # Comma-separated list of front-end origins allowed by CORS / Socket.IO
    ALLOWED_ORIGINS = os.environ.get(
        'ALLOWED_ORIGINS',
        'http://localhost:5173,http://127.0.0.1:5173',
    ).split(',')
