import os


class Config:
    SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-key-change-in-prod')
    
    # Downstream services
    USERS_SERVER_URL = os.getenv('USERS_SERVER_URL', 'http://localhost:4001')
    ROOMS_SERVER_URL = os.getenv('ROOMS_SERVER_URL', 'http://localhost:4002')
    REQUEST_TIMEOUT = float(os.getenv('REQUEST_TIMEOUT', '10'))
    USER_LOOKUP_WORKERS = int(os.getenv('USER_LOOKUP_WORKERS', '8'))
    
    # Credentials
    JWT_SECRET = os.getenv('JWT_SECRET', 'dev-jwt-secret')
    JWT_ALGORITHM = os.getenv('JWT_ALGORITHM', 'HS256')
    TOKEN_HEADER = os.getenv('TOKEN_HEADER', 'accesstoken')
    
    # Server
    HOST = os.getenv('HOST', '0.0.0.0')
    PORT = int(os.getenv('PORT', '5000'))
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')


class DevelopmentConfig(Config):
    DEBUG = True


class ProductionConfig(Config):
    DEBUG = False


class TestingConfig(Config):
    TESTING = True
    DEBUG = False
    USERS_SERVER_URL = 'http://users.test'
    ROOMS_SERVER_URL = 'http://rooms.test'
    JWT_SECRET = 'gateway-testing-secret-0123456789abcdef'


config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}
