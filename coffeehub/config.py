import os

class BaseConfig:
    JSON_SORT_KEYS = False
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    CORS_ALLOWED_ORIGINS = os.getenv("CORS_ALLOWED_ORIGINS", "*")
    RATELIMIT_STORAGE_URL = os.getenv("RATELIMIT_STORAGE_URL", "memory://")
    ORDER_LIMIT_PER_IP = os.getenv("ORDER_LIMIT_PER_IP", "20 per hour")
    JWT_SECRET = os.getenv("JWT_SECRET", "dev-insecure-jwt-key")
    ACCESS_TOKEN_LIFETIME_MIN = int(os.getenv("ACCESS_TOKEN_LIFETIME_MIN", 60 * 24))
    OTEL_SERVICE_NAME = os.getenv("OTEL_SERVICE_NAME", "coffeehub-backend")
    OTEL_EXPORTER_OTLP_ENDPOINT = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT", "http://localhost:4318/v1/traces")

    # Pricing
    DELIVERY_FEE = float(os.getenv("DELIVERY_FEE", 10000))
    TAX_RATE = float(os.getenv("TAX_RATE", 0.10))

    # Catalog
    DEFAULT_MAX_PRICE = float(os.getenv("DEFAULT_MAX_PRICE", 150000))
    SAMPLE_PRICE_RATE = float(os.getenv("SAMPLE_PRICE_RATE", 24000))
    PRODUCT_IMAGE_DIR = os.getenv(
        "PRODUCT_IMAGE_DIR", os.path.join(os.getcwd(), "instance", "product_images")
    )

class DevelopmentConfig(BaseConfig):
    DEBUG = True
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-insecure-key")
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///dev.db")

class TestingConfig(BaseConfig):
    TESTING = True
    SECRET_KEY = "test-key"
    JWT_SECRET = "test-jwt-key"
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")
    RATELIMIT_ENABLED = False
    CELERY_TASK_ALWAYS_EAGER = True

class ProductionConfig(BaseConfig):
    DEBUG = False
    TESTING = False
    SECRET_KEY = os.getenv("SECRET_KEY")
    JWT_SECRET = os.getenv("JWT_SECRET")
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL")
    # Best-effort timeout for store calls: fail fast on an exhausted pool
    # and drop dead connections before use.
    SQLALCHEMY_ENGINE_OPTIONS = {
        "pool_pre_ping": True,
        "pool_timeout": int(os.getenv("STORE_TIMEOUT_SECONDS", 10)),
    }

    @staticmethod
    def validate():
        missing = []
        for key in ("SECRET_KEY", "DATABASE_URL", "JWT_SECRET"):
            if not os.getenv(key):
                missing.append(key)
        if missing:
            raise RuntimeError(
                f"Missing required env vars in production: {', '.join(missing)}"
            )

def get_config_class():
    env = os.getenv("APP_ENV", "development").lower()
    if env == "production":
        ProductionConfig.validate()
        return ProductionConfig
    if env == "testing":
        return TestingConfig
    return DevelopmentConfig
