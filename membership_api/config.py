from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./membership.db"
    ENV: str = "development"
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: list[str] = ["http://localhost:3000"]

    SESSION_COOKIE_NAME: str = "token"
    SESSION_TTL_HOURS: int = 24
    SESSION_EXTEND_THRESHOLD_MINUTES: int = 30
    SESSION_EXTEND_HOURS: int = 1

    RATE_LIMIT_PER_MINUTE: int = 60
    LOGIN_RATE_LIMIT: str = "10/minute"

    STORAGE_BACKEND: str = "local"  # local | s3
    STORAGE_LOCAL_ROOT: str = "./storage"
    STORAGE_PUBLIC_BASE_URL: str = "http://localhost:8000/storage"
    S3_ENDPOINT_URL: str = ""
    S3_REGION: str = "us-east-1"
    S3_ACCESS_KEY_ID: str = ""
    S3_SECRET_ACCESS_KEY: str = ""

    BUCKET_ACTIVITY_MEDIA: str = "activity-media"
    BUCKET_NEWS_MEDIA: str = "news-media"
    BUCKET_ORGANIZATION_IMAGES: str = "organization-images"
    BUCKET_AVATARS: str = "avatars"
    BUCKET_CREDENTIALS: str = "credentials"

    UPLOAD_CONCURRENCY: int = 4
    MAX_UPLOAD_BYTES: int = 10 * 1024 * 1024

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

    @property
    def is_production(self) -> bool:
        return self.ENV.lower() in ("prod", "production")


settings = Settings()
