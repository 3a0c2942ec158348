import os
from dotenv import load_dotenv

load_dotenv()


class Settings:
    BINOCS_ACCESS_KEY: str = os.getenv("BINOCS_ACCESS_KEY", "")
    BINOCS_SECRET_KEY: str = os.getenv("BINOCS_SECRET_KEY", "")
    BINOCS_API_URL: str = os.getenv("BINOCS_API_URL", "https://api.binocs.sh")
    BINOCS_TIMEOUT_SECONDS: float = float(os.getenv("BINOCS_TIMEOUT_SECONDS", "10"))
    BINOCS_LOG_LEVEL: str = os.getenv("BINOCS_LOG_LEVEL", "INFO")
    PROVIDER_HOST: str = os.getenv("PROVIDER_HOST", "127.0.0.1")
    PROVIDER_PORT: int = int(os.getenv("PROVIDER_PORT", 8585))


settings = Settings()
