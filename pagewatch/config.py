import os
from dotenv import load_dotenv

load_dotenv()


class Settings:
    POLL_INTERVAL_SECONDS: float = float(
        os.getenv("PAGEWATCH_POLL_INTERVAL_SECONDS", "0.5")
    )
    MEASURE_INTERVAL_SECONDS: float = float(
        os.getenv("PAGEWATCH_MEASURE_INTERVAL_SECONDS", "0.0001")
    )
    CONNECT_TIMEOUT_SECONDS: float = float(
        os.getenv("PAGEWATCH_CONNECT_TIMEOUT_SECONDS", "0.5")
    )
    READ_TIMEOUT_SECONDS: float = float(
        os.getenv("PAGEWATCH_READ_TIMEOUT_SECONDS", "5.0")
    )
    LOG_LEVEL: str = os.getenv("PAGEWATCH_LOG_LEVEL", "INFO").upper()


settings = Settings()
