from pydantic_settings import BaseSettings
import os

class Settings(BaseSettings):
    db_dsn: str = os.getenv("DB_DSN", "sqlite:///./data/doubleminer.db")
    recent_window: int = int(os.getenv("RECENT_WINDOW", 15))
    rare_lookback: int = int(os.getenv("RARE_LOOKBACK", 200))
    memory_window: int = int(os.getenv("MEMORY_WINDOW", 200))
    history_limit: int = int(os.getenv("HISTORY_LIMIT", 1000))
    settlement_limit: int = int(os.getenv("SETTLEMENT_LIMIT", 500))
    win_credit: float = float(os.getenv("WIN_CREDIT", 14))
    loss_debit: float = float(os.getenv("LOSS_DEBIT", 10))
    live_interval: float = float(os.getenv("LIVE_INTERVAL", 15))
    seed_history: int = int(os.getenv("SEED_HISTORY", 200))
    source: str = os.getenv("SOURCE", "simulated")  # 'simulated' | 'tipminer'
    tipminer_url: str = os.getenv("TIPMINER_URL", "https://www.tipminer.com/br/historico/blaze/double")
    api_key: str | None = os.getenv("API_KEY")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

settings = Settings()
