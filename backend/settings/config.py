# settings/config.py
from pydantic import BaseModel
import os
from pathlib import Path
from dotenv import load_dotenv

# ===== 只加载一次 .env =====
def _load_env() -> None:
    here = Path(__file__).resolve()
    for p in [here.parent, *here.parents]:
        env_path = p / ".env"
        if env_path.exists():
            load_dotenv(env_path, override=True)
            return
    load_dotenv(override=True)


_load_env()


def _env_int(key: str, default: int = 0) -> int:
    raw = os.getenv(key, "")
    try:
        return int(raw)
    except Exception:
        return default

class Settings(BaseModel):
    # ---------- Wallet login ----------
    # 前端签名页（metamask.html），serverMessage 和 state 以 query 参数带过去
    wallet_login_page_url: str = os.getenv("WALLET_LOGIN_PAGE_URL", "/console/metamask.html")
    wallet_login_type: str = os.getenv("WALLET_LOGIN_TYPE", "metamask")
    wallet_challenge_length: int = _env_int("WALLET_CHALLENGE_LENGTH", 10)
    wallet_challenge_ttl_ms: int = _env_int("WALLET_CHALLENGE_TTL_MS", 5 * 60 * 1000)

    # ---------- HTTP ----------
    cors_allow_origins: str = os.getenv("CORS_ALLOW_ORIGINS", "")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
