import sys
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    """
    應用程式全域設定。
    自動從環境變數 (.env) 讀取並驗證型別。
    """
    # 分桶時區 (IANA 名稱)，預設 UTC 以確保不同環境結果一致
    TZ: str = "UTC"

    # 預設顯示參數 (呈現層可覆寫)
    DEFAULT_TIME_RANGE: str = "ALL"
    DEFAULT_TIME_PERIOD: str = "1w"
    DEFAULT_DISPLAY_MODE: str = "bars+line"

    # 多空偏向判斷倍數
    BIAS_THRESHOLD: float = 1.2

    # 應用程式行為
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True

# Singleton Instance
try:
    settings = Settings()
except Exception as e:
    # logging 依賴 settings，這裡只能 print，並退回預設值
    print(f"CRITICAL: Failed to load configuration, using defaults. {e}", file=sys.stderr)
    settings = Settings.model_construct()
