import os
from dotenv import load_dotenv
load_dotenv()

class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret")
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///fitscore.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379/0")
    SENDGRID_API_KEY = os.getenv("SENDGRID_API_KEY")
    MAIL_FROM = os.getenv("MAIL_FROM", "noreply@example.com")
    MAIL_FROM_NAME = os.getenv("MAIL_FROM_NAME", "FitScore")
    OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
    OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
    OPENAI_TIMEOUT = float(os.getenv("OPENAI_TIMEOUT", "30"))
    OPENAI_MAX_ATTEMPTS = int(os.getenv("OPENAI_MAX_ATTEMPTS", "3"))
    PORT = int(os.getenv("PORT", "3001"))
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")

    # "skills" (seniority + skill weights) or "ratings" (performance/energy/culture)
    FIT_SCORE_VARIANT = os.getenv("FIT_SCORE_VARIANT", "skills")

    # worker timers, in seconds
    NOTIFICATION_INTERVAL = int(os.getenv("NOTIFICATION_INTERVAL", "15"))
    ANALYSIS_INTERVAL = int(os.getenv("ANALYSIS_INTERVAL", "15"))
    REPORT_INTERVAL = int(os.getenv("REPORT_INTERVAL", "300"))
    REPORT_MIN_SCORE = int(os.getenv("REPORT_MIN_SCORE", "80"))
    # 0 disables recovery of analysis claims left in 'processing'
    ANALYSIS_STALE_AFTER = int(os.getenv("ANALYSIS_STALE_AFTER", "0"))
    WORKER_MODE = os.getenv("WORKER_MODE", "rq")
