import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./catermatch.db")

# Firebase Configuration
FIREBASE_PROJECT_ID = os.getenv("FIREBASE_PROJECT_ID")

# Cloudflare R2 Configuration
R2_ACCOUNT_ID = os.getenv("R2_ACCOUNT_ID")
R2_ACCESS_KEY_ID = os.getenv("R2_ACCESS_KEY_ID")
R2_SECRET_ACCESS_KEY = os.getenv("R2_SECRET_ACCESS_KEY")

# One R2 bucket per logical storage bucket
R2_BUCKET_EVENTS = os.getenv("R2_BUCKET_EVENTS", "catermatch-events")
R2_BUCKET_PROFILES = os.getenv("R2_BUCKET_PROFILES", "catermatch-profiles")
R2_BUCKET_PORTFOLIO = os.getenv("R2_BUCKET_PORTFOLIO", "catermatch-portfolio")
R2_BUCKET_CHATS = os.getenv("R2_BUCKET_CHATS", "catermatch-chats")  # private

# Public buckets are served from {R2_PUBLIC_BASE_URL}/{bucket}/{key}
R2_PUBLIC_BASE_URL = os.getenv("R2_PUBLIC_BASE_URL", "https://files.catermatch.nl").rstrip("/")

# Chat attachments are only reachable through signed URLs (1 hour)
CHAT_ATTACHMENT_URL_TTL = int(os.getenv("CHAT_ATTACHMENT_URL_TTL", "3600"))

# Frontend base URL for links in emails
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:5173").rstrip("/")

ALLOWED_ORIGINS = os.getenv(
    "ALLOWED_ORIGINS",
    "https://catermatch.nl,https://www.catermatch.nl,http://localhost:5173,http://localhost:3000",
).split(",")

# Resend Email Configuration
RESEND_API_KEY = os.getenv("RESEND_API_KEY")
EMAIL_FROM_ADDRESS = os.getenv("EMAIL_FROM_ADDRESS", "Catermatch <onboarding@resend.dev>")
