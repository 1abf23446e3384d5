# config.py
import os
from pathlib import Path

# ---------- Project Paths ----------
BASE_DIR = Path(__file__).resolve().parent
LOG_DIR = Path(os.getenv("LOG_DIR", str(BASE_DIR / "logs")))
LOG_FILE = LOG_DIR / "app.log"
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# ---------- MongoDB ----------
MONGO_URI = os.getenv("MONGO_URI", "mongodb://localhost:27017")
DB_NAME = os.getenv("DB_NAME", "candidate_mailer_db")

CANDIDATE_COLLECTION = "candidates"
SELECTIONS_COLLECTION = "recipientSelections"
DRAFT_COLLECTION = "emailDrafts"

# ---------- Gmail ----------
GMAIL_API_URL = os.getenv(
    "GMAIL_API_URL",
    "https://gmail.googleapis.com/gmail/v1/users/me/messages/send"
)
GMAIL_ACCESS_TOKEN = os.getenv("GMAIL_ACCESS_TOKEN", "")
GMAIL_TIMEOUT_SECONDS = float(os.getenv("GMAIL_TIMEOUT_SECONDS", "30"))

# ---------- Email Templates ----------
TEMPLATE_DIR = BASE_DIR / "templates"
EMAIL_TEMPLATE = "candidate_email.html"
