"""
Configuration
=============
Loads environment variables from .env file using python-dotenv.

Environment Variables:
    MAIL_BOT_NAME          — Display name of the bot, also the command prefix (#<name>)
    MAIL_BOT_ADDRESS       — System address; bug ids are embedded into its local part
    SMTP_HOST / SMTP_PORT  — Outbound SMTP server (default: localhost:25)
    SMTP_USERNAME          — Optional SMTP login
    SMTP_PASSWORD          — Optional SMTP password
    SMTP_USE_TLS           — Implicit TLS for SMTP (default: false)
    SMTP_TIMEOUT           — Seconds allowed for a single send (default: 30)
    STORE_URL              — Base URL of the bug store API
    STORE_API_KEY          — Bearer token for the bug store API
    STORE_TIMEOUT          — Seconds per store call (default: 20)
    ENABLE_TEST_COMMAND    — Accept the "test:" email command (default: false)
    REPORTING_CONFIG_PATH  — YAML file with namespaces and reporting routes
    LOG_DIR                — Directory for the daily log file (default: logs)

Retry Policy:
    Neither SMTP sends nor store calls are retried in-process. A failed send
    is logged once and the poll cycle moves on; the next cycle picks up
    whatever the store still considers reportable.
"""
import os
from dotenv import load_dotenv

load_dotenv()

MAIL_BOT_NAME = os.getenv("MAIL_BOT_NAME", "bugbot")
MAIL_BOT_ADDRESS = os.getenv("MAIL_BOT_ADDRESS", "bot@bugs.example.com")

SMTP_HOST = os.getenv("SMTP_HOST", "localhost")
SMTP_PORT = int(os.getenv("SMTP_PORT", 25))
SMTP_USERNAME = os.getenv("SMTP_USERNAME")
SMTP_PASSWORD = os.getenv("SMTP_PASSWORD")
SMTP_USE_TLS = os.getenv("SMTP_USE_TLS", "false").lower() == "true"
SMTP_TIMEOUT = float(os.getenv("SMTP_TIMEOUT", 30))

STORE_URL = os.getenv("STORE_URL", "http://localhost:8080")
STORE_API_KEY = os.getenv("STORE_API_KEY")
STORE_TIMEOUT = float(os.getenv("STORE_TIMEOUT", 20))

# Capability gate for the "test:" command
ENABLE_TEST_COMMAND = os.getenv("ENABLE_TEST_COMMAND", "false").lower() == "true"

REPORTING_CONFIG_PATH = os.getenv("REPORTING_CONFIG_PATH", "reporting.yaml")

LOG_DIR = os.getenv("LOG_DIR", "logs")


def from_addr() -> str:
    """Sender address before a bug id is embedded into it."""
    return f"\"{MAIL_BOT_NAME}\" <{MAIL_BOT_ADDRESS}>"


def command_prefix() -> str:
    return f"#{MAIL_BOT_NAME} "
