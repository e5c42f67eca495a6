from dotenv import load_dotenv
import os

# Load environment variables from .env file
load_dotenv()

# Database configuration
DB_HOST = os.getenv("MYSQL_HOST", "db")
DB_USER = os.getenv("MYSQL_USER", "user")
DB_PASSWORD = os.getenv("MYSQL_PASSWORD", "123456")
DB_NAME = os.getenv("MYSQL_DB", "cliente")
DB_PORT = os.getenv("MYSQL_PORT", "3306")

# JWT configuration
SECRET_KEY = os.getenv("SECRET_KEY", "your_secret_key_here")
ALGORITHM = os.getenv("ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "1440"))
COOKIE_EXPIRE_DAYS = int(os.getenv("COOKIE_EXPIRE_DAYS", "1"))
COOKIE_SECURE = os.getenv("COOKIE_SECURE", "false").lower() == "true"

# Reset / registration tokens
RESET_TOKEN_EXPIRE_MINUTES = int(os.getenv("RESET_TOKEN_EXPIRE_MINUTES", "30"))
REGISTRATION_TOKEN_EXPIRE_HOURS = int(os.getenv("REGISTRATION_TOKEN_EXPIRE_HOURS", "72"))
CLIENT_URL = os.getenv("CLIENT_URL", "http://localhost:3010")

# Front desk rules
BUSINESS_TIMEZONE = os.getenv("BUSINESS_TIMEZONE", "UTC")
CHECKOUT_HOUR = int(os.getenv("CHECKOUT_HOUR", "15"))

# Application configuration
DEBUG = os.getenv("DEBUG", "false").lower() == "true"
APP_HOST = os.getenv("APP_HOST", "0.0.0.0")
APP_PORT = int(os.getenv("APP_PORT", "8000"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Upload configuration
UPLOAD_DIR = os.getenv("UPLOAD_DIR", "uploads")

# Email configuration
EMAIL_FROM = os.getenv("EMAIL_FROM", "no-reply@cliente.io")
EMAIL_FROM_NAME = os.getenv("EMAIL_FROM_NAME", "Cliente.io")
EMAIL_PORT = int(os.getenv("EMAIL_PORT", "1025"))
EMAIL_SERVER = os.getenv("EMAIL_SERVER", "mailhog")

# Optional bootstrap account
SUPERADMIN_USERNAME = os.getenv("SUPERADMIN_USERNAME")
SUPERADMIN_PASSWORD = os.getenv("SUPERADMIN_PASSWORD")
SUPERADMIN_EMAIL = os.getenv("SUPERADMIN_EMAIL", "admin@cliente.io")

# Database URL
DATABASE_URL = os.getenv(
    "DATABASE_URL",
    f"mysql+pymysql://{DB_USER}:{DB_PASSWORD}@{DB_HOST}:{DB_PORT}/{DB_NAME}",
)
