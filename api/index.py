"""
Serverless entry point for the Article Service
"""
import os

from mangum import Mangum

from article_service.config import load_settings
from article_service.main import create_app
from article_service.shared.infrastructure.logging import setup_logging

# Set environment defaults for serverless
os.environ.setdefault("ARTICLES_ENVIRONMENT", "production")

settings = load_settings()
setup_logging(settings.effective_log_level, settings.environment)

# Lifespan stays on: it opens and verifies the database pool
handler = Mangum(create_app(settings), lifespan="auto")
