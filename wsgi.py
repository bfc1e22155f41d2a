"""
WSGI entry point for production servers.

    gunicorn wsgi:app

APP_ENV selects the configuration class (production, development, testing).
"""
import os

from config import config_by_name
from main import create_app

app = create_app(config_by_name.get(os.getenv('APP_ENV', 'production'), config_by_name['production']))
