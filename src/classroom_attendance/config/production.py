import os

from .base import *  # noqa: F401,F403

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")
JWT_SECRET = os.getenv("JWT_SECRET", "please-set-JWT_SECRET")

DEBUG = False

ALLOW_DEMO_LOGIN = bool(int(os.getenv("ALLOW_DEMO_LOGIN", "0")))
