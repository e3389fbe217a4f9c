import os

BASE_DIR = os.path.dirname(os.path.abspath(__file__)) # Project root

EMAIL = os.getenv("BARTER_EMAIL")
PASSWORD = os.getenv("BARTER_PASSWORD")
