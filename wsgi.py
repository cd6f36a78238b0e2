import os
from dotenv import load_dotenv

load_dotenv()

from leadflow import create_app

config = os.getenv("APP_ENV", "production")

app = create_app(config)

print(f"[BOOT] Running in {config} mode")
