import logging
import os
from dotenv import load_dotenv

load_dotenv()

TG_BOT_TOKEN = os.getenv('TELEGRAM_BOT_TOKEN')
PROXY_URL = os.getenv('PROXY_URL')

BASE_DIR = os.path.dirname(os.path.abspath(__file__))
DB_PATH = os.path.join(BASE_DIR, 'drill.db')

# Card source files: local directory unless an HTTP origin is configured
STUDY_DIR = os.getenv('STUDY_DIR', BASE_DIR)
STUDY_BASE_URL = os.getenv('STUDY_BASE_URL')

BELT = os.getenv('BELT', 'gokyu')

logging.basicConfig(
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    level=logging.INFO
)
