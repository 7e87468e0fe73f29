import os

from config import env_flag

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "travel_checkin_db"),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AUTO_INIT_DB = env_flag("AUTO_INIT_DB", False)

GATE_DEPARTURES_ON_ARRIVAL_CHECK_IN = env_flag("GATE_DEPARTURES_ON_ARRIVAL_CHECK_IN", True)
COUNT_CHECKED_OUT_AS_CHECKED_IN = env_flag("COUNT_CHECKED_OUT_AS_CHECKED_IN", True)
