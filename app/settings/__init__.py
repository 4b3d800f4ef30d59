from app.settings.app_settings import Settings, settings, load_settings
from app.settings.log_settings import LudoLogger
