from .main import main_blueprint
from .workers import workers_blueprint
from .products import products_blueprint
from .expenses import expenses_blueprint
from .production import production_blueprint
from .powerloom import powerloom_blueprint
from .export_logs import export_logs_blueprint
from .settings import settings_blueprint
from .reports import reports_blueprint
