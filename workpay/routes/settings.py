from flask import Blueprint, current_app
from ..models import db, Setting, REVENUE_SETTING_KEY
from ..schemas import RevenueUpdate
from .utils import success, parse_body

settings_blueprint = Blueprint('settings', __name__)


def get_total_revenue():
    setting = Setting.query.filter_by(key=REVENUE_SETTING_KEY).first()
    return setting.value_number if setting else 0

# ----------------------------
# Revenue Setting
# ----------------------------
@settings_blueprint.route('/api/settings/revenue', methods=['GET'])
def get_revenue():
    return success({'value': get_total_revenue()})

@settings_blueprint.route('/api/settings/revenue', methods=['PUT'])
def set_revenue():
    data = parse_body(RevenueUpdate)

    setting = Setting.query.filter_by(key=REVENUE_SETTING_KEY).first()
    if not setting:
        setting = Setting(key=REVENUE_SETTING_KEY)
        db.session.add(setting)
    setting.value_number = data.value
    db.session.commit()

    current_app.logger.info("Total revenue set to %s", setting.value_number)
    return success({'value': setting.value_number})
