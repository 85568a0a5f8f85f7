from flask import current_app, jsonify
from flask_wtf import FlaskForm
from wtforms import StringField
from wtforms.validators import DataRequired, Length, Optional, Regexp

from . import bp
from council_portal.extensions import db
from council_portal.models import Setting
from council_portal.utils import body_formdata, form_errors


def get_setting_value(key: str, default=None):
    setting = Setting.query.filter_by(key=key).first()
    if setting and setting.value is not None:
        return setting.value
    return default


def set_setting_value(key: str, value):
    setting = Setting.query.filter_by(key=key).first()
    if not setting:
        setting = Setting(key=key, value=value)
        db.session.add(setting)
    else:
        setting.value = value
    return setting


def get_office_code() -> str:
    return get_setting_value("office_code", current_app.config["OFFICE_CODE"])


def _current_settings():
    return {
        "office_code": get_office_code(),
        "council_name": get_setting_value("council_name", current_app.config["COUNCIL_NAME"]),
        "secretariat_name": get_setting_value("secretariat_name", ""),
    }


class GeneralSettingsForm(FlaskForm):
    council_name = StringField("Council Name", validators=[DataRequired(), Length(max=150)])
    secretariat_name = StringField("Secretariat Name", validators=[Optional(), Length(max=150)])
    office_code = StringField(
        "Office Code",
        validators=[
            DataRequired(),
            Length(max=10),
            Regexp(r"^[A-Za-z0-9]+$", message="Office code may only contain letters and digits."),
        ],
        filters=[lambda x: x.strip().upper() if x else x],
        description="Prefix embedded in new asset, permit and requisition numbers (e.g., 258).",
    )


@bp.route("/", methods=["GET"])
def general_settings():
    return jsonify(_current_settings())


@bp.route("/", methods=["POST"])
def update_settings():
    form = GeneralSettingsForm(formdata=body_formdata(), data=_current_settings())

    if not form.validate_on_submit():
        return form_errors(form)

    previous_code = get_office_code()
    set_setting_value("council_name", form.council_name.data.strip())
    set_setting_value("secretariat_name", (form.secretariat_name.data or "").strip() or None)
    set_setting_value("office_code", form.office_code.data)
    db.session.commit()

    if previous_code != form.office_code.data:
        # issued numbers keep the old code
        current_app.logger.info("Office code changed from %s to %s", previous_code, form.office_code.data)

    return jsonify(_current_settings())
