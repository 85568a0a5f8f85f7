from flask_wtf import FlaskForm
from wtforms import (
    StringField,
    SelectField,
    TextAreaField,
    DateField,
    DecimalField,
)
from wtforms.validators import DataRequired, Optional, Length, NumberRange

from council_portal.models import ASSET_STATUSES


def _strip(value):
    return value.strip() if isinstance(value, str) else value


class AssetDetailsForm(FlaskForm):
    """Fields that may change after the asset number has been issued."""

    name = StringField("Asset Name", validators=[DataRequired(), Length(max=150)], filters=[_strip])
    status = SelectField(
        "Status",
        choices=[(s, s) for s in ASSET_STATUSES],
        default="Operational",
        validators=[DataRequired()],
    )
    location = StringField("Location", validators=[Optional(), Length(max=200)])
    purchase_date = DateField("Purchase Date", format="%Y-%m-%d", validators=[Optional()])
    value = DecimalField("Value", places=2, default=0, validators=[Optional(), NumberRange(min=0)])

    model_number = StringField("Model Number", validators=[Optional(), Length(max=150)])
    serial_number = StringField("Serial Number", validators=[Optional(), Length(max=150)])
    registration_number = StringField("Registration Number", validators=[Optional(), Length(max=150)])
    last_maintenance = DateField("Last Maintenance", format="%Y-%m-%d", validators=[Optional()])
    notes = TextAreaField("Notes", validators=[Optional()])

    asset_size = StringField("Asset Size", validators=[Optional(), Length(max=100)])
    constructed_date = DateField("Constructed Date", format="%Y-%m-%d", validators=[Optional()])


class AssetForm(AssetDetailsForm):
    # category + entry date feed the asset number, so they only exist on create
    category = StringField("Category", validators=[DataRequired(), Length(max=150)], filters=[_strip])
    entry_date = DateField("Entry Date", format="%Y-%m-%d", validators=[DataRequired()])


class AssetNumberPreviewForm(FlaskForm):
    class Meta:
        csrf = False

    category = StringField("Category", validators=[DataRequired()], filters=[_strip])
    entry_date = DateField("Entry Date", format="%Y-%m-%d", validators=[DataRequired()])
