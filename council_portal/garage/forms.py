from flask_wtf import FlaskForm
from wtforms import DateField, IntegerField, SelectField, StringField, TextAreaField
from wtforms.validators import DataRequired, Length, NumberRange, Optional

from council_portal.models import PERMIT_STATUSES


class GaragePermitDetailsForm(FlaskForm):
    gems_entry_number = StringField("GEMS Entry No", validators=[Optional(), Length(max=100)])

    vehicle_chassis_number = StringField("Chassis Number", validators=[DataRequired(), Length(max=100)])
    vehicle_registry_number = StringField("Vehicle Registry Number", validators=[DataRequired(), Length(max=100)])

    vehicle_owner_name = StringField("Vehicle Owner", validators=[DataRequired(), Length(max=150)])
    vehicle_owner_address = StringField("Vehicle Owner Address", validators=[Optional(), Length(max=250)])
    vehicle_owner_id = StringField("Vehicle Owner ID Card", validators=[Optional(), Length(max=50)])
    vehicle_owner_contact = StringField("Vehicle Owner Contact", validators=[Optional(), Length(max=50)])

    garage_address = StringField("Garage Address", validators=[DataRequired(), Length(max=250)])
    garage_size_sqft = IntegerField("Garage Size (sqft)", validators=[Optional(), NumberRange(min=1)])
    house_registry_number = StringField("House Registry Number", validators=[Optional(), Length(max=100)])

    garage_owner_name = StringField("Garage Owner", validators=[DataRequired(), Length(max=150)])
    garage_owner_address = StringField("Garage Owner Address", validators=[Optional(), Length(max=250)])
    garage_owner_id = StringField("Garage Owner ID Card", validators=[Optional(), Length(max=50)])
    garage_owner_contact = StringField("Garage Owner Contact", validators=[Optional(), Length(max=50)])

    authorized_by = StringField("Authorized By", validators=[Optional(), Length(max=150)])
    notes = TextAreaField("Notes", validators=[Optional()])


class GaragePermitForm(GaragePermitDetailsForm):
    issue_date = DateField("Issue Date", format="%Y-%m-%d", validators=[DataRequired()])
    status = SelectField(
        "Status",
        # Void is only reachable through the void action
        choices=[(s, s) for s in PERMIT_STATUSES if s != "Void"],
        default="Issued",
        validators=[DataRequired()],
    )


class PermitNumberPreviewForm(FlaskForm):
    class Meta:
        csrf = False

    issue_date = DateField("Issue Date", format="%Y-%m-%d", validators=[DataRequired()])
