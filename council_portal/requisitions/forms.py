from flask_wtf import FlaskForm
from wtforms import DateField, DecimalField, IntegerField, StringField, TextAreaField
from wtforms.validators import DataRequired, Length, NumberRange, Optional


class RequisitionEntryForm(FlaskForm):
    form_date = DateField("Date", format="%Y-%m-%d", validators=[DataRequired()])
    department = StringField("Department", default="Secretariat", validators=[DataRequired(), Length(max=150)])
    requested_by = StringField("Requested By", validators=[DataRequired(), Length(max=150)])
    purpose = TextAreaField("Purpose", validators=[Optional(), Length(max=2000)])


class RequisitionItemForm(FlaskForm):
    """One line of the items table; validated per row, never CSRF-checked."""

    class Meta:
        csrf = False

    description = StringField("Description", validators=[DataRequired(), Length(max=250)])
    quantity = IntegerField("Qty", default=1, validators=[DataRequired(), NumberRange(min=1)])
    rate = DecimalField("Rate", places=2, default=0, validators=[Optional(), NumberRange(min=0)])


class RequisitionNumberPreviewForm(FlaskForm):
    class Meta:
        csrf = False

    form_date = DateField("Date", format="%Y-%m-%d", validators=[DataRequired()])
