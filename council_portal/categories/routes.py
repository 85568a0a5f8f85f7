from flask import jsonify

from . import bp
from council_portal.extensions import db
from council_portal.models import AssetCategory
from council_portal.numbering import FALLBACK_CLASS_CODE
from council_portal.utils import body_formdata, error_response, form_errors

from flask_wtf import FlaskForm
from wtforms import StringField, TextAreaField
from wtforms.validators import DataRequired, Length, NoneOf, Optional, Regexp


# -----------------------------
# Category Form
# -----------------------------
class CategoryForm(FlaskForm):
    name = StringField(
        "Category Name",
        validators=[DataRequired(), Length(max=150)],
        filters=[lambda x: x.strip() if x else x],
    )
    name_dh = StringField("Dhivehi Name", validators=[Optional(), Length(max=200)])
    code = StringField(
        "Code",
        validators=[
            DataRequired(),
            Regexp(r"^\d{2}$", message="Code must be exactly two digits (e.g., 04)."),
            NoneOf([FALLBACK_CLASS_CODE], message=f"Code {FALLBACK_CLASS_CODE} is reserved for uncategorised assets."),
        ],
        filters=[lambda x: x.strip() if x else x],
    )
    description = TextAreaField("Description", validators=[Optional(), Length(max=500)])


def _clash(name, code, exclude_id=None):
    """Return an error message if another category already uses this name or code."""
    query = AssetCategory.query
    if exclude_id is not None:
        query = query.filter(AssetCategory.id != exclude_id)
    if query.filter(AssetCategory.name == name).first():
        return f"A category named '{name}' already exists."
    if query.filter(AssetCategory.code == code).first():
        return f"Code {code} is already used by another category."
    return None


# -----------------------------
# Category List
# -----------------------------
@bp.route("/")
def list_categories():
    categories = AssetCategory.query.order_by(AssetCategory.code.asc()).all()
    return jsonify([cat.to_dict() for cat in categories])


# -----------------------------
# Category Create
# -----------------------------
@bp.route("/new", methods=["POST"])
def create_category():
    form = CategoryForm(formdata=body_formdata())

    if not form.validate_on_submit():
        return form_errors(form)

    clash = _clash(form.name.data, form.code.data)
    if clash:
        return error_response(clash, 409)

    cat = AssetCategory(
        name=form.name.data,
        name_dh=form.name_dh.data or None,
        code=form.code.data,
        description=form.description.data or None,
    )
    db.session.add(cat)
    db.session.commit()
    return jsonify(cat.to_dict()), 201


# -----------------------------
# Category Edit
# -----------------------------
@bp.route("/<int:category_id>/edit", methods=["POST"])
def edit_category(category_id):
    cat = AssetCategory.query.get_or_404(category_id)
    form = CategoryForm(formdata=body_formdata(), obj=cat)

    if not form.validate_on_submit():
        return form_errors(form)

    clash = _clash(form.name.data, form.code.data, exclude_id=cat.id)
    if clash:
        return error_response(clash, 409)

    # Existing asset numbers keep the code they were issued with
    cat.name = form.name.data
    cat.name_dh = form.name_dh.data or None
    cat.code = form.code.data
    cat.description = form.description.data or None
    db.session.commit()
    return jsonify(cat.to_dict())


@bp.route("/<int:category_id>/delete", methods=["POST"])
def delete_category(category_id):
    cat = AssetCategory.query.get_or_404(category_id)
    db.session.delete(cat)
    db.session.commit()
    return jsonify(deleted=category_id)
