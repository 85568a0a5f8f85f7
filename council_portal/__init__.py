from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException
import sqlalchemy

from .extensions import init_extensions
from council_portal.extensions import db
from council_portal.models import AssetCategory


# (name, Dhivehi name, code)
DEFAULT_ASSET_CATEGORIES = [
    ("Inhabited Islands, Coral Reefs & Living Seeds", "މީހުން ދިރިއުޅޭ ރަށްތައް، ފަރުތައް އަދި ދިރޭ ތަކެތި", "01"),
    ("Historical Sites", "އާސާރީ ތަންތަން", "02"),
    ("Copyrights & Patterns", "ކޮޕީރައިޓްސް އަދި ޕެޓާންސް", "03"),
    ("Tools & Equipment", "އާލާތްތަކާއި އިކުއިޕްމަންޓް", "04"),
    ("Vehicles", "އެއްގަމު އުޅަނދު / ވެހިކަލް", "05"),
    ("Plant, Machineries, Equipment, Software & IT Hardware", "ޕްލާންޓް، މެޝިނަރީ، އިކުއިޕްމަންޓް، ސޮފްޓްވެއަރ އަދި އައި.ޓީ ހާޑްވެއަރ", "06"),
    ("Furniture, Fixtures & Fittings", "ފަރުނީޗަރު، ފިކްސްޗަރސް އަދި ފިޓިންގސް", "07"),
    ("Land, Buildings & Other Tangible Assets", "ބިން، އިމާރާތް އަދި އެހެނިހެން މާއްދީ މުދާ", "08"),
]


def create_app(config_object="config.Config"):
    app = Flask(__name__)

    # Load config
    app.config.from_object(config_object)

    # Init ALL extensions in ONE place
    init_extensions(app)

    # Import models so Flask-Migrate can detect them
    from . import models  # noqa

    # Register blueprints
    from .main import bp as main_bp
    app.register_blueprint(main_bp)

    from .assets import bp as assets_bp
    app.register_blueprint(assets_bp)

    from .garage import bp as garage_bp
    app.register_blueprint(garage_bp)

    from .requisitions import bp as requisitions_bp
    app.register_blueprint(requisitions_bp)

    from .categories import bp as categories_bp
    app.register_blueprint(categories_bp)

    from .settings import bp as settings_bp
    app.register_blueprint(settings_bp)

    # Ensure database/tables exist (especially on first run in packaged mode)
    with app.app_context():
        try:
            db.create_all()
        except sqlalchemy.exc.SQLAlchemyError:
            # If the DB file is missing or path invalid, surface error during startup
            app.logger.exception("Database initialization failed.")
            raise

        # Seed the classification registry for fresh DBs
        if app.config.get("SEED_DEFAULT_CATEGORIES") and AssetCategory.query.count() == 0:
            for name, name_dh, code in DEFAULT_ASSET_CATEGORIES:
                db.session.add(AssetCategory(name=name, name_dh=name_dh, code=code))
            db.session.commit()

    @app.errorhandler(HTTPException)
    def http_error(e):
        return jsonify(error=e.description, status=e.code), e.code

    return app
