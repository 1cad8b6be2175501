from flask import Blueprint, jsonify
from sqlalchemy.exc import SQLAlchemyError
from vidshelf.logger import logger
from vidshelf.services import LibraryService

health_blueprint = Blueprint('health', __name__, url_prefix='/api')


@health_blueprint.route("/health", methods=["GET"])
def health():
    try:
        return jsonify({"ok": True, "tables": LibraryService.get_tables()})
    except SQLAlchemyError as e:
        logger.error("Health check failed: %s", e)
        return jsonify({"ok": False, "error": str(e)}), 500
