from flask import Blueprint, jsonify, request
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from vidshelf.logger import logger
from vidshelf.models import parse_write_request
from vidshelf.services import LibraryService

library_blueprint = Blueprint('library', __name__, url_prefix='/api')


@library_blueprint.route("/library", methods=["GET"])
def get_library():
    """Return every video and playlist with playlist orderings resolved"""
    try:
        return jsonify(LibraryService.get_snapshot())
    except SQLAlchemyError as e:
        logger.error("Error loading library: %s", e)
        return jsonify({"error": str(e)}), 500


@library_blueprint.route("/library", methods=["PUT"])
def put_library():
    """Replace or merge the stored collection"""
    body = request.get_json(silent=True)
    if body is None:
        return jsonify({"error": "Bad JSON"}), 400
    try:
        write = parse_write_request(body)
    except (ValidationError, ValueError) as e:
        logger.info("Rejected library write: %s", e)
        return jsonify({"error": str(e)}), 400

    try:
        ack = LibraryService.apply(write)
    except SQLAlchemyError as e:
        logger.error("Error applying %s write: %s", write.mode, e)
        return jsonify({"error": str(e)}), 500
    return jsonify(ack.model_dump(mode="json", by_alias=True, exclude_none=True))


@library_blueprint.route("/playlists/<playlist_id>", methods=["DELETE"])
def delete_playlist(playlist_id: str):
    """Remove a playlist and its ordering rows"""
    playlist_id = playlist_id.strip()
    if not playlist_id:
        return jsonify({"error": "Missing playlist id"}), 400
    try:
        LibraryService.delete_playlist(playlist_id)
    except SQLAlchemyError as e:
        logger.error("Error deleting playlist %s: %s", playlist_id, e)
        return jsonify({"error": str(e)}), 500
    return jsonify({"ok": True, "id": playlist_id})
