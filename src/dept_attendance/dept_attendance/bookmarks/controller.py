from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.web import current_context, json_error, role_required
from ..container import Container
from ..core.enums import Role


def register(app: Flask, container: Container) -> None:
    @app.route("/api/bookmarks/<int:class_id>", methods=["GET"], endpoint="api_list_bookmarks")
    @role_required(Role.TEACHER, api=True)
    def api_list_bookmarks(class_id: int):
        try:
            bookmarks = container.bookmark_service.list_for_class(
                current_context(),
                class_id=class_id,
                start_date=request.args.get("startDate"),
                end_date=request.args.get("endDate"),
            )
        except Exception as e:
            return json_error(e)
        return jsonify({"success": True, "bookmarks": [b.to_dict() for b in bookmarks]})

    @app.route("/api/bookmarks", methods=["POST"], endpoint="api_save_bookmark")
    @role_required(Role.TEACHER, api=True)
    def api_save_bookmark():
        try:
            bookmark = container.bookmark_service.save(current_context(), request.get_json(silent=True) or {})
        except Exception as e:
            return json_error(e)
        return jsonify({"success": True, "bookmark": bookmark.to_dict()})

    @app.route("/api/bookmarks/<int:bookmark_id>", methods=["DELETE"], endpoint="api_delete_bookmark")
    @role_required(Role.TEACHER, api=True)
    def api_delete_bookmark(bookmark_id: int):
        try:
            container.bookmark_service.delete(current_context(), bookmark_id=bookmark_id)
        except Exception as e:
            return json_error(e)
        return jsonify({"success": True})
