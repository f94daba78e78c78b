import io
import logging

from flask import Blueprint, request, send_file, url_for

from services.file_service import FileService
from utils.constants import MANAGE_FILES
from utils.responses import pagination_args, paginated, success
from utils.security import require_permission

logger = logging.getLogger(__name__)

file_bp = Blueprint("file", __name__)


def serialize_file(record):
    data = record.to_dict()
    data['url'] = url_for("file.download_file", file_id=record.id)
    return data


@file_bp.route("/upload", methods=["POST"])
@require_permission(MANAGE_FILES)
def upload_files(ctx):
    result = FileService().upload(ctx.user, request.files.getlist("files"))

    if result.failed:
        return success(
            message="Failed to upload files.",
            status=422,
            errors=result.errors,
            success=False,
        )

    return success(
        [serialize_file(f) for f in result.uploaded],
        f"{len(result.uploaded)} file(s) uploaded successfully.",
        201,
        errors=result.errors or None,
    )


@file_bp.route("/", methods=["GET"], strict_slashes=False)
@require_permission(MANAGE_FILES)
def list_files(ctx):
    page, per_page = pagination_args()
    files = FileService().list_files(
        ctx.user,
        search=request.args.get("search"),
        mime=request.args.get("mime"),
        page=page,
        per_page=per_page,
    )
    return success(paginated(files, serialize_file))


@file_bp.route("/<int:file_id>", methods=["GET"])
@require_permission(MANAGE_FILES)
def show_file(file_id, ctx):
    return success(serialize_file(FileService().get_file(ctx.user, file_id)))


@file_bp.route("/<int:file_id>/download", methods=["GET"])
@require_permission(MANAGE_FILES)
def download_file(file_id, ctx):
    record, content = FileService().download(ctx.user, file_id)
    return send_file(
        io.BytesIO(content),
        mimetype=record.mime or "application/octet-stream",
        as_attachment=True,
        download_name=record.name,
    )


@file_bp.route("/<int:file_id>", methods=["DELETE"])
@require_permission(MANAGE_FILES)
def delete_file(file_id, ctx):
    FileService().delete_file(ctx.user, file_id)
    return success(message="File deleted successfully.")
