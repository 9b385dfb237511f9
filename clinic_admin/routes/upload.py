"""
Image uploads and, for the local backend, serving the stored files.
"""
from flask import Blueprint, jsonify, request, send_from_directory
from flask_login import login_required

from clinic_admin.errors import NotFoundError, ValidationError
from clinic_admin.services.storage import LocalStorage, get_storage, validate_upload

upload_bp = Blueprint('upload', __name__)


@upload_bp.route('/api/uploads', methods=['POST'])
@login_required
def upload_file():
    """
    Store one image and return its public URL
    Form field: file (jpeg, png, webp, gif or svg)
    """
    file = request.files.get('file')
    if file is None or not file.filename:
        raise ValidationError('No file uploaded', field='file')

    data = file.read()
    validate_upload(data, file.mimetype)
    url = get_storage().store(data, file.filename, file.mimetype, prefix='uploads')
    return jsonify({
        'success': True,
        'url': url
    }), 201


@upload_bp.route('/uploads/<path:filename>', methods=['GET'])
def serve_upload(filename):
    storage = get_storage()
    if not isinstance(storage, LocalStorage):
        raise NotFoundError('File not found')
    return send_from_directory(storage.root, filename)
