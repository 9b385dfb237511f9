"""
Blog posts. Writes accept JSON, or multipart form data from the editor with
an optional ``image`` file.
"""
from flask import Blueprint, request, jsonify
from flask_login import login_required

from clinic_admin.schemas import BlogCreate, BlogUpdate, ContentFilters, load
from clinic_admin.services import catalog_service
from clinic_admin.services.storage import get_storage, validate_upload
from clinic_admin.utils.forms import form_payload

blog_bp = Blueprint('blog', __name__, url_prefix='/api/blogs')

BLOG_FORM_FIELDS = ('title', 'slug', 'excerpt', 'content', 'imageUrl')
BLOG_FORM_FLAGS = ('published', 'removeImage')


def _blog_payload():
    """Return (payload, image file or None) from JSON or multipart bodies."""
    if request.mimetype == 'multipart/form-data':
        image = request.files.get('image')
        if image is not None and not image.filename:
            image = None
        return form_payload(request.form, BLOG_FORM_FIELDS, BLOG_FORM_FLAGS), image
    return request.get_json(silent=True), None


def _store_image(image):
    if image is None:
        return None
    data = image.read()
    validate_upload(data, image.mimetype)
    return get_storage().store(data, image.filename, image.mimetype, prefix='blogs')


@blog_bp.route('', methods=['GET'])
def list_blogs():
    """
    Public blog list, newest first
    Query params: q, published
    """
    filters = load(ContentFilters, ContentFilters.from_args(request.args))
    blogs = catalog_service.list_blogs(filters)
    return jsonify({
        'success': True,
        'data': [b.to_dict() for b in blogs]
    }), 200


@blog_bp.route('/<blog_id>', methods=['GET'])
def get_blog(blog_id):
    blog = catalog_service.get_blog(blog_id)
    return jsonify({
        'success': True,
        'data': blog.to_dict()
    }), 200


@blog_bp.route('', methods=['POST'])
@login_required
def create_blog():
    payload, image = _blog_payload()
    data = load(BlogCreate, payload)
    blog = catalog_service.create_blog(data, image_url=_store_image(image))
    return jsonify({
        'success': True,
        'data': blog.to_dict()
    }), 201


@blog_bp.route('/<blog_id>', methods=['PATCH', 'PUT'])
@login_required
def update_blog(blog_id):
    payload, image = _blog_payload()
    data = load(BlogUpdate, payload)
    catalog_service.get_blog(blog_id)
    blog = catalog_service.update_blog(blog_id, data, image_url=_store_image(image))
    return jsonify({
        'success': True,
        'data': blog.to_dict()
    }), 200


@blog_bp.route('/<blog_id>', methods=['DELETE'])
@login_required
def delete_blog(blog_id):
    catalog_service.delete_blog(blog_id)
    return jsonify({
        'success': True,
        'ok': True
    }), 200
