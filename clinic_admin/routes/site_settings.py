from flask import Blueprint, request, jsonify
from flask_login import login_required

from clinic_admin.schemas import SiteSettingsUpdate, load
from clinic_admin.services import catalog_service

site_settings_bp = Blueprint('site_settings', __name__, url_prefix='/api/site-settings')


@site_settings_bp.route('', methods=['GET'])
def get_site_settings():
    """Website-wide settings; defaults until first saved"""
    settings = catalog_service.get_site_settings()
    return jsonify({
        'success': True,
        'data': settings.to_dict()
    }), 200


@site_settings_bp.route('', methods=['PUT', 'PATCH'])
@login_required
def update_site_settings():
    data = load(SiteSettingsUpdate, request.get_json(silent=True))
    settings = catalog_service.update_site_settings(data)
    return jsonify({
        'success': True,
        'data': settings.to_dict()
    }), 200
