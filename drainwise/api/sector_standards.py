from flask import Blueprint, jsonify
from drainwise.services.sector_standards import get_sector_standards, get_all_sector_standards
from drainwise.utils.timezone_utils import get_display_timezone

sector_standards_bp = Blueprint('sector_standards', __name__)

@sector_standards_bp.route('/sector-standards', methods=['GET'])
def list_sector_standards():
    return jsonify(get_all_sector_standards()), 200

@sector_standards_bp.route('/sector-standards/<sector>', methods=['GET'])
def get_sector(sector):
    standards = get_sector_standards(sector)
    if standards is None:
        return jsonify({'error': f"Unknown sector '{sector}'"}), 404
    return jsonify(dict(standards, sectorId=sector)), 200

@sector_standards_bp.route('/settings/timezone', methods=['GET'])
def get_timezone():
    """
    Get the timezone used for human readable timestamps.
    """
    return jsonify({'timezone': get_display_timezone()}), 200
