from flask import Blueprint, request, jsonify
from drainwise.services.standard_category_service import StandardCategoryService
from drainwise.services.errors import ServiceError
from drainwise.schemas.standard_category_schema import StandardCategorySchema
from drainwise.extensions import db
import logging

standard_category_bp = Blueprint('standard_category', __name__)
schema = StandardCategorySchema(session=db.session)
schema_many = StandardCategorySchema(many=True, session=db.session)

@standard_category_bp.route('/standard-categories', methods=['GET'])
def list_standard_categories():
    try:
        categories = StandardCategoryService.get_all()
        return jsonify(schema_many.dump(categories)), 200
    except ServiceError as se:
        return jsonify(se.to_dict()), se.status_code
    except Exception as e:
        logging.error(f"Unhandled error in list_standard_categories: {e}", exc_info=True)
        return jsonify({'error': 'An unexpected error occurred. Please try again later.'}), 500

@standard_category_bp.route('/standard-categories', methods=['POST'])
def create_standard_category():
    try:
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            data = {}
        category = StandardCategoryService.create(data)
        return jsonify(schema.dump(category)), 200
    except ServiceError as se:
        return jsonify(se.to_dict()), se.status_code
    except Exception as e:
        logging.error(f"Unhandled error in create_standard_category: {e}", exc_info=True)
        return jsonify({'error': 'An unexpected error occurred. Please try again later.'}), 500
