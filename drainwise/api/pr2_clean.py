from flask import Blueprint, request, jsonify, current_app
from drainwise.services.pr2_configuration_service import PR2ConfigurationService, ServiceError
from drainwise.services.option_service import PR2OptionService
from drainwise.services.pipe_size_detector import PipeSizeDetector
from drainwise.services.pipe_size_rows import PipeSizeRowService
from drainwise.services.autosave_service import configuration_slot, schedule_configuration_save
from drainwise.services.errors import ValidationError
from drainwise.services.option_registry import registry_snapshot
from drainwise.schemas.pr2_configuration_schema import PR2ConfigurationSchema
from drainwise.utils.owner import get_current_owner_id
from drainwise.extensions import db
import logging

pr2_clean_bp = Blueprint('pr2_clean', __name__)
schema = PR2ConfigurationSchema(session=db.session)
schema_many = PR2ConfigurationSchema(many=True, session=db.session)

UNEXPECTED_ERROR = {'error': 'An unexpected error occurred. Please try again later.'}


def _json_body():
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError('Request body must be a JSON object')
    return data


def _autosave():
    return current_app.extensions['autosave']


@pr2_clean_bp.route('/pr2-clean', methods=['GET'])
def list_configurations():
    try:
        configs = PR2ConfigurationService.get_all(
            get_current_owner_id(),
            sector=request.args.get('sector'),
            category_id=request.args.get('categoryId'),
        )
        return jsonify(schema_many.dump(configs)), 200
    except ServiceError as se:
        return jsonify(se.to_dict()), se.status_code
    except Exception as e:
        logging.error(f"Unhandled error in list_configurations: {e}", exc_info=True)
        return jsonify(UNEXPECTED_ERROR), 500


@pr2_clean_bp.route('/pr2-clean/option-registry', methods=['GET'])
def get_option_registry():
    return jsonify(registry_snapshot()), 200


@pr2_clean_bp.route('/pr2-clean/category/<category_id>', methods=['GET'])
def list_configurations_by_category(category_id):
    try:
        configs = PR2ConfigurationService.get_by_category(
            get_current_owner_id(), category_id, pipe_size=request.args.get('pipeSize')
        )
        return jsonify(schema_many.dump(configs)), 200
    except ServiceError as se:
        return jsonify(se.to_dict()), se.status_code
    except Exception as e:
        logging.error(f"Unhandled error in list_configurations_by_category: {e}", exc_info=True)
        return jsonify(UNEXPECTED_ERROR), 500


@pr2_clean_bp.route('/pr2-clean/auto-detect-pipe-size', methods=['POST'])
def auto_detect_pipe_size():
    try:
        data = _json_body()
        config, created = PipeSizeDetector.auto_detect(
            get_current_owner_id(),
            data.get('categoryId'),
            data.get('pipeSize'),
            sector=data.get('sector'),
        )
        return jsonify({'configuration': schema.dump(config), 'created': created}), 200
    except ServiceError as se:
        return jsonify(se.to_dict()), se.status_code
    except Exception as e:
        logging.error(f"Unhandled error in auto_detect_pipe_size: {e}", exc_info=True)
        return jsonify(UNEXPECTED_ERROR), 500


@pr2_clean_bp.route('/pr2-clean/<int:config_id>', methods=['GET'])
def get_configuration(config_id):
    try:
        config = PR2ConfigurationService.get_by_id(config_id, get_current_owner_id())
        return jsonify(schema.dump(config)), 200
    except ServiceError as se:
        return jsonify(se.to_dict()), se.status_code
    except Exception as e:
        logging.error(f"Unhandled error in get_configuration: {e}", exc_info=True)
        return jsonify(UNEXPECTED_ERROR), 500


@pr2_clean_bp.route('/pr2-clean', methods=['POST'])
def create_configuration():
    try:
        config = PR2ConfigurationService.create(get_current_owner_id(), _json_body())
        return jsonify(schema.dump(config)), 200
    except ServiceError as se:
        return jsonify(se.to_dict()), se.status_code
    except Exception as e:
        logging.error(f"Unhandled error in create_configuration: {e}", exc_info=True)
        return jsonify(UNEXPECTED_ERROR), 500


@pr2_clean_bp.route('/pr2-clean/<int:config_id>', methods=['PUT'])
def update_configuration(config_id):
    try:
        owner_id = get_current_owner_id()
        config = PR2ConfigurationService.update(config_id, owner_id, _json_body())
        # An explicit save supersedes any edit still waiting to be auto-saved
        _autosave().cancel(configuration_slot(config_id, owner_id))
        return jsonify(schema.dump(config)), 200
    except ServiceError as se:
        return jsonify(se.to_dict()), se.status_code
    except Exception as e:
        logging.error(f"Unhandled error in update_configuration: {e}", exc_info=True)
        return jsonify(UNEXPECTED_ERROR), 500


@pr2_clean_bp.route('/pr2-clean/<int:config_id>', methods=['DELETE'])
def delete_configuration(config_id):
    try:
        owner_id = get_current_owner_id()
        data = _json_body()
        snapshot = PR2ConfigurationService.delete(config_id, owner_id, data.get('userConfirmed'))
        _autosave().cancel(configuration_slot(config_id, owner_id))
        return jsonify({'message': 'Configuration deleted successfully', 'deletedConfig': snapshot}), 200
    except ServiceError as se:
        return jsonify(se.to_dict()), se.status_code
    except Exception as e:
        logging.error(f"Unhandled error in delete_configuration: {e}", exc_info=True)
        return jsonify(UNEXPECTED_ERROR), 500


# Option sections

@pr2_clean_bp.route('/pr2-clean/<int:config_id>/options/<section>', methods=['POST'])
def add_option(config_id, section):
    try:
        data = _json_body()
        config, key = PR2OptionService.add(config_id, get_current_owner_id(), section, data.get('name'))
        return jsonify({'key': key, 'configuration': schema.dump(config)}), 200
    except ServiceError as se:
        return jsonify(se.to_dict()), se.status_code
    except Exception as e:
        logging.error(f"Unhandled error in add_option: {e}", exc_info=True)
        return jsonify(UNEXPECTED_ERROR), 500


@pr2_clean_bp.route('/pr2-clean/<int:config_id>/options/<section>/<key>', methods=['PUT'])
def update_option(config_id, section, key):
    try:
        data = _json_body()
        enabled = data.get('enabled')
        if enabled is not None and not isinstance(enabled, bool):
            raise ValidationError('enabled must be true or false')
        value = data.get('value')
        if value is not None and (isinstance(value, bool) or not isinstance(value, (str, int, float))):
            raise ValidationError('value must be a string or number')
        config, new_key = PR2OptionService.update(
            config_id, get_current_owner_id(), section, key,
            name=data.get('name'), enabled=enabled, value=value,
        )
        return jsonify({'key': new_key, 'configuration': schema.dump(config)}), 200
    except ServiceError as se:
        return jsonify(se.to_dict()), se.status_code
    except Exception as e:
        logging.error(f"Unhandled error in update_option: {e}", exc_info=True)
        return jsonify(UNEXPECTED_ERROR), 500


@pr2_clean_bp.route('/pr2-clean/<int:config_id>/options/<section>/<key>', methods=['DELETE'])
def remove_option(config_id, section, key):
    try:
        config = PR2OptionService.remove(config_id, get_current_owner_id(), section, key)
        return jsonify(schema.dump(config)), 200
    except ServiceError as se:
        return jsonify(se.to_dict()), se.status_code
    except Exception as e:
        logging.error(f"Unhandled error in remove_option: {e}", exc_info=True)
        return jsonify(UNEXPECTED_ERROR), 500


@pr2_clean_bp.route('/pr2-clean/<int:config_id>/stack-order/<section>', methods=['PUT'])
def reorder_options(config_id, section):
    try:
        data = _json_body()
        config = PR2OptionService.reorder(config_id, get_current_owner_id(), section, data.get('order'))
        return jsonify(schema.dump(config)), 200
    except ServiceError as se:
        return jsonify(se.to_dict()), se.status_code
    except Exception as e:
        logging.error(f"Unhandled error in reorder_options: {e}", exc_info=True)
        return jsonify(UNEXPECTED_ERROR), 500


# Range rows per pipe size

@pr2_clean_bp.route('/pr2-clean/<int:config_id>/rows/<pipe_size_key>', methods=['GET'])
def get_rows(config_id, pipe_size_key):
    try:
        rows = PipeSizeRowService.get_rows(config_id, get_current_owner_id(), pipe_size_key)
        return jsonify({'pipeSizeKey': pipe_size_key, 'rows': rows}), 200
    except ServiceError as se:
        return jsonify(se.to_dict()), se.status_code
    except Exception as e:
        logging.error(f"Unhandled error in get_rows: {e}", exc_info=True)
        return jsonify(UNEXPECTED_ERROR), 500


@pr2_clean_bp.route('/pr2-clean/<int:config_id>/rows/<pipe_size_key>', methods=['PUT'])
def set_rows(config_id, pipe_size_key):
    try:
        data = _json_body()
        rows = PipeSizeRowService.set_rows(config_id, get_current_owner_id(), pipe_size_key, data.get('rows'))
        return jsonify({'pipeSizeKey': pipe_size_key, 'rows': rows}), 200
    except ServiceError as se:
        return jsonify(se.to_dict()), se.status_code
    except Exception as e:
        logging.error(f"Unhandled error in set_rows: {e}", exc_info=True)
        return jsonify(UNEXPECTED_ERROR), 500


# Debounced auto-save

@pr2_clean_bp.route('/pr2-clean/<int:config_id>/autosave', methods=['POST'])
def schedule_autosave(config_id):
    try:
        delay_ms = schedule_configuration_save(
            current_app._get_current_object(), _autosave(), config_id, get_current_owner_id(), _json_body()
        )
        return jsonify({'scheduled': True, 'delayMs': delay_ms}), 202
    except ServiceError as se:
        return jsonify(se.to_dict()), se.status_code
    except Exception as e:
        logging.error(f"Unhandled error in schedule_autosave: {e}", exc_info=True)
        return jsonify(UNEXPECTED_ERROR), 500


@pr2_clean_bp.route('/pr2-clean/<int:config_id>/autosave/flush', methods=['POST'])
def flush_autosave(config_id):
    try:
        owner_id = get_current_owner_id()
        flushed, _ = _autosave().flush(configuration_slot(config_id, owner_id))
        if not flushed:
            return jsonify({'flushed': False}), 200
        # Re-read in this request's session; the write ran in its own app context
        config = PR2ConfigurationService.get_by_id(config_id, owner_id)
        return jsonify({'flushed': True, 'configuration': schema.dump(config)}), 200
    except ServiceError as se:
        return jsonify(se.to_dict()), se.status_code
    except Exception as e:
        logging.error(f"Unhandled error in flush_autosave: {e}", exc_info=True)
        return jsonify(UNEXPECTED_ERROR), 500


@pr2_clean_bp.route('/pr2-clean/<int:config_id>/autosave', methods=['DELETE'])
def cancel_autosave(config_id):
    try:
        cancelled = _autosave().cancel(configuration_slot(config_id, get_current_owner_id()))
        return jsonify({'cancelled': cancelled}), 200
    except ServiceError as se:
        return jsonify(se.to_dict()), se.status_code
    except Exception as e:
        logging.error(f"Unhandled error in cancel_autosave: {e}", exc_info=True)
        return jsonify(UNEXPECTED_ERROR), 500
