import logging
import time
from marshmallow import ValidationError as SchemaValidationError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm.attributes import flag_modified
from drainwise.extensions import db
from drainwise.models.pr2_configuration import PR2Configuration
from drainwise.schemas.pr2_configuration_schema import PR2ConfigurationPayloadSchema, PR2ConfigurationSchema
from drainwise.services.errors import (
    ConfirmationRequiredError,
    ConflictError,
    ServiceError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from drainwise.services.option_registry import SECTIONS, option_label
from drainwise.services.stack_order import ordered_options, reconcile_rows, reconcile_stack_orders
from drainwise.utils.timezone_utils import utc_now, format_datetime_for_api

logger = logging.getLogger(__name__)

payload_schema = PR2ConfigurationPayloadSchema()
record_schema = PR2ConfigurationSchema(session=db.session)

_GENERATED_ID_ATTEMPTS = 5

# Replaced wholesale on every write
_REPLACED_FIELDS = (
    'category_name',
    'sector',
    'pipe_size',
    'category_color',
    'pricing_options',
    'quantity_options',
    'min_quantity_options',
    'additional_options',
    'math_operators',
    'range_values',
    'vehicle_travel_rates',
    'is_active',
)


def load_payload(data):
    """Validate a create/update body and fill in defaults for omitted fields."""
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValidationError('Request body must be a JSON object')
    try:
        return payload_schema.load(data)
    except SchemaValidationError as err:
        raise ValidationError('Validation failed', details=err.messages)


def describe_options(config):
    """
    Human readable summary of the enabled options of a configuration.

    Pricing values are shown in pounds, the first math operator sits between
    the pricing and quantity parts, and each section follows its stack order.
    """
    stack_order = config.stack_order or {}
    parts = []
    for key, entry in ordered_options(config.pricing_options or {}, stack_order.get('pricing')):
        if entry.get('enabled'):
            value = f"£{entry['value']}" if entry.get('value') else '[value]'
            parts.append(f"{option_label('pricing', key)} = {value}")

    operators = config.math_operators or []
    if operators and operators[0] != 'N/A':
        parts.append(operators[0])

    for section in ('quantity', 'minQuantity', 'additional'):
        options = getattr(config, SECTIONS[section]['column']) or {}
        for key, entry in ordered_options(options, stack_order.get(section)):
            if entry.get('enabled'):
                parts.append(f"{option_label(section, key)} = {entry.get('value') or '[value]'}")

    if not parts:
        return f"{config.category_name} price configuration"
    return '. '.join(parts)


def commit_or_raise(action):
    """Commit the session, translating database failures into service errors."""
    try:
        db.session.commit()
    except IntegrityError as e:
        db.session.rollback()
        logger.warning(f"Integrity error while trying to {action}: {e}")
        raise ConflictError('A configuration already exists for this category, sector and pipe size.')
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Error while trying to {action}: {e}", exc_info=True)
        raise StorageError(f"Could not {action}. Please try again later.")


class PR2ConfigurationService:
    @staticmethod
    def get_all(owner_id, sector=None, category_id=None):
        try:
            query = PR2Configuration.query_owned(owner_id)
            if sector:
                query = query.filter_by(sector=sector)
            if category_id:
                query = query.filter_by(category_id=category_id)
            return query.order_by(PR2Configuration.id).all()
        except SQLAlchemyError as e:
            logger.error(f"Error fetching configurations: {e}", exc_info=True)
            raise StorageError("Could not fetch configurations. Please try again later.")

    @staticmethod
    def get_by_category(owner_id, category_id, pipe_size=None):
        try:
            query = PR2Configuration.query_owned(owner_id).filter_by(category_id=category_id)
            if pipe_size:
                query = query.filter_by(pipe_size=pipe_size)
            # Most recent first
            return query.order_by(PR2Configuration.id.desc()).all()
        except SQLAlchemyError as e:
            logger.error(f"Error fetching configurations for category {category_id}: {e}", exc_info=True)
            raise StorageError("Could not fetch configurations. Please try again later.")

    @staticmethod
    def get_by_id(config_id, owner_id):
        try:
            config = PR2Configuration.query_owned(owner_id).filter_by(id=config_id).first()
        except SQLAlchemyError as e:
            logger.error(f"Error fetching configuration {config_id}: {e}", exc_info=True)
            raise StorageError("Could not fetch configuration. Please try again later.")
        if not config:
            raise NotFoundError('Configuration not found')
        return config

    @staticmethod
    def find_exact(owner_id, category_id, sector, pipe_size):
        try:
            return PR2Configuration.query_owned(owner_id).filter_by(
                category_id=category_id, sector=sector, pipe_size=pipe_size
            ).first()
        except SQLAlchemyError as e:
            logger.error(f"Error looking up {pipe_size}mm configuration for {category_id}: {e}", exc_info=True)
            raise StorageError("Could not fetch configuration. Please try again later.")

    @staticmethod
    def apply_values(config, values):
        """Copy loaded payload values onto a record and repair its stack orders."""
        for field in _REPLACED_FIELDS:
            setattr(config, field, values[field])
        sections = {section: getattr(config, meta['column']) for section, meta in SECTIONS.items()}
        config.stack_order = reconcile_stack_orders(values['stack_order'], sections)
        config.vehicle_travel_rates_stack_order = reconcile_rows(
            values['vehicle_travel_rates'], values['vehicle_travel_rates_stack_order']
        )
        config.description = values.get('description') or describe_options(config)
        if config.id is not None:
            # JSON values compare equal regardless of key order
            for meta in SECTIONS.values():
                flag_modified(config, meta['column'])
            flag_modified(config, 'range_values')

    @staticmethod
    def create(owner_id, data):
        values = load_payload(data)
        generated = not values.get('category_id')
        category_id = values.get('category_id') or f"clean-{int(time.time() * 1000)}"
        config = PR2Configuration(owner_id=owner_id, category_id=category_id)
        PR2ConfigurationService.apply_values(config, values)
        config.is_active = True
        for attempt in range(1, _GENERATED_ID_ATTEMPTS + 1):
            db.session.add(config)
            try:
                commit_or_raise('create configuration')
                break
            except ConflictError:
                if not generated or attempt == _GENERATED_ID_ATTEMPTS:
                    raise
                # Another create in the same millisecond took the generated id
                config.category_id = f"{category_id}-{attempt + 1}"
        logger.info(f"Created configuration {config.id} ({config.category_id}, {config.pipe_size}mm, {config.sector})")
        return config

    @staticmethod
    def update(config_id, owner_id, data):
        config = PR2ConfigurationService.get_by_id(config_id, owner_id)
        values = load_payload(data)
        if values.get('category_id'):
            config.category_id = values['category_id']
        PR2ConfigurationService.apply_values(config, values)
        config.updated_at = utc_now()
        commit_or_raise('update configuration')
        logger.info(f"Updated configuration {config.id}")
        return config

    @staticmethod
    def delete(config_id, owner_id, user_confirmed):
        if user_confirmed is not True:
            raise ConfirmationRequiredError(
                'DELETION BLOCKED: User confirmation required',
                payload={
                    'configId': config_id,
                    'message': 'This deletion requires explicit user approval to prevent accidental data loss',
                },
            )
        config = PR2ConfigurationService.get_by_id(config_id, owner_id)
        snapshot = record_schema.dump(config)
        logger.warning(
            "USER-APPROVED DELETION: "
            f"configId={config.id} categoryId={config.category_id} "
            f"categoryName={config.category_name!r} timestamp={format_datetime_for_api(utc_now())}"
        )
        db.session.delete(config)
        commit_or_raise('delete configuration')
        return snapshot
