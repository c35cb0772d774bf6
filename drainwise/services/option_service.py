import logging
from sqlalchemy.orm.attributes import flag_modified
from drainwise.services.errors import ValidationError
from drainwise.services.option_registry import SECTIONS, section_column
from drainwise.services.pr2_configuration_service import PR2ConfigurationService, commit_or_raise
from drainwise.services.stack_order import add_option, remove_option, rename_option, reorder, set_option
from drainwise.utils.timezone_utils import utc_now

logger = logging.getLogger(__name__)


def _require_section(section):
    column = section_column(section)
    if column is None:
        raise ValidationError(f"Unknown section '{section}'. Expected one of: {', '.join(SECTIONS)}")
    return column


def _section_state(config, section):
    column = _require_section(section)
    options = dict(getattr(config, column) or {})
    order = list((config.stack_order or {}).get(section) or [])
    return column, options, order


def _store(config, section, column, options, order):
    setattr(config, column, options)
    stack_order = dict(config.stack_order or {})
    stack_order[section] = order
    config.stack_order = stack_order
    # JSON values compare equal regardless of key order
    flag_modified(config, column)
    flag_modified(config, 'stack_order')
    config.updated_at = utc_now()


class PR2OptionService:
    """Structural edits to one option section of a stored configuration."""

    @staticmethod
    def add(config_id, owner_id, section, name):
        config = PR2ConfigurationService.get_by_id(config_id, owner_id)
        column, options, order = _section_state(config, section)
        key, options, order = add_option(options, order, name)
        _store(config, section, column, options, order)
        commit_or_raise('add option')
        logger.info(f"Added option '{key}' to {section} of configuration {config_id}")
        return config, key

    @staticmethod
    def update(config_id, owner_id, section, key, name=None, enabled=None, value=None):
        config = PR2ConfigurationService.get_by_id(config_id, owner_id)
        column, options, order = _section_state(config, section)
        if name is not None:
            key, options, order = rename_option(options, order, key, name)
        if enabled is not None or value is not None:
            options = set_option(options, key, enabled=enabled, value=value)
        _store(config, section, column, options, order)
        commit_or_raise('update option')
        return config, key

    @staticmethod
    def remove(config_id, owner_id, section, key):
        config = PR2ConfigurationService.get_by_id(config_id, owner_id)
        column, options, order = _section_state(config, section)
        options, order = remove_option(options, order, key)
        _store(config, section, column, options, order)
        commit_or_raise('remove option')
        logger.info(f"Removed option '{key}' from {section} of configuration {config_id}")
        return config

    @staticmethod
    def reorder(config_id, owner_id, section, keys):
        config = PR2ConfigurationService.get_by_id(config_id, owner_id)
        column, options, _ = _section_state(config, section)
        options, order = reorder(options, keys)
        _store(config, section, column, options, order)
        commit_or_raise('reorder options')
        return config
