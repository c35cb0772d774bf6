"""
Range rows of a configuration, keyed by pipe size.

A configuration keeps one row set per pipe-size key in its range_values
column. Keys are a pipe size optionally followed by an entry id, for
example "150" or "150-1501". The active key is always passed in by the
caller; nothing here remembers which pipe size is currently selected.
"""
import copy
import logging
from marshmallow import ValidationError as SchemaValidationError
from sqlalchemy.orm.attributes import flag_modified
from drainwise.schemas.range_row_schema import PIPE_SIZE_KEY, RangeRowSchema, unique_row_ids
from drainwise.services.errors import ValidationError
from drainwise.services.pr2_configuration_service import PR2ConfigurationService, commit_or_raise
from drainwise.utils.timezone_utils import utc_now

logger = logging.getLogger(__name__)


def default_rows():
    return [{'id': 1, 'blueValue': '', 'greenValue': '', 'purpleDebris': '', 'purpleLength': ''}]


rows_schema = RangeRowSchema(many=True)


def validate_key(pipe_size_key):
    if not isinstance(pipe_size_key, str) or not PIPE_SIZE_KEY.match(pipe_size_key):
        raise ValidationError(f"Invalid pipe size key '{pipe_size_key}'. Expected digits such as '150' or '150-1501'")
    return pipe_size_key


class PipeSizeRowStore:
    """Keyed view over the range_values of one configuration record."""

    def __init__(self, config):
        self.config = config

    def keys(self):
        return list((self.config.range_values or {}).keys())

    def get_rows(self, pipe_size_key):
        validate_key(pipe_size_key)
        rows = (self.config.range_values or {}).get(pipe_size_key)
        if not rows:
            return default_rows()
        return copy.deepcopy(rows)

    def set_rows(self, pipe_size_key, rows):
        validate_key(pipe_size_key)
        if not isinstance(rows, list):
            raise ValidationError('rows must be a list')
        try:
            loaded = rows_schema.load(rows)
            unique_row_ids(loaded)
        except SchemaValidationError as err:
            raise ValidationError('Validation failed', details=err.messages)
        range_values = self.config.range_values
        if range_values is None:
            range_values = {}
            self.config.range_values = range_values
        range_values[pipe_size_key] = loaded
        flag_modified(self.config, 'range_values')
        return copy.deepcopy(loaded)


class PipeSizeRowService:
    @staticmethod
    def get_rows(config_id, owner_id, pipe_size_key):
        config = PR2ConfigurationService.get_by_id(config_id, owner_id)
        return PipeSizeRowStore(config).get_rows(pipe_size_key)

    @staticmethod
    def set_rows(config_id, owner_id, pipe_size_key, rows):
        config = PR2ConfigurationService.get_by_id(config_id, owner_id)
        saved = PipeSizeRowStore(config).set_rows(pipe_size_key, rows)
        config.updated_at = utc_now()
        commit_or_raise('save range rows')
        logger.info(f"Saved {len(saved)} range rows for {pipe_size_key} on configuration {config_id}")
        return saved
