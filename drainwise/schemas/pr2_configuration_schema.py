from marshmallow import Schema, fields, validate, pre_load, EXCLUDE, RAISE
from marshmallow_sqlalchemy import SQLAlchemyAutoSchema, auto_field
from drainwise.models.pr2_configuration import PR2Configuration
from drainwise.schemas.range_row_schema import RangeValues
from drainwise.services.option_registry import (
    SECTIONS,
    SECTORS,
    MATH_OPERATORS,
    DEFAULT_CATEGORY_COLOR,
    DEFAULT_CATEGORY_NAME,
    DEFAULT_MATH_OPERATORS,
    DEFAULT_PIPE_SIZE,
    DEFAULT_SECTOR,
)
from drainwise.utils.timezone_utils import format_datetime_for_api

HEX_COLOR = validate.Regexp(r'^#(?:[0-9a-fA-F]{3}){1,2}$', error='Must be a hex colour such as #ffffff.')
PIPE_SIZE = validate.Regexp(r'^\d+$', error='Pipe size must be a whole number of millimetres.')

# Falsy values for these keys mean "not supplied" and fall back to defaults
_DEFAULTABLE_KEYS = (
    'categoryName', 'sector', 'pipeSize', 'categoryColor',
    'pricingOptions', 'quantityOptions', 'minQuantityOptions', 'additionalOptions',
    'stackOrder', 'mathOperators', 'rangeValues',
    'vehicleTravelRates', 'vehicleTravelRatesStackOrder',
)


def _stringify_numbers(data, keys):
    if not isinstance(data, dict):
        return data
    data = dict(data)
    for key in keys:
        value = data.get(key)
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            data[key] = str(value)
    return data


class OptionEntrySchema(Schema):
    class Meta:
        unknown = RAISE

    enabled = fields.Boolean(load_default=False)
    value = fields.String(load_default='')

    @pre_load
    def stringify_value(self, data, **kwargs):
        return _stringify_numbers(data, ('value',))


class VehicleTravelRateSchema(Schema):
    class Meta:
        unknown = RAISE

    id = fields.String(required=True, validate=validate.Length(min=1))
    vehicleType = fields.String(required=True, validate=validate.Length(min=1))
    hourlyRate = fields.String(load_default='')
    numberOfHours = fields.String(load_default='')
    enabled = fields.Boolean(load_default=True)

    @pre_load
    def stringify_numbers(self, data, **kwargs):
        return _stringify_numbers(data, ('id', 'hourlyRate', 'numberOfHours'))


def OptionMap(data_key):
    return fields.Dict(
        keys=fields.String(validate=validate.Length(min=1, max=128)),
        values=fields.Nested(OptionEntrySchema),
        data_key=data_key,
        load_default=dict,
    )


class PR2ConfigurationPayloadSchema(Schema):
    """
    Validates create/update bodies. Every omitted field loads with its
    default so an update replaces the whole record rather than merging.
    """
    class Meta:
        # Clients echo back id/createdAt/etc. when saving
        unknown = EXCLUDE

    category_id = fields.String(data_key='categoryId', validate=validate.Length(min=1, max=128))
    category_name = fields.String(
        data_key='categoryName', load_default=DEFAULT_CATEGORY_NAME, validate=validate.Length(min=1, max=256)
    )
    description = fields.String(data_key='description', load_default=None, allow_none=True)
    sector = fields.String(load_default=DEFAULT_SECTOR, validate=validate.OneOf(SECTORS))
    pipe_size = fields.String(data_key='pipeSize', load_default=DEFAULT_PIPE_SIZE, validate=PIPE_SIZE)
    category_color = fields.String(data_key='categoryColor', load_default=DEFAULT_CATEGORY_COLOR, validate=HEX_COLOR)

    pricing_options = OptionMap('pricingOptions')
    quantity_options = OptionMap('quantityOptions')
    min_quantity_options = OptionMap('minQuantityOptions')
    additional_options = OptionMap('additionalOptions')

    stack_order = fields.Dict(
        keys=fields.String(validate=validate.OneOf(list(SECTIONS))),
        values=fields.List(fields.String()),
        data_key='stackOrder',
        load_default=dict,
    )
    math_operators = fields.List(
        fields.String(validate=validate.OneOf(MATH_OPERATORS)),
        data_key='mathOperators',
        load_default=lambda: list(DEFAULT_MATH_OPERATORS),
        validate=validate.Length(min=1),
    )
    range_values = RangeValues('rangeValues')
    vehicle_travel_rates = fields.List(
        fields.Nested(VehicleTravelRateSchema), data_key='vehicleTravelRates', load_default=list
    )
    vehicle_travel_rates_stack_order = fields.List(
        fields.String(), data_key='vehicleTravelRatesStackOrder', load_default=list
    )
    is_active = fields.Boolean(data_key='isActive', load_default=True)

    @pre_load
    def drop_empty_values(self, data, **kwargs):
        if not isinstance(data, dict):
            return data
        data = _stringify_numbers(data, ('pipeSize',))
        for key in _DEFAULTABLE_KEYS:
            if key in data and data[key] in (None, ''):
                del data[key]
        return data


class PR2ConfigurationSchema(SQLAlchemyAutoSchema):
    class Meta:
        model = PR2Configuration
        load_instance = True

    id = auto_field(dump_only=True)
    owner_id = auto_field(data_key='ownerId')
    category_id = auto_field(data_key='categoryId')
    category_name = auto_field(data_key='categoryName')
    description = auto_field()
    sector = auto_field()
    pipe_size = auto_field(data_key='pipeSize')
    category_color = auto_field(data_key='categoryColor')
    pricing_options = auto_field(data_key='pricingOptions')
    quantity_options = auto_field(data_key='quantityOptions')
    min_quantity_options = auto_field(data_key='minQuantityOptions')
    additional_options = auto_field(data_key='additionalOptions')
    stack_order = auto_field(data_key='stackOrder')
    math_operators = auto_field(data_key='mathOperators')
    range_values = auto_field(data_key='rangeValues')
    vehicle_travel_rates = auto_field(data_key='vehicleTravelRates')
    vehicle_travel_rates_stack_order = auto_field(data_key='vehicleTravelRatesStackOrder')
    is_active = auto_field(data_key='isActive')
    created_at = fields.Method('get_created_at', data_key='createdAt')
    updated_at = fields.Method('get_updated_at', data_key='updatedAt')

    def get_created_at(self, obj):
        return format_datetime_for_api(obj.created_at)

    def get_updated_at(self, obj):
        return format_datetime_for_api(obj.updated_at)
