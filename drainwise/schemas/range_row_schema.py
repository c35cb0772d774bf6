import re
from marshmallow import Schema, fields, validate, pre_load, RAISE, ValidationError

# A pipe size optionally followed by an entry id, e.g. "150" or "150-1501"
PIPE_SIZE_KEY = re.compile(r'^\d+(-\d+)*$')


def unique_row_ids(rows):
    ids = [row['id'] for row in rows]
    if len(set(ids)) != len(ids):
        raise ValidationError('Row ids must be unique within a pipe size')


class RangeRowSchema(Schema):
    class Meta:
        unknown = RAISE

    id = fields.Integer(required=True, strict=True)
    blueValue = fields.String(load_default='')
    greenValue = fields.String(load_default='')
    purpleDebris = fields.String(load_default='')
    purpleLength = fields.String(load_default='')

    @pre_load
    def stringify_values(self, data, **kwargs):
        if not isinstance(data, dict):
            return data
        data = dict(data)
        for key in ('blueValue', 'greenValue', 'purpleDebris', 'purpleLength'):
            value = data.get(key)
            if isinstance(value, (int, float)) and not isinstance(value, bool):
                data[key] = str(value)
        return data


def RangeRows(**kwargs):
    return fields.List(fields.Nested(RangeRowSchema), validate=unique_row_ids, **kwargs)


def RangeValues(data_key):
    """Row sets keyed by pipe size, as stored in a configuration's range_values."""
    return fields.Dict(
        keys=fields.String(validate=validate.Regexp(
            PIPE_SIZE_KEY, error="Invalid pipe size key. Expected digits such as '150' or '150-1501'."
        )),
        values=RangeRows(),
        data_key=data_key,
        load_default=dict,
    )
