from marshmallow import fields
from marshmallow_sqlalchemy import SQLAlchemyAutoSchema, auto_field
from drainwise.models.standard_category import StandardCategory
from drainwise.utils.timezone_utils import format_datetime_for_api

class StandardCategorySchema(SQLAlchemyAutoSchema):
    class Meta:
        model = StandardCategory
        load_instance = True
    id = auto_field(dump_only=True)
    category_id = auto_field(data_key='categoryId')
    category_name = auto_field(data_key='categoryName')
    description = auto_field()
    icon_name = auto_field(data_key='iconName')
    is_default = auto_field(data_key='isDefault')
    is_active = auto_field(data_key='isActive')
    created_at = fields.Method('get_created_at', data_key='createdAt')

    def get_created_at(self, obj):
        return format_datetime_for_api(obj.created_at)
