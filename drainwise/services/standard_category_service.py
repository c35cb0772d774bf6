import logging
import re
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from drainwise.extensions import db
from drainwise.models.standard_category import StandardCategory
from drainwise.services.errors import ConflictError, StorageError, ValidationError
from drainwise.services.sector_standards import generate_standard_description

logger = logging.getLogger(__name__)


def derive_category_id(category_name):
    """'Patch Repairs (CIPP)' -> 'patch-repairs-cipp-'"""
    category_id = re.sub(r'[^a-z0-9]', '-', category_name.lower())
    return re.sub(r'-+', '-', category_id)


class StandardCategoryService:
    @staticmethod
    def get_all():
        try:
            return StandardCategory.query.order_by(StandardCategory.id).all()
        except SQLAlchemyError as e:
            logger.error(f"Error fetching standard categories: {e}", exc_info=True)
            raise StorageError("Could not fetch standard categories. Please try again later.")

    @staticmethod
    def create(data):
        data = data or {}
        category_name = data.get('categoryName')
        if not isinstance(category_name, str) or not category_name.strip():
            raise ValidationError('Category name is required')
        category_name = category_name.strip()
        category_id = derive_category_id(category_name)

        if StandardCategory.query.filter_by(category_id=category_id).first():
            raise ConflictError('Category already exists')

        description = data.get('description')
        if not isinstance(description, str) or not description.strip():
            description = generate_standard_description(category_name)

        category = StandardCategory(
            category_id=category_id,
            category_name=category_name,
            description=description,
            icon_name='Edit',
            is_default=True,
            is_active=True,
        )
        db.session.add(category)
        try:
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            raise ConflictError('Category already exists')
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f"Error creating standard category {category_id}: {e}", exc_info=True)
            raise StorageError("Could not create standard category. Please try again later.")
        logger.info(f"Created standard category {category_id}")
        return category
