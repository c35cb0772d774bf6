"""
Clone-on-demand creation of configurations for unconfigured pipe sizes.

When the pricing form switches to a pipe size that has no configuration yet
for the category and sector, the most recently created sibling is used as a
template so the new record starts with the same options, ordering and rates.
"""
import copy
import logging
import re
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from drainwise.extensions import db
from drainwise.models.pr2_configuration import PR2Configuration
from drainwise.services.errors import StorageError, ValidationError
from drainwise.services.option_registry import (
    AUTO_DETECT_FALLBACK_COLOR,
    DEFAULT_MATH_OPERATORS,
    DEFAULT_SECTOR,
    MSCC5_PIPE_SIZES,
    SECTORS,
    empty_stack_order,
)
from drainwise.services.pr2_configuration_service import PR2ConfigurationService

logger = logging.getLogger(__name__)

_PIPE_SIZE_TOKEN = re.compile(r'\d+mm\s*')
_TEST_POINT_PREFIX = re.compile(r'^(TP\d+\s*-\s*)?')


def derive_configuration_name(base_name, pipe_size):
    """
    Name for a cloned configuration.

    "TP1 - 150mm CCTV" becomes "TP1 - 300mm CCTV" for pipe size 300. Without a
    base name the result is "<size>mm Configuration".
    """
    if not base_name:
        return f"{pipe_size}mm Configuration"
    prefix = _TEST_POINT_PREFIX.match(base_name).group(0)
    remainder = _TEST_POINT_PREFIX.sub('', _PIPE_SIZE_TOKEN.sub('', base_name, count=1), count=1)
    return f"{prefix}{pipe_size}mm {remainder}".rstrip()


def _normalise_pipe_size(pipe_size):
    if isinstance(pipe_size, bool) or not isinstance(pipe_size, (str, int)):
        raise ValidationError('pipeSize is required')
    pipe_size = str(pipe_size).strip()
    if pipe_size.lower().endswith('mm'):
        pipe_size = pipe_size[:-2].strip()
    if pipe_size not in MSCC5_PIPE_SIZES:
        raise ValidationError(
            f"Invalid pipe size '{pipe_size}'. Must be one of the MSCC5 standard sizes: "
            f"{', '.join(MSCC5_PIPE_SIZES)}"
        )
    return pipe_size


class PipeSizeDetector:
    @staticmethod
    def find_base(owner_id, category_id, sector):
        try:
            return PR2Configuration.query_owned(owner_id).filter_by(
                category_id=category_id, sector=sector
            ).order_by(PR2Configuration.id.desc()).first()
        except SQLAlchemyError as e:
            logger.error(f"Error looking up base configuration for {category_id}: {e}", exc_info=True)
            raise StorageError("Could not fetch configuration. Please try again later.")

    @staticmethod
    def auto_detect(owner_id, category_id, pipe_size, sector=None):
        """
        Return the configuration for (category, pipe size, sector), creating
        it from the nearest sibling when it does not exist yet.

        Returns:
            (configuration, created) tuple
        """
        if not isinstance(category_id, str) or not category_id.strip():
            raise ValidationError('categoryId is required')
        pipe_size = _normalise_pipe_size(pipe_size)
        sector = sector or DEFAULT_SECTOR
        if sector not in SECTORS:
            raise ValidationError(f"Invalid sector '{sector}'")

        existing = PR2ConfigurationService.find_exact(owner_id, category_id, sector, pipe_size)
        if existing:
            logger.info(f"Found existing {pipe_size}mm configuration {existing.id} for {category_id}")
            return existing, False

        base = PipeSizeDetector.find_base(owner_id, category_id, sector)
        config = PR2Configuration(
            owner_id=owner_id,
            category_id=category_id,
            category_name=derive_configuration_name(base.category_name if base else None, pipe_size),
            description=f"Auto-generated {pipe_size}mm configuration",
            sector=sector,
            pipe_size=pipe_size,
            category_color=base.category_color if base else AUTO_DETECT_FALLBACK_COLOR,
            is_active=True,
        )
        if base:
            for field in (
                'pricing_options', 'quantity_options', 'min_quantity_options', 'additional_options',
                'stack_order', 'math_operators', 'range_values',
                'vehicle_travel_rates', 'vehicle_travel_rates_stack_order',
            ):
                setattr(config, field, copy.deepcopy(getattr(base, field)))
        else:
            config.pricing_options = {}
            config.quantity_options = {}
            config.min_quantity_options = {}
            config.additional_options = {}
            config.stack_order = empty_stack_order()
            config.math_operators = list(DEFAULT_MATH_OPERATORS)
            config.range_values = {}
            config.vehicle_travel_rates = []
            config.vehicle_travel_rates_stack_order = []

        db.session.add(config)
        try:
            db.session.commit()
        except IntegrityError:
            # A concurrent request created the same configuration first
            db.session.rollback()
            winner = PR2ConfigurationService.find_exact(owner_id, category_id, sector, pipe_size)
            if winner is None:
                logger.error(f"Integrity error creating {pipe_size}mm configuration for {category_id}", exc_info=True)
                raise StorageError("Could not create configuration. Please try again later.")
            logger.info(f"Concurrent auto-detect for {category_id} {pipe_size}mm resolved to {winner.id}")
            return winner, False
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f"Error creating {pipe_size}mm configuration for {category_id}: {e}", exc_info=True)
            raise StorageError("Could not create configuration. Please try again later.")

        logger.info(
            f"Auto-created {pipe_size}mm configuration {config.id} for {category_id}"
            + (f" from base {base.id}" if base else " with defaults")
        )
        return config, True
