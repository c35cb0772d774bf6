from sqlalchemy.types import JSON
from drainwise.extensions import db
from drainwise.services.option_registry import DEFAULT_CATEGORY_COLOR, DEFAULT_PIPE_SIZE, DEFAULT_SECTOR
from drainwise.utils.timezone_utils import utc_now

class PR2Configuration(db.Model):
    __tablename__ = 'pr2_configuration'

    id = db.Column(db.Integer, primary_key=True)
    owner_id = db.Column(db.String(128), nullable=False, index=True)
    category_id = db.Column(db.String(128), nullable=False, index=True)
    category_name = db.Column(db.String(256), nullable=False)
    description = db.Column(db.Text, nullable=True)
    sector = db.Column(db.String(32), nullable=False, default=DEFAULT_SECTOR)
    pipe_size = db.Column(db.String(16), nullable=False, default=DEFAULT_PIPE_SIZE)
    category_color = db.Column(db.String(16), nullable=False, default=DEFAULT_CATEGORY_COLOR)

    # Option sections: key -> {"enabled": bool, "value": str}
    pricing_options = db.Column(JSON, nullable=False, default=dict)
    quantity_options = db.Column(JSON, nullable=False, default=dict)
    min_quantity_options = db.Column(JSON, nullable=False, default=dict)
    additional_options = db.Column(JSON, nullable=False, default=dict)

    # Section -> ordered option keys, overrides natural map order when non-empty
    stack_order = db.Column(JSON, nullable=False, default=dict)
    math_operators = db.Column(JSON, nullable=False, default=lambda: ['N/A'])
    # Pipe-size key -> list of rows
    range_values = db.Column(JSON, nullable=False, default=dict)
    vehicle_travel_rates = db.Column(JSON, nullable=False, default=list)
    vehicle_travel_rates_stack_order = db.Column(JSON, nullable=False, default=list)

    is_active = db.Column(db.Boolean, nullable=False, default=True)
    created_at = db.Column(db.DateTime, default=utc_now)
    updated_at = db.Column(db.DateTime, default=utc_now, onupdate=utc_now)

    # One configuration per owner, category, sector and pipe size
    __table_args__ = (
        db.UniqueConstraint(
            'owner_id', 'category_id', 'sector', 'pipe_size',
            name='uq_pr2_owner_category_sector_pipe',
        ),
    )

    @classmethod
    def query_owned(cls, owner_id):
        """Query records belonging to one owner only"""
        return cls.query.filter_by(owner_id=owner_id)

    def __repr__(self):
        return f"<PR2Configuration id={self.id} category_id={self.category_id} pipe_size={self.pipe_size}>"
