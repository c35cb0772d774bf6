from drainwise.extensions import db
from drainwise.utils.timezone_utils import utc_now

class StandardCategory(db.Model):
    __tablename__ = 'standard_category'

    id = db.Column(db.Integer, primary_key=True)
    category_id = db.Column(db.String(128), nullable=False, unique=True)
    category_name = db.Column(db.String(256), nullable=False)
    description = db.Column(db.Text, nullable=True)
    icon_name = db.Column(db.String(64), nullable=False, default='Edit')
    is_default = db.Column(db.Boolean, nullable=False, default=True)
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    created_at = db.Column(db.DateTime, default=utc_now)

    def __repr__(self):
        return f"<StandardCategory id={self.id} category_id={self.category_id}>"
