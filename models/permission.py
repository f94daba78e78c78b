from datetime import datetime, timezone
from extensions import db
from utils.constants import GUARD_NAME

class Permission(db.Model):
    __tablename__ = "permissions"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)  # ex: "manage-users"
    guard_name = db.Column(db.String(50), nullable=False, default=GUARD_NAME)
    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        db.UniqueConstraint('name', 'guard_name', name='uq_permissions_name_guard'),
    )

    def __repr__(self):
        return f"<Permission {self.name}>"

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'guard_name': self.guard_name,
        }
