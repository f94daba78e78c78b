from datetime import datetime, timezone
from extensions import db
from utils.constants import GUARD_NAME

# Membership is modelled as explicit association tables; rows are removed by
# the stores themselves when a role or user is deleted.
role_permissions = db.Table(
    "role_permissions",
    db.Column("role_id", db.Integer, db.ForeignKey("roles.id"), primary_key=True),
    db.Column("permission_id", db.Integer, db.ForeignKey("permissions.id"), primary_key=True)
)

user_roles = db.Table(
    "user_roles",
    db.Column("user_id", db.Integer, db.ForeignKey("users.id"), primary_key=True),
    db.Column("role_id", db.Integer, db.ForeignKey("roles.id"), primary_key=True)
)

class Role(db.Model):
    __tablename__ = "roles"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    guard_name = db.Column(db.String(50), nullable=False, default=GUARD_NAME)
    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc),
                           onupdate=lambda: datetime.now(timezone.utc))

    permissions = db.relationship("Permission", secondary=role_permissions, lazy="selectin",
                                  order_by="Permission.id")

    __table_args__ = (
        db.UniqueConstraint('name', 'guard_name', name='uq_roles_name_guard'),
    )

    def __repr__(self):
        return f"<Role {self.name}>"

    @property
    def permission_names(self):
        return frozenset(p.name for p in self.permissions)

    def to_dict(self, with_permissions=True):
        data = {
            'id': self.id,
            'name': self.name,
            'guard_name': self.guard_name,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }
        if with_permissions:
            data['permissions'] = [p.to_dict() for p in self.permissions]
        return data
