from datetime import datetime, timezone
from extensions import db
from werkzeug.security import generate_password_hash, check_password_hash
from services.access_control import effective_permissions
from .role import user_roles

class User(db.Model):
    """
    An authenticated principal.

    Permissions are always derived from ``roles``; a user never holds a
    permission directly and there is no storage for one.
    """
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    email_verified_at = db.Column(db.DateTime, nullable=True)
    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc),
                           onupdate=lambda: datetime.now(timezone.utc))

    # Relations
    roles = db.relationship("Role", secondary=user_roles, lazy="selectin", order_by="Role.id")
    files = db.relationship("File", back_populates="owner", lazy=True)
    tokens = db.relationship("AccessToken", back_populates="user", lazy=True)

    def __repr__(self):
        return f"<User {self.email}>"

    def set_password(self, password):
        self.password_hash = generate_password_hash(password)
        return self.password_hash

    def check_password(self, password: str) -> bool:
        if not password:
            return False
        return check_password_hash(self.password_hash, password)

    @property
    def role_names(self):
        return [role.name for role in self.roles]

    def to_dict(self, with_permissions=False):
        data = {
            'id': self.id,
            'name': self.name,
            'email': self.email,
            'email_verified_at': self.email_verified_at.isoformat() if self.email_verified_at else None,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
            'roles': [role.to_dict(with_permissions=with_permissions) for role in self.roles],
        }
        if with_permissions:
            data['permissions'] = sorted(effective_permissions(self))
        return data
