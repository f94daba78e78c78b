# routes/__init__.py
from .auth_routes import auth_bp
from .role_routes import role_bp
from .user_routes import user_bp
from .file_routes import file_bp

def register_blueprints(app):
    app.register_blueprint(auth_bp, url_prefix="/auth")
    app.register_blueprint(role_bp, url_prefix="/rbac/roles")
    app.register_blueprint(user_bp, url_prefix="/rbac/users")
    app.register_blueprint(file_bp, url_prefix="/files")
