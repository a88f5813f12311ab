from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_jwt_extended import JWTManager
from flask_mail import Mail

# Extensions are created unbound; create_app() binds them to the app
db = SQLAlchemy()
migrate = Migrate()
jwt = JWTManager()
mail = Mail()
