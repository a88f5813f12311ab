from flask import current_app
from flask_jwt_extended import create_access_token
from sqlalchemy.exc import SQLAlchemyError

from library_app.errors import PersistenceError, ValidationError
from library_app.models.user import User
from library_app.repositories.user_repo import UserRepo
from library_app.services.mail_service import MailService
from library_app.utils.validation import ensure_valid, parse_date

PROFILE_FIELDS = ("name", "gender", "date_of_birth")


class AuthService:
    @staticmethod
    def _apply_profile(user: User, data: dict):
        for key in PROFILE_FIELDS:
            if key not in data:
                continue
            value = data.get(key)
            if key == "date_of_birth":
                value = parse_date(value, "date_of_birth")
            elif isinstance(value, str):
                value = value.strip() or None
            setattr(user, key, value)

    @staticmethod
    def _apply_password(user: User, data: dict):
        password = data.get("password")
        confirmation = data.get("password_confirmation")
        if confirmation is not None and password != confirmation:
            raise ValidationError({"password_confirmation": ["doesn't match Password"]})
        user.set_password(password or "")

    @staticmethod
    def _save(user: User):
        ensure_valid(user)
        try:
            return UserRepo.create(user)
        except SQLAlchemyError as e:
            UserRepo.rollback()
            current_app.logger.warning(f"[auth] user save failed: {e}")
            raise PersistenceError("User could not be saved")

    @staticmethod
    def register(data: dict, role: str = "member"):
        user = User(email=User.normalize_email(data.get("email")), role=role)
        AuthService._apply_profile(user, data)
        AuthService._apply_password(user, data)
        AuthService._save(user)

        current_app.logger.info(f"[auth] registered user id={user.id}")
        MailService.send_welcome_mail(user)
        return user

    @staticmethod
    def authenticate(email: str, password: str):
        user = UserRepo.get_by_email(email)
        if not user or not user.check_password(password):
            raise ValueError("Invalid email or password.")
        return user

    @staticmethod
    def login(email: str, password: str):
        user = AuthService.authenticate(email, password)
        token = create_access_token(
            identity=str(user.id),
            additional_claims={"role": user.role, "name": user.name}
        )
        return token, user

    @staticmethod
    def find_for_oauth(auth: dict):
        info = auth.get("info") or {}
        return UserRepo.get_by_email(info.get("email"))

    @staticmethod
    def omniauth_session_data(auth: dict) -> dict:
        info = auth.get("info") or {}
        return {
            "provider": auth.get("provider"),
            "uid": auth.get("uid"),
            "email": info.get("email"),
            "name": info.get("name"),
            "image": info.get("image"),
        }

    @staticmethod
    def register_with_omniauth(omniauth_data: dict, data: dict):
        """Create an account from stored OAuth data plus the submitted form.

        Provider, uid and email always come from ``omniauth_data``.
        """
        user = User(
            email=User.normalize_email(omniauth_data.get("email")),
            provider=omniauth_data.get("provider"),
            uid=omniauth_data.get("uid"),
            role="member",
        )
        AuthService._apply_profile(user, data)
        if data.get("password") or data.get("password_confirmation"):
            AuthService._apply_password(user, data)
        AuthService._save(user)
        current_app.logger.info(f"[auth] registered user id={user.id} via {user.provider}")
        return user

    @staticmethod
    def update_profile(user: User, data: dict):
        try:
            AuthService._apply_profile(user, data)
            # blank password fields mean "keep the current password"
            if data.get("password") or data.get("password_confirmation"):
                AuthService._apply_password(user, data)
            ensure_valid(user)
            UserRepo.update()
        except ValidationError:
            UserRepo.rollback()
            raise
        except SQLAlchemyError as e:
            UserRepo.rollback()
            current_app.logger.warning(f"[auth] profile update failed for user id={user.id}: {e}")
            raise PersistenceError("Profile could not be updated")
        return user
