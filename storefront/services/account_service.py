# storefront/services/account_service.py
import re
from datetime import date
from flask import current_app
from flask_jwt_extended import create_access_token
from sqlalchemy.exc import IntegrityError
from werkzeug.security import check_password_hash, generate_password_hash
from ..extensions import db
from ..errors import ConflictError, InvalidInputError, NotFoundError, UnauthorizedError
from ..model import Cart, User
from ..repositories import UserRepository, users
from ..utils.fields import UNSET, is_set, pick

MOBILE_RE = re.compile(r"^[0-9]{10}$")
EMAIL_RE = re.compile(r"^\w+([.-]?\w+)*@\w+([.-]?\w+)*(\.\w{2,3})+$")
# at least 8 chars with lower, upper, digit and a symbol
PASSWORD_RE = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[^A-Za-z0-9]).{8,}$")


def _required_text(data, key):
    v = data.get(key)
    if not isinstance(v, str) or not v.strip():
        raise InvalidInputError(f"{key} is required")
    return v.strip()

def _parse_date(v, key):
    if not isinstance(v, str):
        raise InvalidInputError(f"{key} must be an ISO date (YYYY-MM-DD)")
    try:
        return date.fromisoformat(v.strip()[:10])
    except ValueError:
        raise InvalidInputError(f"{key} must be an ISO date (YYYY-MM-DD)")

def _parse_email(v):
    if v is None or v == "":
        return None
    if not isinstance(v, str) or not EMAIL_RE.match(v.strip().lower()):
        raise InvalidInputError(f"{v} is not a valid email address!")
    return v.strip().lower()


def issue_token(user: User) -> str:
    return create_access_token(identity=str(user.id), additional_claims={"role": user.role})


def register_customer(data: dict) -> User:
    name = _required_text(data, "name")
    address = _required_text(data, "address")
    mobile = _required_text(data, "mobile_number")
    if not MOBILE_RE.match(mobile):
        raise InvalidInputError(f"{mobile} is not a valid mobile number!")
    dob = _parse_date(data.get("date_of_birth"), "date_of_birth")
    email = _parse_email(data.get("email"))
    password = data.get("password")
    if not isinstance(password, str) or not PASSWORD_RE.match(password):
        raise InvalidInputError(
            "Password must be at least 8 characters long and include uppercase, "
            "lowercase, numbers and special characters"
        )

    if users.find_by_mobile(mobile, role="customer"):
        raise ConflictError("User with this mobile number already exists")

    user = User(
        name=name,
        address=address,
        mobile_number=mobile,
        date_of_birth=dob,
        email=email,
        password_hash=generate_password_hash(password),
        role="customer",
    )
    try:
        users.add(user)
        # every customer starts with an empty cart
        db.session.add(Cart(user_id=user.id, subtotal=0, tax=0, discount=0, total=0))
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ConflictError("User with this mobile number already exists")

    current_app.logger.info("customer %s registered", user.id)
    return user


def authenticate(mobile_number, password, role: str) -> User:
    if not isinstance(mobile_number, str) or not isinstance(password, str) or not password:
        raise InvalidInputError("mobile_number and password are required")
    user = users.find_by_mobile(mobile_number.strip(), role=role)
    if not user or not check_password_hash(user.password_hash, password):
        raise UnauthorizedError("Invalid mobile number or password")
    return user


def get_profile(user_id) -> User:
    user = users.get(user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


def update_profile(user_id, data: dict) -> User:
    user = get_profile(user_id)

    name = pick(data, "name")
    address = pick(data, "address")
    dob = pick(data, "date_of_birth")
    email = pick(data, "email")

    changes = {}
    for key, value in (("name", name), ("address", address)):
        if is_set(value):
            if not isinstance(value, str) or not value.strip():
                raise InvalidInputError(f"{key} must be a non-empty string")
            changes[key] = value.strip()
    if is_set(dob):
        changes["date_of_birth"] = _parse_date(dob, "date_of_birth")
    if is_set(email):
        changes["email"] = _parse_email(email)

    for key, value in changes.items():
        setattr(user, key, value)
    db.session.commit()
    return user


def ensure_admin(repo: UserRepository, *, name, mobile_number, password,
                 email=None, address="Admin Office", date_of_birth=date(1990, 1, 1)):
    """
    Idempotent: returns (admin, created). When an admin already exists nothing
    is written.
    """
    existing = repo.find_admin()
    if existing is not None:
        current_app.logger.info("Admin user already exists.")
        return existing, False

    admin = User(
        name=name,
        address=address,
        mobile_number=mobile_number,
        date_of_birth=date_of_birth,
        email=email,
        password_hash=generate_password_hash(password),
        role="admin",
    )
    repo.add(admin)
    db.session.commit()
    current_app.logger.info("Admin user created: %s (mobile %s)", admin.id, mobile_number)
    return admin, True


def ensure_admin_from_config(config) -> tuple:
    return ensure_admin(
        users,
        name=config["ADMIN_NAME"],
        mobile_number=config["ADMIN_MOBILE_NUMBER"],
        password=config["ADMIN_PASSWORD"],
        email=config.get("ADMIN_EMAIL"),
        address=config.get("ADMIN_ADDRESS", "Admin Office"),
    )
